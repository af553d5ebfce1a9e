"""Collection of candidate files from a source directory."""

import logging
from pathlib import Path

from onelo.content import Content
from onelo.content_type import known_extensions

logger = logging.getLogger(__name__)


def is_valid_file(path: Path) -> bool:
    """Check if a path is a file with an extension the content-type resolver knows."""
    return path.is_file() and path.suffix[1:] in known_extensions()


def find_markdown_files(root: Path, recursive: bool = True) -> list[Path]:
    """
    Get all valid files under a directory.

    Args:
        root: The directory to walk.
        recursive: Whether to descend into subdirectories.

    Returns:
        The matching paths, sorted.

    Raises:
        FileNotFoundError: If ``root`` is not a directory.

    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Source directory not found: {root}")

    candidates = root.rglob("*") if recursive else root.iterdir()
    paths = sorted(p for p in candidates if is_valid_file(p))
    logger.debug("Found %d candidate files under %s", len(paths), root)
    return paths


def read_content(path: Path) -> Content:
    """Read a file as binary and wrap it as `Content`."""
    return Content(Path(path).read_bytes())
