from pathlib import Path

import pytest

from onelo.content import Content
from onelo.files import find_markdown_files, read_content


def test_get_valid_files(notes_dir: Path) -> None:
    paths = find_markdown_files(notes_dir, recursive=False)

    assert [p.name for p in paths] == ["01.md", "02.md"]


def test_get_valid_files_recursive(notes_dir: Path) -> None:
    paths = find_markdown_files(notes_dir)

    assert [p.relative_to(notes_dir).as_posix() for p in paths] == [
        "01.md",
        "02.md",
        "articles/drafts/03.md",
        "articles/intro.md",
    ]


def test_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        find_markdown_files(tmp_path / "missing")


def test_read_content(notes_dir: Path) -> None:
    content = read_content(notes_dir / "01.md")

    assert content == Content((notes_dir / "01.md").read_bytes())
    assert content.text().startswith("+++\nid = \"01\"")
