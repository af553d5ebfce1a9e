from collections.abc import Generator
from pathlib import Path

import pytest

from onelo.cache.store import CacheStore
from onelo.source import Source, SourceId

NOTE_01 = """+++
id = "01"
+++

# Lorem ipsum

Lorem ipsum dolor sit amet, consectetur adipiscing elit.
"""

NOTE_02 = """+++
id = "02"
+++

# Dolor sit amet
"""


@pytest.fixture
def store() -> Generator[CacheStore, None, None]:
    """An in-memory cache store, connected and bootstrapped."""
    cache = CacheStore().connect()
    cache.bootstrap()
    yield cache
    cache.disconnect()


@pytest.fixture
def cache_file(tmp_path: Path) -> Path:
    """Path of a cache database file that does not exist yet."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return cache_dir / "onelo.db"


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """
    A small source tree:

        notes/01.md
        notes/02.md
        notes/readme.txt
        notes/articles/intro.md
        notes/articles/drafts/03.md
    """
    root = tmp_path / "notes"
    (root / "articles" / "drafts").mkdir(parents=True)
    (root / "01.md").write_text(NOTE_01)
    (root / "02.md").write_text(NOTE_02)
    (root / "readme.txt").write_text("not a note")
    (root / "articles" / "intro.md").write_text("# Intro\n")
    (root / "articles" / "drafts" / "03.md").write_text(NOTE_02)
    return root


@pytest.fixture
def source(notes_dir: Path) -> Source:
    return Source(SourceId("notes"), notes_dir)
