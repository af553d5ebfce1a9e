from datetime import datetime, timezone
from pathlib import Path

import pytest

from onelo.build import run_build
from onelo.cache import CacheStore
from onelo.checksum import Checksum
from onelo.context import BuildContext
from onelo.errors import ReservedSeparator
from onelo.source import Source, SourceId

ALL_ENTRIES = ["notes:01.md", "notes:02.md", "notes:articles/drafts/03.md", "notes:articles/intro.md"]


def test_first_build_adds_everything(source: Source, cache_file: Path) -> None:
    report = run_build(BuildContext.create(), source, cache_file)

    assert report.added == ALL_ENTRIES
    assert report.changed == [] and report.unchanged == [] and report.skipped == []
    # 02.md and drafts/03.md hold the same bytes.
    assert report.new_contents == 3
    assert report.summary() == "4 files parsed. 4 added, 0 changed, 0 unchanged, 0 skipped."


def test_cache_contents_after_build(source: Source, cache_file: Path) -> None:
    context = BuildContext(version="9.9.9", created=datetime(2024, 1, 1, tzinfo=timezone.utc))
    run_build(context, source, cache_file)

    with CacheStore(cache_file) as store:
        store.bootstrap()
        stored_source = store.get_source("notes")
        entries = store.list_entries("notes")
        intro = store.get_entry("notes:articles/intro.md")

    assert stored_source is not None
    assert stored_source.timestamp == context.created
    assert stored_source.route == source.route
    assert [e.qualified_id for e in entries] == ALL_ENTRIES
    assert intro is not None
    assert intro.content_id == Checksum.new(b"# Intro\n")
    assert [p.name for p in cache_file.parent.iterdir()] == ["onelo.db"]


def test_rebuild_detects_changes(source: Source, notes_dir: Path, cache_file: Path) -> None:
    run_build(BuildContext.create(), source, cache_file)
    (notes_dir / "01.md").write_text("# Rewritten\n")
    (notes_dir / "new.md").write_text("# New\n")

    report = run_build(BuildContext.create(), source, cache_file)

    assert report.changed == ["notes:01.md"]
    assert report.added == ["notes:new.md"]
    assert report.unchanged == ["notes:02.md", "notes:articles/drafts/03.md", "notes:articles/intro.md"]
    assert report.new_contents == 2


def test_unchanged_rebuild(source: Source, cache_file: Path) -> None:
    run_build(BuildContext.create(), source, cache_file)

    report = run_build(BuildContext.create(), source, cache_file)

    assert report.unchanged == ALL_ENTRIES
    assert report.new_contents == 0


def test_invalid_entry_is_skipped(source: Source, notes_dir: Path, cache_file: Path) -> None:
    (notes_dir / "a:b.md").write_text("# Colon\n")

    report = run_build(BuildContext.create(), source, cache_file)

    assert report.skipped == ["notes:a:b.md"]
    assert report.parsed == 4


def test_invalid_entry_aborts_strict_build(source: Source, notes_dir: Path, cache_file: Path) -> None:
    (notes_dir / "a:b.md").write_text("# Colon\n")

    with pytest.raises(ReservedSeparator):
        run_build(BuildContext.create(), source, cache_file, strict=True)

    # The store was still closed cleanly.
    assert [p.name for p in cache_file.parent.iterdir()] == ["onelo.db"]


def test_in_memory_build(source: Source) -> None:
    report = run_build(BuildContext.create(), source, None)

    assert report.parsed == 4


def test_missing_source_directory(tmp_path: Path, cache_file: Path) -> None:
    source = Source(SourceId("notes"), tmp_path / "missing")

    with pytest.raises(FileNotFoundError):
        run_build(BuildContext.create(), source, cache_file)
    assert not cache_file.exists()
