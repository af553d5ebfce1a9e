"""Indexes one source into the cache."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from onelo.cache.store import CacheStore
from onelo.context import BuildContext
from onelo.errors import OneloError
from onelo.files import find_markdown_files, read_content
from onelo.source import Source
from onelo.source_entry import SourceEntry

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """What a build found, entry by entry."""

    added: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    new_contents: int = 0

    @property
    def parsed(self) -> int:
        return len(self.added) + len(self.changed) + len(self.unchanged)

    def summary(self) -> str:
        return (
            f"{self.parsed} files parsed. "
            f"{len(self.added)} added, {len(self.changed)} changed, "
            f"{len(self.unchanged)} unchanged, {len(self.skipped)} skipped."
        )


def run_build(
    context: BuildContext,
    source: Source,
    cache_location: str | Path | None,
    strict: bool = False,
) -> BuildReport:
    """
    Walk ``source.route`` and record every markdown file in the cache.

    Each file becomes a `Content` (deduplicated by checksum) and a `SourceEntry`
    pointing at it. Entries are compared with the previous build to tell added,
    changed and unchanged files apart.

    Args:
        context: The build context; its timestamp is recorded on the source.
        source: The source to index.
        cache_location: The cache database file, or None for an in-memory cache.
        strict: Re-raise entry errors instead of skipping the file.

    Raises:
        OneloError: For an invalid entry when ``strict`` is set.
        StorageError: If the cache cannot be read or written.

    """
    report = BuildReport()
    logger.info("Building source '%s' from %s (onelo %s)", source.id, source.route, context.version)

    paths = find_markdown_files(source.route)

    with CacheStore(cache_location) as store:
        store.bootstrap()
        store.put_source(source.refresh(checksum=source.checksum, timestamp=context.created))

        for path in paths:
            relative = path.relative_to(source.route).as_posix()
            qualified_id = f"{source.id}:{relative}"
            try:
                entry = SourceEntry.parse(qualified_id)
            except OneloError as e:
                if strict:
                    raise
                logger.warning("Skipping %s: %s", qualified_id, e)
                report.skipped.append(qualified_id)
                continue

            content = read_content(path)
            entry = entry.with_content(content.identity)
            previous = store.get_entry(entry.qualified_id)

            if store.put_content(content):
                report.new_contents += 1
            store.put_entry(entry)

            if previous is None:
                report.added.append(entry.qualified_id)
            elif previous.content_id != entry.content_id:
                report.changed.append(entry.qualified_id)
            else:
                report.unchanged.append(entry.qualified_id)

    logger.info("Build of '%s' finished: %s", source.id, report.summary())
    return report
