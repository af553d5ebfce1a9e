"""
Data sources.

A source is a named root of content. Its identifier acts as a namespace in
qualified entry identifiers of the form ``source_id:path``.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from onelo.errors import ReservedSeparator

SEPARATOR = ":"


def guard_against_char(value: str, ch: str = SEPARATOR, what: str = "Source identifiers") -> None:
    """Raise `ReservedSeparator` if ``ch`` is present in ``value``."""
    if ch in value:
        raise ReservedSeparator(value, what)


@dataclass(frozen=True, order=True)
class SourceId:
    """A source identifier. It must not contain ``:``; the empty string is allowed."""

    value: str

    def __post_init__(self) -> None:
        guard_against_char(self.value)

    @classmethod
    def parse(cls, s: str) -> "SourceId":
        return cls(s)

    def __str__(self) -> str:
        return self.value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Source:
    """A registered root of content."""

    id: SourceId
    route: Path
    # Checksum of the whole tree, e.g. a VCS revision.
    checksum: bytes | None = None
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "route", Path(self.route))

    def refresh(self, checksum: bytes | None = None, timestamp: datetime | None = None) -> "Source":
        """Return a copy with the tracked tree checksum and timestamp updated for a new build."""
        return dataclasses.replace(self, checksum=checksum, timestamp=timestamp or _utcnow())
