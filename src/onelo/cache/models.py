"""SQLAlchemy models for the cache schema."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sqlalchemy import CheckConstraint, ForeignKey, Integer, LargeBinary, MetaData, String
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, MappedAsDataclass, mapped_column
from sqlalchemy.types import DateTime, TypeDecorator

from onelo.checksum import Checksum
from onelo.content import Content
from onelo.content_type import ContentType
from onelo.source import Source, SourceId
from onelo.source_entry import SourceEntry

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(MappedAsDataclass, DeclarativeBase, kw_only=True):
    """
    Base class for SQLAlchemy declarative models that are also dataclasses.
    kw_only=True is applied globally by passing it in the inheritance list.
    """

    metadata = MetaData(naming_convention=naming_convention)


# --- Column types ---


class ChecksumType(TypeDecorator[Checksum]):
    """Stores a `Checksum` in its self-describing binary form."""

    impl = LargeBinary
    cache_ok = True

    def process_bind_param(self, value: Checksum | None, dialect: Dialect) -> bytes | None:
        return None if value is None else value.to_bytes()

    def process_result_value(self, value: Any, dialect: Dialect) -> Checksum | None:
        return None if value is None else Checksum.from_bytes(bytes(value))


class SourceIdType(TypeDecorator[SourceId]):
    impl = String
    cache_ok = True

    def process_bind_param(self, value: SourceId | str | None, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return str(SourceId.parse(value) if isinstance(value, str) else value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> SourceId | None:
        return None if value is None else SourceId.parse(value)


class ContentTypeType(TypeDecorator[ContentType]):
    """Stores a `ContentType` as its IANA media type."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: ContentType | None, dialect: Dialect) -> str | None:
        return None if value is None else value.iana

    def process_result_value(self, value: str | None, dialect: Dialect) -> ContentType | None:
        return None if value is None else ContentType.from_stored(value)


class UtcDateTime(TypeDecorator[datetime]):
    """SQLite keeps no offset, so values are stored as naive UTC and read back as aware UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        return None if value is None else value.replace(tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Tables ---


class SourceRecord(Base):
    """A registered source root."""

    __tablename__ = "sources"

    id: Mapped[SourceId] = mapped_column(SourceIdType(255), primary_key=True)
    route: Mapped[str] = mapped_column(String(4096), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(UtcDateTime(), nullable=False)
    # Checksum of the whole tree, e.g. a VCS revision.
    checksum: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True, default=None)

    @classmethod
    def from_source(cls, source: Source) -> "SourceRecord":
        return cls(id=source.id, route=str(source.route), timestamp=source.timestamp, checksum=source.checksum)

    def to_source(self) -> Source:
        return Source(id=self.id, route=Path(self.route), checksum=self.checksum, timestamp=self.timestamp)

    def __repr__(self) -> str:
        return f"SourceRecord(id='{self.id}', route='{self.route}')"


class ContentRecord(Base):
    """A unique blob, keyed by its checksum."""

    __tablename__ = "contents"

    checksum: Mapped[Checksum] = mapped_column(ChecksumType(34), primary_key=True)
    blob: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime(), nullable=False, default_factory=_utcnow)

    __table_args__ = (
        CheckConstraint("length(checksum) >= 2", name="checksum_has_header"),
        CheckConstraint("size = length(blob)", name="size_matches_blob"),
    )

    @classmethod
    def from_content(cls, content: Content) -> "ContentRecord":
        return cls(checksum=content.identity, blob=content.blob, size=content.size)

    def __repr__(self) -> str:
        return f"ContentRecord(checksum='{str(self.checksum)[:16]}...', size={self.size})"


class SourceEntryRecord(Base):
    """A file within a source, pointing at the content it held when last indexed."""

    __tablename__ = "source_entries"

    source_id: Mapped[SourceId] = mapped_column(SourceIdType(255), ForeignKey("sources.id"), primary_key=True)
    path: Mapped[str] = mapped_column(String(4096), primary_key=True)
    content_type: Mapped[ContentType] = mapped_column(ContentTypeType(255), nullable=False)
    content_checksum: Mapped[Checksum | None] = mapped_column(
        ChecksumType(34), ForeignKey("contents.checksum"), nullable=True, index=True, default=None
    )
    updated_at: Mapped[datetime] = mapped_column(UtcDateTime(), nullable=False, default_factory=_utcnow)

    @classmethod
    def from_entry(cls, entry: SourceEntry) -> "SourceEntryRecord":
        return cls(
            source_id=entry.source_id,
            path=entry.path,
            content_type=entry.content_type,
            content_checksum=entry.content_id,
        )

    def to_entry(self) -> SourceEntry:
        return SourceEntry(
            path=self.path,
            source_id=self.source_id,
            content_type=self.content_type,
            content_id=self.content_checksum,
        )

    def __repr__(self) -> str:
        return f"SourceEntryRecord('{self.source_id}:{self.path}')"
