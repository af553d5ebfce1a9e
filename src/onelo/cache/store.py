"""
The cache store.

A `CacheStore` owns one SQLite database for the length of a build. It moves
through ``CLOSED -> CONNECTED -> BOOTSTRAPPED -> CLOSED``. While connected the
database runs in write-ahead-log mode so another process can read a consistent
snapshot; `disconnect` folds the log back into the main file and switches the
journal back to ``delete`` so no side files are left behind.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import Any

from sqlalchemy import event, inspect, select
from sqlalchemy.engine import URL, Engine, Row, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from onelo.cache.models import Base, ContentRecord, SourceEntryRecord, SourceRecord
from onelo.checksum import Checksum
from onelo.content import Content
from onelo.errors import FormatError, StorageError, StoreStateError, UnknownPattern
from onelo.source import SEPARATOR, Source, SourceId
from onelo.source_entry import SourceEntry

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class StoreState(Enum):
    """Lifecycle states of a `CacheStore`."""

    CLOSED = "closed"
    CONNECTED = "connected"
    BOOTSTRAPPED = "bootstrapped"


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class CacheStore:
    """Persists sources, source entries and content for one build."""

    def __init__(self, location: str | Path | None = None):
        """
        Initialize a closed store.

        Args:
            location: Path of the database file. ``None`` or ``":memory:"`` gives an
                ephemeral in-memory database.

        """
        self.location: Path | None = None if location in (None, MEMORY) else Path(location)
        self.state = StoreState.CLOSED
        self._engine: Engine | None = None
        self._session_local: sessionmaker[Session] | None = None

    @property
    def in_memory(self) -> bool:
        return self.location is None

    @property
    def database_url(self) -> URL:
        if self.location is None:
            return URL.create("sqlite")
        return URL.create("sqlite", database=str(self.location))

    @property
    def engine(self) -> Engine:
        """Return the SQLAlchemy engine of a connected store."""
        if self._engine is None:
            raise StoreStateError("Cache store is not connected.")
        return self._engine

    # --- Lifecycle ---

    def connect(self) -> "CacheStore":
        """
        Open the database and switch it to write-ahead-log mode.

        Raises:
            StoreStateError: If the store is already connected.
            StorageError: If the database cannot be opened or configured.

        """
        self._require(StoreState.CLOSED)

        # A single pooled connection: one writer for the whole build.
        engine = create_engine(
            self.database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_foreign_keys)
        self._engine = engine

        try:
            row = self._pragma("journal_mode=WAL")
        except SQLAlchemyError as e:
            self._release()
            raise StorageError(f"Could not open cache store at {self.database_url}", e) from e

        mode = str(row[0]).lower() if row else ""
        if not self.in_memory and mode != "wal":
            self._release()
            raise StorageError(f"Could not switch {self.location} to WAL mode (journal mode is '{mode}')")

        self._session_local = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self.state = StoreState.CONNECTED
        logger.info("Connected cache store (%s), journal mode '%s'", self.database_url, mode)
        return self

    def bootstrap(self) -> None:
        """
        Create the cache schema if it does not exist yet.

        Safe to call on a populated cache and safe to call repeatedly.
        """
        self._require(StoreState.CONNECTED, StoreState.BOOTSTRAPPED)
        try:
            Base.metadata.create_all(self.engine, checkfirst=True)
        except SQLAlchemyError as e:
            logger.exception("Error bootstrapping cache schema.")
            raise StorageError("Could not bootstrap the cache schema", e) from e
        self.state = StoreState.BOOTSTRAPPED
        logger.info("Cache schema bootstrapped (or verified existing) for (%s)", self.database_url)

    def disconnect(self) -> None:
        """
        Checkpoint the write-ahead log, switch back to ``delete`` journal mode and close.

        Disconnecting a closed store does nothing.
        """
        if self.state is StoreState.CLOSED:
            return

        try:
            checkpoint = self._pragma("wal_checkpoint(RESTART)")
            if checkpoint and checkpoint[0]:
                logger.warning("WAL checkpoint for %s could not complete, a reader is still active.", self.location)
            row = self._pragma("journal_mode=DELETE")
            mode = str(row[0]).lower() if row else ""
            if mode not in ("delete", "memory"):
                raise StorageError(f"Could not switch {self.location} out of WAL mode (journal mode is '{mode}')")
        except SQLAlchemyError as e:
            raise StorageError(f"Could not cleanly close cache store at {self.database_url}", e) from e
        finally:
            self._release()
        logger.info("Disconnected cache store (%s)", self.database_url)

    def __enter__(self) -> "CacheStore":
        if self.state is StoreState.CLOSED:
            self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()

    # --- Introspection ---

    def journal_mode(self) -> str:
        self._require(StoreState.CONNECTED, StoreState.BOOTSTRAPPED)
        try:
            row = self._pragma("journal_mode")
        except SQLAlchemyError as e:
            raise StorageError("Could not read the journal mode", e) from e
        return str(row[0]).lower() if row else ""

    def table_names(self) -> list[str]:
        self._require(StoreState.CONNECTED, StoreState.BOOTSTRAPPED)
        try:
            return sorted(inspect(self.engine).get_table_names())
        except SQLAlchemyError as e:
            raise StorageError("Could not inspect the cache schema", e) from e

    # --- Sources ---

    def put_source(self, source: Source) -> None:
        """Insert or update a source row."""
        with self._transaction() as session:
            session.merge(SourceRecord.from_source(source))
        logger.debug("Stored source '%s' (%s)", source.id, source.route)

    def get_source(self, source_id: SourceId | str) -> Source | None:
        source_id = _as_source_id(source_id)
        with self._transaction() as session:
            record = session.get(SourceRecord, source_id)
            return record.to_source() if record else None

    # --- Content ---

    def put_content(self, content: Content) -> bool:
        """
        Store a piece of content unless a row with the same checksum exists.

        Returns:
            True if a new row was inserted, False if the content was already cached.

        """
        with self._transaction() as session:
            if session.get(ContentRecord, content.identity) is not None:
                logger.debug("Content %s already cached.", content.identity)
                return False
            session.add(ContentRecord.from_content(content))
        logger.debug("Cached content %s (%d bytes)", content.identity, content.size)
        return True

    def has_content(self, checksum: Checksum) -> bool:
        with self._transaction() as session:
            stmt = select(ContentRecord.checksum).where(ContentRecord.checksum == checksum)
            return session.execute(stmt).first() is not None

    def get_content(self, checksum: Checksum) -> Content | None:
        """
        Look up content by checksum.

        Raises:
            StorageError: If the stored blob no longer hashes to its checksum.

        """
        with self._transaction() as session:
            record = session.get(ContentRecord, checksum)
            if record is None:
                return None
            content = Content(record.blob)
        if content.identity != checksum:
            raise StorageError(f"Cached content {checksum} is corrupt: its blob hashes to {content.identity}")
        return content

    # --- Source entries ---

    def put_entry(self, entry: SourceEntry) -> None:
        """Insert or update a source entry row. Its source and content must already be stored."""
        with self._transaction() as session:
            session.merge(SourceEntryRecord.from_entry(entry))
        logger.debug("Stored entry '%s' -> %s", entry, entry.content_id)

    def get_entry(self, qualified_id: str) -> SourceEntry | None:
        """Look up a source entry by its ``source_id:path`` identifier."""
        source_part, sep, path = qualified_id.partition(SEPARATOR)
        if not sep:
            raise UnknownPattern(qualified_id)
        key = (SourceId.parse(source_part), path)
        with self._transaction() as session:
            record = session.get(SourceEntryRecord, key)
            return record.to_entry() if record else None

    def list_entries(self, source_id: SourceId | str) -> list[SourceEntry]:
        """Return every entry of a source, ordered by path."""
        source_id = _as_source_id(source_id)
        with self._transaction() as session:
            stmt = (
                select(SourceEntryRecord)
                .where(SourceEntryRecord.source_id == source_id)
                .order_by(SourceEntryRecord.path)
            )
            return [record.to_entry() for record in session.scalars(stmt)]

    # --- Internals ---

    def _require(self, *states: StoreState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise StoreStateError(f"Cache store is {self.state.value}; this operation needs it to be {allowed}.")

    def _pragma(self, statement: str) -> Row[Any] | None:
        # journal_mode cannot change inside a transaction.
        with self.engine.execution_options(isolation_level="AUTOCOMMIT").connect() as conn:
            return conn.exec_driver_sql(f"PRAGMA {statement}").first()

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        self._require(StoreState.CONNECTED, StoreState.BOOTSTRAPPED)
        if self._session_local is None:
            raise StoreStateError("Cache store has no session factory.")
        session = self._session_local()
        try:
            with session.begin():
                yield session
        except (SQLAlchemyError, FormatError) as e:
            raise StorageError("Cache store operation failed", e) from e
        finally:
            session.close()

    def _release(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_local = None
        self.state = StoreState.CLOSED


def _as_source_id(source_id: SourceId | str) -> SourceId:
    return source_id if isinstance(source_id, SourceId) else SourceId.parse(source_id)


def connect(location: str | Path | None = None) -> CacheStore:
    """Open a cache store at a file path, or in memory when no path is given."""
    return CacheStore(location).connect()
