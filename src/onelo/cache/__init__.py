"""Cache storage for sources, source entries and content."""

from onelo.cache.models import Base, ContentRecord, SourceEntryRecord, SourceRecord
from onelo.cache.store import CacheStore, StoreState, connect

__all__ = [
    "Base",
    "CacheStore",
    "ContentRecord",
    "SourceEntryRecord",
    "SourceRecord",
    "StoreState",
    "connect",
]
