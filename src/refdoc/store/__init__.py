"""Record store interface and the in-memory implementation."""

from .base import Query, QueryResult, RecordStore
from .loader import build_store, load_export
from .memory import Connection, MemoryRecordStore

__all__ = [
    "RecordStore",
    "Query",
    "QueryResult",
    "MemoryRecordStore",
    "Connection",
    "load_export",
    "build_store",
]
