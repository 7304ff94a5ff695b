"""Store module - Storage backends for caching."""

from tablecache_core.store.backend import (
    Cache,
    MISSING,
    StorageStats,
)
from tablecache_core.store.debounce import Debouncer, DebouncedFileStore
from tablecache_core.store.ini import IniFileCache
from tablecache_core.store.record_log import RecordLogCache
from tablecache_core.store.leveldb import LevelDBCache

__all__ = [
    "Cache",
    "MISSING",
    "StorageStats",
    "Debouncer",
    "DebouncedFileStore",
    "IniFileCache",
    "RecordLogCache",
    "LevelDBCache",
]
