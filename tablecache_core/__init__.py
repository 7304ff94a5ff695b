"""TableCache - Table-Partitioned Cache with Pluggable Persistence.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

One asynchronous cache contract with three persistence strategies:
- INI file (in-memory tables, debounced snapshot writes)
- Record log (in-memory tables, one JSON record per line)
- LevelDB (embedded sorted store, one namespace per table)

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                        TableCache System                        │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌─────────────────────────────┐  ┌─────────────┐              │
    │  │ Cache contract              │  │  Registry   │   CACHE      │
    │  │ get/set/delete/clear/iterate│  │ create/start│   LAYER      │
    │  └──────────────┬──────────────┘  └──────┬──────┘              │
    │                 │                        │                      │
    │  ┌──────────────┴────────────────────────┴──────┐              │
    │  │              Storage Backends                 │              │
    │  │   ┌────────┐  ┌────────────┐  ┌─────────┐    │   STORAGE    │
    │  │   │  INI   │  │ Record log │  │ LevelDB │    │   LAYER      │
    │  │   └───┬────┘  └─────┬──────┘  └─────────┘    │              │
    │  │       └──────┬──────┘                         │              │
    │  │       Debounced file store                    │              │
    │  └──────────────┬────────────────────────────────┘              │
    │                 │                                               │
    │  ┌──────────────┴────────────────────────────────┐             │
    │  │              Protocol Layer                    │   PROTOCOL  │
    │  │   IniCodec  RecordLogCodec  JSON/MsgPack       │   LAYER     │
    │  └───────────────────────────────────────────────┘             │
    └─────────────────────────────────────────────────────────────────┘

Example Usage:
    from tablecache_core import IniFileCache, MISSING

    cache = IniFileCache("/srv/app")
    await cache.start()
    await cache.set("users", "1", {"name": "John"})
    user = await cache.get("users", "1")
    assert await cache.get("users", "2") is MISSING
    await cache.stop()  # flushes pending writes

    # Backend chosen from host configuration
    from tablecache_core import create_cache

    cache = create_cache("leveldb", "/srv/app", {"path": "data/cache/leveldb"})
    async with cache:
        await cache.for_each("users", notify_user)
"""

__version__ = "1.0.0"
__author__ = "BlackRoad OS"

from tablecache_core.config import StorageConfig
from tablecache_core.errors import (
    CacheError,
    CacheNotReadyError,
    ConfigError,
    InvalidTableName,
    UnknownBackendError,
)
from tablecache_core.store.backend import (
    Cache,
    MISSING,
    StorageStats,
)
from tablecache_core.store.debounce import Debouncer, DebouncedFileStore
from tablecache_core.store.ini import IniFileCache
from tablecache_core.store.record_log import RecordLogCache
from tablecache_core.store.leveldb import LevelDBCache
from tablecache_core.cache.registry import (
    BACKENDS,
    CacheRegistry,
    create_cache,
)
from tablecache_core.protocol.codec import (
    Codec,
    IniCodec,
    RecordLogCodec,
)
from tablecache_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
    MsgPackSerializer,
)

__all__ = [
    # Contract
    "Cache",
    "MISSING",
    "StorageConfig",
    "StorageStats",
    # Storage
    "Debouncer",
    "DebouncedFileStore",
    "IniFileCache",
    "RecordLogCache",
    "LevelDBCache",
    # Registry
    "BACKENDS",
    "CacheRegistry",
    "create_cache",
    # Protocol
    "Codec",
    "IniCodec",
    "RecordLogCodec",
    "Serializer",
    "JSONSerializer",
    "MsgPackSerializer",
    # Errors
    "CacheError",
    "CacheNotReadyError",
    "ConfigError",
    "InvalidTableName",
    "UnknownBackendError",
]
