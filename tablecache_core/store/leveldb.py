"""TableCache LevelDB Store - Embedded Sorted Key-Value Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, AsyncIterator, Optional, Tuple, Union

import plyvel

from tablecache_core.config import StorageConfig, resolve_path
from tablecache_core.errors import CacheNotReadyError, InvalidTableName
from tablecache_core.protocol.serializer import get_serializer
from tablecache_core.store.backend import MISSING, Cache


class LevelDBCache(Cache):
    """LevelDB storage backend.

    Each table is an isolated namespace inside one LevelDB instance,
    stored under the ``!table!`` key prefix, so equal keys in different
    tables never collide. There is no in-memory mirror: every operation
    goes straight to the engine and engine failures propagate.

    Features:
    - Per-table namespaces
    - Engine-native (bytewise) key order
    - Snapshot iteration
    - JSON or MessagePack values

    Example:
        cache = LevelDBCache("/srv/app")  # data/cache/leveldb
        await cache.start()
        await cache.set("users", "1", {"name": "John"})
        await cache.stop()
    """

    DEFAULT_PATH = "data/cache/leveldb"
    SEPARATOR = "!"

    def __init__(
        self,
        base_dir: Union[str, os.PathLike],
        config: Optional[StorageConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize LevelDB store.

        The database is not opened until start().

        Args:
            base_dir: Host base directory the configured path is relative to
            config: Storage configuration
            logger: Logging sink supplied by the host
        """
        super().__init__(config, logger)
        self.path = resolve_path(base_dir, self.config.path, self.DEFAULT_PATH)
        self.serializer = get_serializer(self.config.value_encoding)
        self._db: Optional[plyvel.DB] = None

    @property
    def is_open(self) -> bool:
        """Whether the database is open."""
        return self._db is not None and not self._db.closed

    async def start(self) -> None:
        """Open the database.

        Raises:
            plyvel.Error: If LevelDB cannot open the directory
            OSError: If the parent directory cannot be created
        """
        if self.is_open:
            return
        try:
            await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
            self._db = await asyncio.to_thread(
                plyvel.DB, str(self.path), create_if_missing=True
            )
        except (OSError, plyvel.Error) as e:
            self.logger.error(f"Failed to open leveldb cache at {self.path}: {e}")
            self._stats.record_error(str(e))
            raise
        self.logger.info(f"LevelDB cache started at {self.path}")

    async def stop(self) -> None:
        """Close the database if it is open."""
        if not self.is_open:
            return
        db, self._db = self._db, None
        await asyncio.to_thread(db.close)
        self.logger.info("LevelDB cache stopped")

    def _table(self, name: str) -> Any:
        """Get the namespace for a table.

        Args:
            name: Table name

        Returns:
            plyvel prefixed database

        Raises:
            CacheNotReadyError: If the database is not open
            InvalidTableName: If the name contains the separator
        """
        if not self.is_open:
            raise CacheNotReadyError(f"LevelDB cache at {self.path} is not open")
        if self.SEPARATOR in name:
            raise InvalidTableName(f"Table name must not contain {self.SEPARATOR!r}: {name!r}")
        prefix = f"{self.SEPARATOR}{name}{self.SEPARATOR}".encode("utf-8")
        return self._db.prefixed_db(prefix)

    async def clear(self, table: str) -> None:
        await asyncio.to_thread(self._clear_sync, self._table(table))
        self._stats.deletes += 1

    @staticmethod
    def _clear_sync(namespace: Any) -> None:
        with namespace.write_batch() as batch:
            for key in namespace.iterator(include_value=False):
                batch.delete(key)

    async def get(self, table: str, key: str, default: Any = MISSING) -> Any:
        namespace = self._table(table)
        data = await asyncio.to_thread(namespace.get, key.encode("utf-8"))
        self._stats.reads += 1
        if data is None:
            return default
        return self.serializer.deserialize(data)

    async def set(
        self,
        table: str,
        key: str,
        value: Any,
        max_age: Optional[float] = None,
    ) -> None:
        # max_age is not supported by the leveldb backend
        namespace = self._table(table)
        data = self.serializer.serialize(value)
        await asyncio.to_thread(namespace.put, key.encode("utf-8"), data)
        self._stats.writes += 1

    async def delete(self, table: str, key: str) -> None:
        namespace = self._table(table)
        await asyncio.to_thread(namespace.delete, key.encode("utf-8"))
        self._stats.deletes += 1

    async def keys(self, table: str) -> AsyncIterator[str]:
        with self._table(table).iterator(include_value=False) as it:
            for key in it:
                yield key.decode("utf-8")

    async def values(self, table: str) -> AsyncIterator[Any]:
        with self._table(table).iterator(include_key=False) as it:
            for data in it:
                yield self.serializer.deserialize(data)

    async def entries(self, table: str) -> AsyncIterator[Tuple[str, Any]]:
        with self._table(table).iterator() as it:
            for key, data in it:
                yield key.decode("utf-8"), self.serializer.deserialize(data)

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"LevelDBCache(path={self.path}, {state})"


__all__ = ["LevelDBCache"]
