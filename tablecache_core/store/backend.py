"""TableCache Storage Backend - Persistence-Agnostic Cache Contract.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional, Tuple, Union

from tablecache_core.config import StorageConfig


class _Missing:
    """Sentinel type for absent keys."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

ForEachCallback = Callable[[Any, str], Union[Awaitable[None], None]]


def _retrieve_exception(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()


@dataclass
class StorageStats:
    """Storage backend statistics.

    Attributes:
        reads: Number of read operations
        writes: Number of write operations
        deletes: Number of delete operations
        flushes: Number of snapshots written to disk
        errors: Number of errors
    """

    reads: int = 0
    writes: int = 0
    deletes: int = 0
    flushes: int = 0
    errors: int = 0
    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None

    def record_error(self, error: str) -> None:
        """Record an error."""
        self.errors += 1
        self.last_error = error
        self.last_error_at = datetime.now()


class Cache(ABC):
    """Abstract table-partitioned cache.

    Implementations provide different persistence strategies:
    - IniFileCache: In-memory tables mirrored to an INI file
    - RecordLogCache: In-memory tables mirrored to a JSON record log
    - LevelDBCache: LevelDB with one namespace per table

    All backends implement the same interface so callers are
    persistence-agnostic. Keys are unique within a table and tables
    spring into existence on first use.

    Example:
        cache = IniFileCache("/srv/app")
        async with cache:
            await cache.set("users", "1", {"name": "John"})
            user = await cache.get("users", "1")
    """

    DEFAULT_PATH = "data/cache/cache"

    def __init__(
        self,
        config: Optional[StorageConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize cache.

        Args:
            config: Storage configuration
            logger: Logging sink supplied by the host
        """
        self.config = config or StorageConfig()
        self.logger = logger or logging.getLogger(type(self).__module__)
        self._stats = StorageStats()

    async def start(self) -> None:
        """Lifecycle hook called once the host is ready."""

    async def stop(self) -> None:
        """Lifecycle hook called on host shutdown."""

    @abstractmethod
    async def clear(self, table: str) -> None:
        """Remove every entry of a table.

        Args:
            table: Table name
        """
        pass

    @abstractmethod
    async def get(self, table: str, key: str, default: Any = MISSING) -> Any:
        """Get value by key.

        Args:
            table: Table name
            key: Cache key
            default: Returned when the key is absent

        Returns:
            Stored value or default
        """
        pass

    @abstractmethod
    async def set(
        self,
        table: str,
        key: str,
        value: Any,
        max_age: Optional[float] = None,
    ) -> None:
        """Insert or overwrite a value.

        Args:
            table: Table name
            key: Cache key
            value: JSON-representable value
            max_age: Accepted for compatibility; expiration is not supported
        """
        pass

    @abstractmethod
    async def delete(self, table: str, key: str) -> None:
        """Delete key if present.

        Args:
            table: Table name
            key: Cache key
        """
        pass

    @abstractmethod
    def keys(self, table: str) -> AsyncIterator[str]:
        """Iterate over the keys of a table."""
        pass

    @abstractmethod
    def values(self, table: str) -> AsyncIterator[Any]:
        """Iterate over the values of a table."""
        pass

    @abstractmethod
    def entries(self, table: str) -> AsyncIterator[Tuple[str, Any]]:
        """Iterate over (key, value) pairs of a table."""
        pass

    async def for_each(self, table: str, callback: ForEachCallback) -> None:
        """Invoke ``callback(value, key)`` for every entry of a table.

        Awaitable results are scheduled as tasks as soon as their entry is
        read, so callbacks run interleaved without a concurrency limit. The
        first failure is raised; tasks already started keep running. If a
        sync callback raises mid-iteration, later failures of tasks already
        started are retrieved silently.

        Args:
            table: Table name
            callback: Sync or async callable taking (value, key)
        """
        tasks: List[asyncio.Future] = []
        try:
            async for key, value in self.entries(table):
                result = callback(value, key)
                if inspect.isawaitable(result):
                    tasks.append(asyncio.ensure_future(result))
        except BaseException:
            for task in tasks:
                task.add_done_callback(_retrieve_exception)
            raise
        if tasks:
            await asyncio.gather(*tasks)

    def get_stats(self) -> StorageStats:
        """Get storage statistics.

        Returns:
            StorageStats instance
        """
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = StorageStats()

    async def __aenter__(self) -> "Cache":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()


__all__ = ["Cache", "MISSING", "ForEachCallback", "StorageStats"]
