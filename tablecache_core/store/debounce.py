"""TableCache Debounced Store - In-Memory Tables Mirrored to a File.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Set, Tuple, Union

from tablecache_core.config import StorageConfig, resolve_path
from tablecache_core.protocol.codec import Codec, Store, Table
from tablecache_core.store.backend import MISSING, Cache


class Debouncer:
    """Delayed task scheduler with cancel-and-reschedule.

    Only one run is ever armed: scheduling again replaces the
    pending timer, so a burst of triggers collapses into one run.

    Example:
        debouncer = Debouncer()
        debouncer.schedule(1.0, store.flush)
        debouncer.schedule(1.0, store.flush)  # replaces the first
    """

    def __init__(self):
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """Whether a run is armed and has not fired yet."""
        return self._handle is not None

    def schedule(self, delay: float, fn: Callable[[], Awaitable[Any]]) -> None:
        """Arm ``fn`` to run after ``delay`` seconds, replacing any pending run.

        Args:
            delay: Delay in seconds
            fn: Coroutine function to run
        """
        loop = asyncio.get_running_loop()
        self.cancel()
        self._handle = loop.call_later(delay, self._fire, loop, fn)

    def cancel(self) -> bool:
        """Disarm the pending run.

        Returns:
            True if a run was pending
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    async def wait(self) -> None:
        """Wait for runs that have already fired to complete."""
        while self._tasks:
            await asyncio.wait(set(self._tasks))

    def _fire(self, loop: asyncio.AbstractEventLoop, fn: Callable[[], Awaitable[Any]]) -> None:
        self._handle = None
        task = loop.create_task(fn())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


class DebouncedFileStore(Cache):
    """In-memory tables persisted to a single snapshot file.

    Reads are served from memory. Every mutation re-arms one delayed
    flush, so N mutations within the flush delay produce exactly one
    write of the final state. Persistence trouble is logged and never
    surfaces to callers.

    Features:
    - Lazy tables (absent == empty)
    - Debounced full-snapshot writes
    - Atomic file replacement
    - Forced final flush on stop()

    Subclasses choose the snapshot format by supplying a codec.
    """

    def __init__(
        self,
        base_dir: Union[str, os.PathLike],
        codec: Codec,
        config: Optional[StorageConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize store.

        Args:
            base_dir: Host base directory the configured path is relative to
            codec: Snapshot codec
            config: Storage configuration
            logger: Logging sink supplied by the host
        """
        super().__init__(config, logger)
        self.path = resolve_path(base_dir, self.config.path, self.DEFAULT_PATH)
        self.codec = codec
        self.store: Store = {}
        self._debouncer = Debouncer()
        self._write_lock = asyncio.Lock()

    @property
    def flush_pending(self) -> bool:
        """Whether a flush is scheduled but not yet written."""
        return self._debouncer.pending

    async def start(self) -> None:
        """Load the snapshot from disk.

        A missing file leaves the store empty. Any other read failure is
        logged as a warning and also leaves the store empty.
        """
        try:
            await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(f"Failed to read cache file {self.path}: {e}")
            self._stats.record_error(str(e))
            return

        if not text:
            return

        self.store = self.codec.decode(text)
        self.logger.info(f"Loaded {len(self.store)} cache tables from {self.path}")

    async def stop(self) -> None:
        """Write out any pending mutations before shutdown."""
        if self._debouncer.cancel():
            await self.flush()
        await self._debouncer.wait()

    async def flush(self) -> bool:
        """Write the full store to disk.

        Writes never overlap; a flush that has to wait for a running one
        encodes the store only once it gets its turn.

        Returns:
            True if the snapshot was written
        """
        async with self._write_lock:
            try:
                text = self.codec.encode(self.store)
                await asyncio.to_thread(self._write_atomic, text)
            except (OSError, TypeError, ValueError) as e:
                self.logger.warning(f"Failed to write cache file {self.path}: {e}")
                self._stats.record_error(str(e))
                return False

        self._stats.flushes += 1
        self.logger.debug(f"Flushed {len(self.store)} cache tables to {self.path}")
        return True

    def _write_atomic(self, text: str) -> None:
        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            temp_path.write_text(text, encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def _schedule_flush(self) -> None:
        self._debouncer.schedule(self.config.flush_delay, self.flush)

    def _table(self, name: str) -> Table:
        return self.store.setdefault(name, {})

    async def clear(self, table: str) -> None:
        self.store.pop(table, None)
        self._stats.deletes += 1
        self._schedule_flush()

    async def get(self, table: str, key: str, default: Any = MISSING) -> Any:
        self._stats.reads += 1
        return self._table(table).get(key, default)

    async def set(
        self,
        table: str,
        key: str,
        value: Any,
        max_age: Optional[float] = None,
    ) -> None:
        # max_age is not supported by file-backed stores
        self._table(table)[key] = value
        self._stats.writes += 1
        self._schedule_flush()

    async def delete(self, table: str, key: str) -> None:
        if self._table(table).pop(key, MISSING) is not MISSING:
            self._stats.deletes += 1
        self._schedule_flush()

    async def keys(self, table: str) -> AsyncIterator[str]:
        for key in list(self._table(table)):
            yield key

    async def values(self, table: str) -> AsyncIterator[Any]:
        for value in list(self._table(table).values()):
            yield value

    async def entries(self, table: str) -> AsyncIterator[Tuple[str, Any]]:
        for item in list(self._table(table).items()):
            yield item

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path}, tables={len(self.store)})"


__all__ = ["Debouncer", "DebouncedFileStore"]
