"""Tests for the LevelDB cache backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import asyncio

import pytest

plyvel = pytest.importorskip("plyvel")

from tablecache_core.config import StorageConfig
from tablecache_core.errors import CacheNotReadyError, InvalidTableName
from tablecache_core.store.backend import MISSING
from tablecache_core.store.leveldb import LevelDBCache


async def open_cache(tmp_path, **options):
    cache = LevelDBCache(tmp_path, StorageConfig(**options))
    await cache.start()
    return cache


class TestLevelDBCache:
    """Tests for LevelDBCache."""

    @pytest.mark.asyncio
    async def test_basic_operations(self, tmp_path):
        """Test get/set/delete."""
        cache = await open_cache(tmp_path)

        await cache.set("t", "key", {"name": "John"})
        assert await cache.get("t", "key") == {"name": "John"}

        await cache.delete("t", "key")
        assert await cache.get("t", "key") is MISSING
        await cache.delete("t", "key")

        await cache.stop()

    @pytest.mark.asyncio
    async def test_missing_key(self, tmp_path):
        """Test absent keys return the sentinel."""
        cache = await open_cache(tmp_path)

        assert await cache.get("anytable", "missing") is MISSING
        assert await cache.get("anytable", "missing", default=0) == 0

        await cache.stop()

    @pytest.mark.asyncio
    async def test_table_isolation(self, tmp_path):
        """Test equal keys in different tables are independent."""
        cache = await open_cache(tmp_path)

        await cache.set("a", "k", 1)
        await cache.set("b", "k", 2)
        await cache.set("ab", "x", 3)

        assert await cache.get("a", "k") == 1
        assert await cache.get("b", "k") == 2
        assert [k async for k in cache.keys("a")] == ["k"]

        await cache.clear("a")
        assert await cache.get("a", "k") is MISSING
        assert await cache.get("b", "k") == 2
        assert await cache.get("ab", "x") == 3

        await cache.stop()

    @pytest.mark.asyncio
    async def test_sorted_iteration(self, tmp_path):
        """Test iteration follows engine key order."""
        cache = await open_cache(tmp_path)
        for key, value in [("b", 2), ("c", 3), ("a", 1)]:
            await cache.set("t", key, value)

        assert [k async for k in cache.keys("t")] == ["a", "b", "c"]
        assert [v async for v in cache.values("t")] == [1, 2, 3]
        assert [e async for e in cache.entries("t")] == [("a", 1), ("b", 2), ("c", 3)]
        assert [k async for k in cache.keys("empty")] == []

        await cache.stop()

    @pytest.mark.asyncio
    async def test_for_each(self, tmp_path):
        """Test for_each visits every entry."""
        cache = await open_cache(tmp_path)
        await cache.set("t", "a", 1)
        await cache.set("t", "b", 2)
        seen = {}

        async def collect(value, key):
            await asyncio.sleep(0)
            seen[key] = value

        await cache.for_each("t", collect)
        assert seen == {"a": 1, "b": 2}

        await cache.stop()

    @pytest.mark.asyncio
    async def test_persists_across_restart(self, tmp_path):
        """Test data survives close and reopen."""
        cache = await open_cache(tmp_path)
        await cache.set("t", "k", [1, "two", None])
        await cache.stop()

        cache = await open_cache(tmp_path)
        assert await cache.get("t", "k") == [1, "two", None]
        await cache.stop()

    @pytest.mark.asyncio
    async def test_msgpack_values(self, tmp_path):
        """Test the msgpack value encoding."""
        cache = await open_cache(tmp_path, value_encoding="msgpack")

        await cache.set("t", "k", {"n": 1, "list": [True, None]})
        assert await cache.get("t", "k") == {"n": 1, "list": [True, None]}

        await cache.stop()

    @pytest.mark.asyncio
    async def test_not_ready(self, tmp_path):
        """Test operations fail before start and after stop."""
        cache = LevelDBCache(tmp_path)

        with pytest.raises(CacheNotReadyError):
            await cache.get("t", "k")

        await cache.start()
        await cache.stop()

        with pytest.raises(CacheNotReadyError):
            await cache.set("t", "k", 1)

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self, tmp_path):
        """Test stop before start and repeated stop."""
        cache = LevelDBCache(tmp_path)
        await cache.stop()

        await cache.start()
        assert cache.is_open
        await cache.stop()
        await cache.stop()
        assert not cache.is_open

    @pytest.mark.asyncio
    async def test_invalid_table_name(self, tmp_path):
        """Test names containing the separator are rejected."""
        cache = await open_cache(tmp_path)

        with pytest.raises(InvalidTableName):
            await cache.set("a!b", "k", 1)

        await cache.stop()

    @pytest.mark.asyncio
    async def test_engine_errors_propagate(self, tmp_path):
        """Test engine failures surface to the caller."""
        cache = await open_cache(tmp_path)
        second = LevelDBCache(tmp_path)

        with pytest.raises(plyvel.Error):
            await second.start()
        assert second.get_stats().errors == 1

        cache._db.put(b"!t!corrupt", b"\xff not json")
        with pytest.raises(ValueError):
            await cache.get("t", "corrupt")

        await cache.stop()
