"""Tests for MemoryCacher.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import io
import threading
from datetime import timezone

import pytest

from blobcache_core.context import Context
from blobcache_core.errors import (
    CacheNotFoundError,
    InvalidNameError,
    OperationCancelledError,
    StoreError,
)
from blobcache_core.store.backend import Cacher
from blobcache_core.store.memory import MemoryCacher


class TestMemoryCacher:
    """Tests for MemoryCacher."""

    def test_is_cacher(self):
        """Test MemoryCacher satisfies the Cacher contract."""
        assert isinstance(MemoryCacher(), Cacher)

    def test_round_trip(self):
        """Test set then get."""
        cacher = MemoryCacher()

        cacher.set("mod/@v/v1.0.0.info", io.BytesIO(b'{"Version":"v1.0.0"}'))

        with cacher.get("mod/@v/v1.0.0.info") as cache:
            assert cache.name == "mod/@v/v1.0.0.info"
            assert cache.read() == b'{"Version":"v1.0.0"}'
            assert cache.mod_time.tzinfo is timezone.utc

    def test_miss(self):
        """Test unknown names raise CacheNotFoundError."""
        cacher = MemoryCacher()

        with pytest.raises(CacheNotFoundError):
            cacher.get("missing")

    def test_overwrite(self):
        """Test overwrite replaces the payload."""
        cacher = MemoryCacher()

        cacher.set("key", b"first payload")
        cacher.set("key", b"second")

        with cacher.get("key") as cache:
            assert cache.read() == b"second"
        assert len(cacher) == 1

    def test_prefix_is_miss(self):
        """Test a prefix of a stored name is a miss, as on disk."""
        cacher = MemoryCacher()
        cacher.set("a/b/c", b"data")

        with pytest.raises(CacheNotFoundError):
            cacher.get("a/b")

    def test_snapshot(self):
        """Test open entries are not affected by later writes."""
        cacher = MemoryCacher()
        cacher.set("key", b"old")

        with cacher.get("key") as cache:
            cacher.set("key", b"new")
            assert cache.read() == b"old"

    def test_invalid_name(self):
        """Test names follow the same rules as on disk."""
        cacher = MemoryCacher()

        with pytest.raises(InvalidNameError):
            cacher.set("../x", b"value")
        with pytest.raises(InvalidNameError):
            cacher.get("/abs")

    def test_failing_source(self):
        """Test a failing source stores nothing."""
        cacher = MemoryCacher()

        class Broken:
            def read(self, size=-1):
                raise IOError("broken pipe")

        with pytest.raises(StoreError):
            cacher.set("key", Broken())
        with pytest.raises(CacheNotFoundError):
            cacher.get("key")

    def test_cancelled(self):
        """Test cancelled contexts."""
        cacher = MemoryCacher()
        cacher.set("key", b"value")
        ctx = Context()
        ctx.cancel()

        with pytest.raises(OperationCancelledError):
            cacher.get("key", ctx=ctx)
        with pytest.raises(OperationCancelledError):
            cacher.set("other", b"value", ctx=ctx)
        assert len(cacher) == 1

    def test_stats(self):
        """Test statistics."""
        cacher = MemoryCacher()

        cacher.set("key", b"abc")
        cacher.get("key").close()
        with pytest.raises(CacheNotFoundError):
            cacher.get("missing")

        stats = cacher.get_stats()
        assert stats.writes == 1
        assert stats.bytes_written == 3
        assert stats.hits == 1
        assert stats.misses == 1

    def test_thread_safety(self):
        """Test concurrent writers and readers."""
        cacher = MemoryCacher()
        errors = []

        def worker(n):
            try:
                for i in range(100):
                    name = f"key-{n}/{i}"
                    cacher.set(name, name.encode())
                    with cacher.get(name) as cache:
                        assert cache.read() == name.encode()
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(cacher) == 1000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
