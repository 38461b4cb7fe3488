"""Tests for cache units.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import io
from datetime import datetime, timezone

import pytest

from blobcache_core.cache.entry import LocalCache, MemoryCache


MOD_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_local(tmp_path, data=b"hello world"):
    path = tmp_path / "blob"
    path.write_bytes(data)
    return LocalCache(open(path, "rb"), "mod/blob", MOD_TIME)


class TestLocalCache:
    """Tests for LocalCache."""

    def test_metadata(self, tmp_path):
        """Test name and mod_time."""
        with make_local(tmp_path) as cache:
            assert cache.name == "mod/blob"
            assert cache.mod_time == MOD_TIME
            assert cache.readable()
            assert cache.seekable()

    def test_read_in_pieces(self, tmp_path):
        """Test sequential reads until end of stream."""
        with make_local(tmp_path) as cache:
            assert cache.read(5) == b"hello"
            assert cache.tell() == 5
            assert cache.read(100) == b" world"
            assert cache.read(1) == b""

    def test_readinto(self, tmp_path):
        """Test reading into a buffer."""
        with make_local(tmp_path) as cache:
            buffer = bytearray(5)
            assert cache.readinto(buffer) == 5
            assert bytes(buffer) == b"hello"

    def test_close(self, tmp_path):
        """Test close is idempotent and blocks further reads."""
        cache = make_local(tmp_path)

        cache.close()
        cache.close()

        assert cache.closed
        with pytest.raises(ValueError):
            cache.read()
        with pytest.raises(ValueError):
            cache.seek(0)

    def test_context_manager_closes_on_error(self, tmp_path):
        """Test the entry is released when the block raises."""
        cache = make_local(tmp_path)

        with pytest.raises(RuntimeError):
            with cache:
                cache.read(3)
                raise RuntimeError("boom")

        assert cache.closed

    def test_fileno(self, tmp_path):
        """Test access to the file descriptor."""
        with make_local(tmp_path) as cache:
            assert isinstance(cache.fileno(), int)

    def test_is_raw_io(self, tmp_path):
        """Test entries are standard raw binary streams."""
        with make_local(tmp_path) as cache:
            assert isinstance(cache, io.RawIOBase)
            assert isinstance(cache, io.IOBase)
            assert not cache.writable()

    def test_buffered_reader(self, tmp_path):
        """Test wrapping an entry in io.BufferedReader."""
        cache = make_local(tmp_path, b"line one\nline two\n")

        with io.BufferedReader(cache) as reader:
            assert reader.readline() == b"line one\n"
            assert reader.peek(1)[:1] == b"l"
            reader.seek(5)
            assert reader.read() == b"one\nline two\n"

        assert cache.closed

    def test_repr(self, tmp_path):
        """Test repr shows name and state."""
        cache = make_local(tmp_path)
        assert "mod/blob" in repr(cache)
        assert "open" in repr(cache)
        cache.close()
        assert "closed" in repr(cache)


class TestMemoryCache:
    """Tests for MemoryCache."""

    def test_read_and_seek(self):
        """Test reads and all seek modes."""
        with MemoryCache(b"0123456789", "mem", MOD_TIME) as cache:
            assert cache.read(3) == b"012"
            assert cache.seek(2, io.SEEK_CUR) == 5
            assert cache.read(2) == b"56"
            assert cache.seek(-1, io.SEEK_END) == 9
            assert cache.read() == b"9"
            assert cache.seek(0) == 0
            assert cache.read() == b"0123456789"

    def test_readinto(self):
        """Test the generic readinto."""
        with MemoryCache(b"abc", "mem", MOD_TIME) as cache:
            buffer = bytearray(8)
            assert cache.readinto(buffer) == 3
            assert bytes(buffer[:3]) == b"abc"
            assert cache.readinto(buffer) == 0

    def test_buffered_reader(self):
        """Test wrapping an entry in io.BufferedReader."""
        cache = MemoryCache(b"a\nb\nc\n", "mem", MOD_TIME)

        with io.BufferedReader(cache) as reader:
            assert list(reader) == [b"a\n", b"b\n", b"c\n"]

        assert cache.closed

    def test_close(self):
        """Test close is idempotent."""
        cache = MemoryCache(b"abc", "mem", MOD_TIME)

        cache.close()
        cache.close()

        assert cache.closed
        with pytest.raises(ValueError):
            cache.tell()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
