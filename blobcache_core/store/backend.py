"""BlobCache Storage Backend - Abstract Cacher Interface.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import io
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Iterator, Optional, Union

from blobcache_core.cache.entry import Cache
from blobcache_core.context import Context
from blobcache_core.errors import StoreError

logger = logging.getLogger(__name__)

Source = Union[BinaryIO, bytes, bytearray, memoryview]


@dataclass
class StorageConfig:
    """Storage backend configuration.

    Attributes:
        name: Backend name, used in logs
        dir_mode: Mode for created directories (umask applies)
        file_mode: Mode for written cache files
        chunk_size: Bytes read from a source per chunk
        sync_writes: fsync files before they are renamed into place
    """

    name: str = "storage"
    dir_mode: int = 0o777
    file_mode: int = 0o644
    chunk_size: int = 64 * 1024
    sync_writes: bool = True


@dataclass
class StorageStats:
    """Storage backend statistics.

    Attributes:
        reads: Number of get operations
        hits: Gets that returned a cache
        misses: Gets that found nothing
        writes: Number of completed set operations
        bytes_written: Total bytes persisted
        errors: Number of failed operations
    """

    reads: int = 0
    hits: int = 0
    misses: int = 0
    writes: int = 0
    bytes_written: int = 0
    errors: int = 0
    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate."""
        return self.hits / self.reads if self.reads > 0 else 0.0

    def record_error(self, error: str) -> None:
        """Record an error."""
        self.errors += 1
        self.last_error = error
        self.last_error_at = datetime.now()


class Cacher(ABC):
    """Abstract cache backend.

    The whole contract is read-or-miss plus overwrite-write:

    - ``get`` returns an open ``Cache`` or raises ``CacheNotFoundError``
    - ``set`` drains a byte source and stores it, replacing any old value

    Every other failure raises ``StoreError``. Cache names are UNIX-style
    relative paths on every platform. There is deliberately no list,
    delete or exists so that object stores and in-memory maps can
    implement it without emulating a filesystem.

    Implementations:
    - LocalCacher: Local directory tree
    - MemoryCacher: In-process dictionary
    """

    def __init__(self, config: Optional[StorageConfig] = None):
        """Initialize backend.

        Args:
            config: Storage configuration
        """
        self.config = config or StorageConfig()
        self._stats = StorageStats()
        self._stats_lock = threading.RLock()

    @abstractmethod
    def get(self, name: str, ctx: Optional[Context] = None) -> Cache:
        """Get the cache stored under ``name``.

        Args:
            name: Cache name
            ctx: Cancellation context

        Returns:
            Open cache positioned at offset 0; the caller must close it

        Raises:
            CacheNotFoundError: If nothing is stored under the name
            StoreError: On any other failure
        """
        pass

    @abstractmethod
    def set(self, name: str, source: Source, ctx: Optional[Context] = None) -> None:
        """Store the bytes of ``source`` under ``name``.

        Args:
            name: Cache name
            source: Readable binary stream, or bytes
            ctx: Cancellation context

        Raises:
            StoreError: If the bytes could not be stored completely
        """
        pass

    def get_stats(self) -> StorageStats:
        """Get storage statistics.

        Returns:
            StorageStats instance
        """
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        with self._stats_lock:
            self._stats = StorageStats()

    def _record_hit(self) -> None:
        with self._stats_lock:
            self._stats.reads += 1
            self._stats.hits += 1

    def _record_miss(self) -> None:
        with self._stats_lock:
            self._stats.reads += 1
            self._stats.misses += 1

    def _record_write(self, size: int) -> None:
        with self._stats_lock:
            self._stats.writes += 1
            self._stats.bytes_written += size

    def _record_error(self, error: BaseException) -> None:
        with self._stats_lock:
            self._stats.record_error(str(error))


def iter_source(
    source: Source,
    chunk_size: int,
    ctx: Optional[Context] = None,
    name: Optional[str] = None,
) -> Iterator[bytes]:
    """Drain a byte source in chunks, checking the context between chunks.

    Args:
        source: Readable binary stream, or bytes
        chunk_size: Maximum chunk size
        ctx: Cancellation context
        name: Cache name for error messages

    Yields:
        Non-empty byte chunks

    Raises:
        StoreError: If the source fails or yields something other than bytes
        OperationCancelledError: If the context is done
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        source = io.BytesIO(bytes(source))
    if not callable(getattr(source, "read", None)):
        raise StoreError(
            f"source for {name!r} is not readable: {type(source).__name__}",
            name=name,
        )

    while True:
        if ctx is not None:
            ctx.raise_if_done(name)
        try:
            chunk = source.read(chunk_size)
        except Exception as e:
            raise StoreError(f"reading source for {name!r}: {e}", name=name, original=e) from e
        if chunk is None:
            # Non-blocking stream with no data available yet
            raise StoreError(
                f"source for {name!r} would block; pass a blocking stream",
                name=name,
            )
        if not chunk:
            return
        if not isinstance(chunk, (bytes, bytearray, memoryview)):
            raise StoreError(
                f"source for {name!r} returned {type(chunk).__name__}, expected bytes",
                name=name,
            )
        yield bytes(chunk)


__all__ = ["Cacher", "Source", "StorageConfig", "StorageStats", "iter_source"]
