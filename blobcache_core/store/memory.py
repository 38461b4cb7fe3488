"""BlobCache Memory Cacher - In-Memory Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from blobcache_core.cache.entry import MemoryCache
from blobcache_core.cache.names import validate_name
from blobcache_core.context import Context
from blobcache_core.errors import CacheError, CacheNotFoundError
from blobcache_core.store.backend import Cacher, Source, StorageConfig, iter_source

logger = logging.getLogger(__name__)


class MemoryCacher(Cacher):
    """In-memory cache backend.

    Keeps every cache as an immutable bytes snapshot in a dictionary.
    Useful for tests and for single-process deployments with small
    artifacts. Entries returned by ``get`` read from their own snapshot,
    so a later ``set`` never changes an entry that is already open.

    Example:
        cacher = MemoryCacher()
        cacher.set("mod/@v/list", b"v1.0.0\\n")
        with cacher.get("mod/@v/list") as cache:
            data = cache.read()
    """

    def __init__(self, config: Optional[StorageConfig] = None):
        """Initialize memory cacher.

        Args:
            config: Storage configuration
        """
        super().__init__(config)
        self._data: Dict[str, Tuple[bytes, datetime]] = {}
        self._lock = threading.RLock()

    def get(self, name: str, ctx: Optional[Context] = None) -> MemoryCache:
        """Get the cache stored under ``name``.

        Raises:
            CacheNotFoundError: If nothing is stored under the name
            StoreError: On invalid names or cancellation
        """
        try:
            if ctx is not None:
                ctx.raise_if_done(name)
            validate_name(name)
        except CacheError as e:
            self._record_error(e)
            raise

        with self._lock:
            item = self._data.get(name)

        if item is None:
            self._record_miss()
            logger.debug(f"Cache miss: {name}")
            raise CacheNotFoundError(name)

        data, mod_time = item
        self._record_hit()
        return MemoryCache(data, name, mod_time)

    def set(self, name: str, source: Source, ctx: Optional[Context] = None) -> None:
        """Store the bytes of ``source`` under ``name``.

        Raises:
            StoreError: If the source fails, the name is invalid, or the
                context is done before the source is drained
        """
        try:
            if ctx is not None:
                ctx.raise_if_done(name)
            validate_name(name)
            data = b"".join(iter_source(source, self.config.chunk_size, ctx, name))
        except CacheError as e:
            self._record_error(e)
            logger.error(f"Error writing {name}: {e}")
            raise

        with self._lock:
            self._data[name] = (data, datetime.now(timezone.utc))

        self._record_write(len(data))
        logger.debug(f"Cache set: {name} ({len(data)} bytes)")

    def __len__(self) -> int:
        """Get number of stored caches."""
        return len(self._data)

    def __repr__(self) -> str:
        return f"MemoryCacher(entries={len(self._data)})"


__all__ = ["MemoryCacher"]
