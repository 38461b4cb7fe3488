"""Store module - Cacher backends."""

from blobcache_core.store.backend import (
    Cacher,
    StorageConfig,
    StorageStats,
)
from blobcache_core.store.file import LocalCacher
from blobcache_core.store.memory import MemoryCacher

__all__ = [
    "Cacher",
    "StorageConfig",
    "StorageStats",
    "LocalCacher",
    "MemoryCacher",
]
