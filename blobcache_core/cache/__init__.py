"""Cache module - Cache units and cache names.

This module provides the readable cache entries returned by backends and
the rules for cache names.
"""

from blobcache_core.cache.entry import (
    Cache,
    LocalCache,
    MemoryCache,
)
from blobcache_core.cache.names import (
    split_name,
    to_local_path,
    validate_name,
)

__all__ = [
    "Cache",
    "LocalCache",
    "MemoryCache",
    "split_name",
    "to_local_path",
    "validate_name",
]
