"""BlobCache - Pluggable Content Cache.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

A format-agnostic byte-blob cache for artifact servers such as module
proxies:
- A minimal backend contract (Cacher): get-or-miss, overwrite-set
- Readable, seekable cache units (Cache) with name and modification time
- A local disk backend with atomic writes
- An in-memory backend
- Cancellation contexts with deadlines

Architecture:
    ┌───────────────────────────────────────────────────────┐
    │                      Caller (proxy)                   │
    └──────────────────────────┬────────────────────────────┘
                               │ get(name) / set(name, src)
    ┌──────────────────────────┴────────────────────────────┐
    │                   Cacher (contract)                   │
    │   ┌──────────────┐              ┌──────────────┐      │
    │   │ LocalCacher  │              │ MemoryCacher │      │
    │   └──────┬───────┘              └──────┬───────┘      │
    └──────────┼─────────────────────────────┼──────────────┘
               │                             │
        ┌──────┴───────┐              ┌──────┴───────┐
        │  LocalCache  │              │ MemoryCache  │   Cache units
        └──────┬───────┘              └──────────────┘
               │
         <root>/<name>

Example Usage:
    from blobcache_core import LocalCacher, CacheNotFoundError

    cacher = LocalCacher("/var/cache/goproxy")

    try:
        with cacher.get("golang.org/x/mod/@v/list") as cache:
            body = cache.read()
    except CacheNotFoundError:
        body = fetch_upstream()
        cacher.set("golang.org/x/mod/@v/list", body)
"""

__version__ = "1.0.0"
__author__ = "BlackRoad OS"

from blobcache_core.errors import (
    ErrorKind,
    CacheError,
    CacheNotFoundError,
    StoreError,
    InvalidNameError,
    OperationCancelledError,
    DeadlineExceededError,
)
from blobcache_core.context import Context, background
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
from blobcache_core.store.backend import (
    Cacher,
    StorageConfig,
    StorageStats,
)
from blobcache_core.store.file import LocalCacher
from blobcache_core.store.memory import MemoryCacher

__all__ = [
    # Errors
    "ErrorKind",
    "CacheError",
    "CacheNotFoundError",
    "StoreError",
    "InvalidNameError",
    "OperationCancelledError",
    "DeadlineExceededError",
    # Context
    "Context",
    "background",
    # Cache units
    "Cache",
    "LocalCache",
    "MemoryCache",
    "split_name",
    "to_local_path",
    "validate_name",
    # Storage
    "Cacher",
    "StorageConfig",
    "StorageStats",
    "LocalCacher",
    "MemoryCacher",
]
