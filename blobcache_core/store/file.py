"""BlobCache Local Cacher - Local Disk Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Optional

from blobcache_core.cache.entry import LocalCache
from blobcache_core.cache.names import RESERVED_PREFIX, to_local_path
from blobcache_core.context import Context
from blobcache_core.errors import CacheError, CacheNotFoundError, StoreError
from blobcache_core.store.backend import Cacher, Source, StorageConfig, iter_source

logger = logging.getLogger(__name__)


class LocalCacher(Cacher):
    """Local disk cache backend.

    Maps cache names directly onto a directory tree: the cache
    ``golang.org/x/mod/@v/list`` lives at
    ``<root>/golang.org/x/mod/@v/list``. There is no index; every call
    probes the filesystem.

    Features:
    - Names translated to native separators
    - Names escaping the root are rejected
    - Intermediate directories created on write
    - Atomic writes (temp file + rename)

    Example:
        cacher = LocalCacher("/var/cache/goproxy")
        cacher.set("mod/@v/list", io.BytesIO(b"v1.0.0\\n"))
        with cacher.get("mod/@v/list") as cache:
            data = cache.read()
    """

    TEMP_PREFIX = RESERVED_PREFIX

    def __init__(
        self,
        root: str = "",
        config: Optional[StorageConfig] = None,
    ):
        """Initialize local cacher.

        Args:
            root: UNIX-style root directory; empty means the platform
                temp directory, resolved on every call
            config: Storage configuration
        """
        super().__init__(config)
        self.root = root

    @property
    def root_path(self) -> Path:
        """Currently resolved root directory."""
        if self.root:
            return Path(PurePosixPath(self.root))
        return Path(tempfile.gettempdir())

    def local_path(self, name: str) -> Path:
        """Get the native file path for a cache name.

        Args:
            name: Cache name

        Returns:
            File path (not checked for existence)

        Raises:
            InvalidNameError: If the name is invalid or escapes the root
        """
        return to_local_path(self.root_path, name)

    def get(self, name: str, ctx: Optional[Context] = None) -> LocalCache:
        """Open the cache stored under ``name``.

        Args:
            name: Cache name
            ctx: Cancellation context

        Returns:
            LocalCache positioned at offset 0

        Raises:
            CacheNotFoundError: If no file exists for the name
            StoreError: On any other failure
        """
        try:
            if ctx is not None:
                ctx.raise_if_done(name)
            path = self.local_path(name)
        except CacheError as e:
            self._record_error(e)
            raise

        # Directories are layout, never caches
        try:
            file = open(path, "rb")
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            raise self._miss(name) from None
        except PermissionError as e:
            # Windows refuses to open directories with EACCES
            if path.is_dir():
                raise self._miss(name) from None
            self._record_error(e)
            logger.error(f"Error opening {name}: {e}")
            raise StoreError(f"opening {name!r}: {e}", name=name, original=e) from e
        except OSError as e:
            self._record_error(e)
            logger.error(f"Error opening {name}: {e}")
            raise StoreError(f"opening {name!r}: {e}", name=name, original=e) from e

        try:
            info = os.fstat(file.fileno())
        except OSError as e:
            file.close()
            self._record_error(e)
            logger.error(f"Error reading metadata of {name}: {e}")
            raise StoreError(f"stat {name!r}: {e}", name=name, original=e) from e

        if stat.S_ISDIR(info.st_mode):
            file.close()
            raise self._miss(name)

        mod_time = datetime.fromtimestamp(info.st_mtime, tz=timezone.utc)

        self._record_hit()
        logger.debug(f"Cache hit: {name}")
        return LocalCache(file, name, mod_time)

    def set(self, name: str, source: Source, ctx: Optional[Context] = None) -> None:
        """Store the bytes of ``source`` under ``name``.

        The bytes are streamed into a temp file beside the target, which
        is then renamed over it, so readers never see a partial write.

        Args:
            name: Cache name
            source: Readable binary stream, or bytes
            ctx: Cancellation context

        Raises:
            StoreError: If the bytes could not be stored completely
        """
        try:
            if ctx is not None:
                ctx.raise_if_done(name)
            path = self.local_path(name)
        except CacheError as e:
            self._record_error(e)
            raise

        try:
            os.makedirs(path.parent, mode=self.config.dir_mode, exist_ok=True)
        except OSError as e:
            self._record_error(e)
            logger.error(f"Error creating directory for {name}: {e}")
            raise StoreError(f"creating directory for {name!r}: {e}", name=name, original=e) from e

        temp_path: Optional[str] = None
        try:
            fd, temp_path = tempfile.mkstemp(
                prefix=f"{self.TEMP_PREFIX}{path.name}-",
                dir=path.parent,
            )
            size = 0
            with os.fdopen(fd, "wb") as f:
                for chunk in iter_source(source, self.config.chunk_size, ctx, name):
                    f.write(chunk)
                    size += len(chunk)
                f.flush()
                if self.config.sync_writes:
                    os.fsync(f.fileno())

            os.chmod(temp_path, self.config.file_mode)
            os.replace(temp_path, path)
            temp_path = None

        except CacheError as e:
            self._record_error(e)
            logger.error(f"Error writing {name}: {e}")
            raise

        except OSError as e:
            self._record_error(e)
            logger.error(f"Error writing {name}: {e}")
            raise StoreError(f"writing {name!r}: {e}", name=name, original=e) from e

        finally:
            if temp_path is not None:
                self._remove_temp(temp_path)

        self._record_write(size)
        logger.debug(f"Cache set: {name} ({size} bytes)")

    def _miss(self, name: str) -> CacheNotFoundError:
        """Record a miss and build the error to raise."""
        self._record_miss()
        logger.debug(f"Cache miss: {name}")
        return CacheNotFoundError(name)

    def _remove_temp(self, temp_path: str) -> None:
        """Remove a leftover temp file."""
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temp file {temp_path}: {e}")

    def __repr__(self) -> str:
        return f"LocalCacher(root={str(self.root_path)!r})"


__all__ = ["LocalCacher"]
