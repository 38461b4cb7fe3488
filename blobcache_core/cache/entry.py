"""BlobCache Entry - Readable, Seekable Cache Units.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import io
from abc import abstractmethod
from datetime import datetime
from typing import BinaryIO, Optional


class Cache(io.RawIOBase):
    """A cache unit returned by ``Cacher.get``.

    Behaves like a read-only binary file positioned at offset 0, plus the
    name it was looked up with and the modification time captured when it
    was opened. The caller owns the entry and must close it:

        with cacher.get("mod/@v/v1.0.0.zip") as entry:
            entry.seek(1024)
            chunk = entry.read(4096)

    Entries are real ``io.RawIOBase`` objects, so they can be wrapped in
    ``io.BufferedReader`` or handed to anything expecting a binary file.
    An entry has a single cursor and is not safe for concurrent readers.
    """

    def __init__(self, name: str, mod_time: datetime):
        """Initialize entry.

        Args:
            name: Cache name used for lookup
            mod_time: Modification time snapshot
        """
        super().__init__()
        self._name = name
        self._mod_time = mod_time

    @property
    def name(self) -> str:
        """Cache name, as a UNIX-style path."""
        return self._name

    @property
    def mod_time(self) -> datetime:
        """Modification time captured at open time."""
        return self._mod_time

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Check if the entry has been closed."""
        pass

    @abstractmethod
    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left if negative.

        Returns:
            The bytes read; ``b""`` at end of stream
        """
        pass

    @abstractmethod
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor.

        Args:
            offset: Byte offset
            whence: ``io.SEEK_SET``, ``io.SEEK_CUR`` or ``io.SEEK_END``

        Returns:
            New absolute position
        """
        pass

    @abstractmethod
    def tell(self) -> int:
        """Get the cursor position."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource. Safe to call twice."""
        pass

    def readinto(self, buffer: bytearray) -> int:
        """Read into a pre-allocated buffer.

        Returns:
            Number of bytes read; 0 at end of stream
        """
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[: len(data)] = data
        return len(data)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError(f"I/O operation on closed cache {self._name!r}")

    def __enter__(self) -> "Cache":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return (
            f"{type(self).__name__}(name={self._name!r}, "
            f"mod_time={self._mod_time.isoformat()}, {state})"
        )


class LocalCache(Cache):
    """Cache unit of the ``LocalCacher``, backed by an open file."""

    def __init__(self, file: BinaryIO, name: str, mod_time: datetime):
        super().__init__(name, mod_time)
        self._file = file

    @property
    def closed(self) -> bool:
        return self._file.closed

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        return self._file.read(size)

    def readinto(self, buffer: bytearray) -> int:
        self._check_open()
        return self._file.readinto(buffer)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        self._check_open()
        return self._file.tell()

    def fileno(self) -> int:
        """Get the underlying file descriptor (for ``sendfile``)."""
        self._check_open()
        return self._file.fileno()

    def close(self) -> None:
        self._file.close()


class MemoryCache(Cache):
    """Cache unit of the ``MemoryCacher``, backed by an immutable snapshot."""

    def __init__(self, data: bytes, name: str, mod_time: datetime):
        super().__init__(name, mod_time)
        self._buffer: Optional[io.BytesIO] = io.BytesIO(data)

    @property
    def closed(self) -> bool:
        return self._buffer is None

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        return self._buffer.read(size)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self._buffer.seek(offset, whence)

    def tell(self) -> int:
        self._check_open()
        return self._buffer.tell()

    def close(self) -> None:
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None


__all__ = ["Cache", "LocalCache", "MemoryCache"]
