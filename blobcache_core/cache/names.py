"""BlobCache Names - Cache Name Validation and Path Translation.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Cache names are UNIX-style relative paths (``golang.org/x/mod/@v/list``)
on every platform. Backends that map names onto a filesystem translate
them with ``to_local_path``.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import List, Union

from blobcache_core.errors import InvalidNameError

# Prefix of in-flight temp files written beside caches
RESERVED_PREFIX = ".tmp-"


def split_name(name: str) -> List[str]:
    """Validate a cache name and split it into segments.

    Args:
        name: Cache name

    Returns:
        Name segments

    Raises:
        InvalidNameError: If the name is not a clean relative UNIX-style path
    """
    if not isinstance(name, str):
        raise InvalidNameError(f"cache name must be str, got {type(name).__name__}")
    if not name:
        raise InvalidNameError("cache name is empty", name=name)
    if "\\" in name or "\x00" in name:
        raise InvalidNameError(f"cache name has forbidden characters: {name!r}", name=name)
    if name.startswith("/") or PureWindowsPath(name).drive:
        raise InvalidNameError(f"cache name must be relative: {name!r}", name=name)

    segments = name.split("/")
    for segment in segments:
        if segment in ("", ".", ".."):
            raise InvalidNameError(f"cache name has invalid segment: {name!r}", name=name)
    if segments[-1].startswith(RESERVED_PREFIX):
        raise InvalidNameError(f"cache name uses reserved prefix: {name!r}", name=name)
    return segments


def validate_name(name: str) -> str:
    """Validate a cache name.

    Returns:
        The name, unchanged
    """
    split_name(name)
    return name


def to_local_path(root: Union[str, Path], name: str) -> Path:
    """Translate a cache name into a native path under ``root``.

    Pure function of its arguments: nothing is touched on disk.

    Args:
        root: Root directory (UNIX-style or native)
        name: Cache name

    Returns:
        Native path of the cache file

    Raises:
        InvalidNameError: If the name is invalid or escapes the root
    """
    segments = split_name(name)
    root_path = Path(PurePosixPath(root)) if isinstance(root, str) else root
    path = root_path.joinpath(*segments)

    base = os.path.abspath(root_path)
    target = os.path.abspath(path)
    try:
        inside = os.path.commonpath([base, target]) == base and target != base
    except ValueError:
        # Different drives on Windows
        inside = False
    if not inside:
        raise InvalidNameError(f"cache name escapes root: {name!r}", name=name)
    return path


__all__ = ["RESERVED_PREFIX", "split_name", "validate_name", "to_local_path"]
