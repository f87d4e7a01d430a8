"""Path utilities for consistent path handling across packages."""

import os
from pathlib import Path, PurePath
from typing import Optional

# Windows extended-length prefix; lifts the MAX_PATH limit for file APIs
LONG_PATH_PREFIX = "\\\\?\\"


def to_storage_separators(path: str) -> str:
    """
    Convert a relative path to forward-slash form for storage.

    Only the platform separator is converted, so a backslash that is part
    of a POSIX file name survives.

    Examples:
        >>> to_storage_separators("photos/2023/image.jpg")
        'photos/2023/image.jpg'
    """
    if os.sep != "/":
        return path.replace(os.sep, "/")
    return path


def absolute_path(path: Path | str, base_path: Path | str) -> str:
    """
    Resolve path to a normalized absolute path.

    Relative paths are resolved against base_path instead of the process
    working directory. Symlinks are not resolved.

    Args:
        path: File path, absolute or relative to base_path
        base_path: Directory relative paths are anchored to

    Returns:
        Normalized absolute path string
    """
    base = os.path.abspath(os.fspath(base_path))
    return os.path.normpath(os.path.join(base, os.fspath(path)))


def volume_prefix(path: Path | str) -> str:
    """
    Return the volume anchor of an absolute path.

    'C:\\' on Windows, '/' on POSIX, '' for relative paths.
    """
    return PurePath(os.fspath(path)).anchor


def long_path(path: Path | str) -> Optional[str]:
    """
    Return the long-path-safe form of path, or None if there is none.

    Only Windows has such a form. Returns None on other platforms and for
    paths already carrying the prefix, so callers can skip the retry.
    """
    if os.name != "nt":
        return None

    path_str = os.fspath(path)
    if path_str.startswith(LONG_PATH_PREFIX):
        return None

    return LONG_PATH_PREFIX + os.path.abspath(path_str)


def exists_long(path: Path | str) -> bool:
    """Return True if path is an existing file, retrying with the long-path form."""
    if os.path.isfile(path):
        return True

    alternate = long_path(path)
    return alternate is not None and os.path.isfile(alternate)


def dir_exists_long(path: Path | str) -> bool:
    """Return True if path is an existing directory, retrying with the long-path form."""
    if os.path.isdir(path):
        return True

    alternate = long_path(path)
    return alternate is not None and os.path.isdir(alternate)
