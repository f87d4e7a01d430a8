"""Conversion between file system paths and database keys.

A database key (the "name" of a file) is derived from its path according
to a PathStoragePolicy. The conversion is reversible: loaded entries only
carry the key, and the file system path is rebuilt from it.
"""

import os
from enum import Enum
from pathlib import Path

from checksum_verifier.common.path_utils import absolute_path, to_storage_separators, volume_prefix


class PathStoragePolicy(str, Enum):
    """How file paths are stored in the database."""

    RELATIVE_PATH = "relative"
    FULL_PATH = "full"
    FULL_PATH_NO_DRIVE = "full-no-drive"


def _is_under(path: str, directory: str) -> bool:
    prefix = directory if directory.endswith(os.sep) else directory + os.sep
    return os.path.normcase(path).startswith(os.path.normcase(prefix))


def to_canonical(file_path: Path | str, base_path: Path | str, policy: PathStoragePolicy) -> str:
    """
    Convert a file path into its database key.

    Args:
        file_path: File path, absolute or relative to base_path
        base_path: Base directory of the database
        policy: Path storage policy

    Returns:
        RELATIVE_PATH: path relative to base_path with '/' separators
            (files outside base_path keep their absolute path)
        FULL_PATH: absolute path
        FULL_PATH_NO_DRIVE: absolute path without its volume anchor
    """
    full_path = absolute_path(file_path, base_path)

    if policy == PathStoragePolicy.FULL_PATH:
        return full_path

    if policy == PathStoragePolicy.FULL_PATH_NO_DRIVE:
        return full_path[len(volume_prefix(full_path)):]

    base = absolute_path(base_path, base_path)
    if _is_under(full_path, base):
        return to_storage_separators(os.path.relpath(full_path, base))
    return full_path


def to_filesystem_path(name: str, base_path: Path | str, policy: PathStoragePolicy) -> str:
    """
    Rebuild a file system path from a database key.

    Inverse of to_canonical(): both refer to the same file, the strings
    may differ.
    """
    if policy == PathStoragePolicy.FULL_PATH:
        return name

    base = absolute_path(base_path, base_path)

    if policy == PathStoragePolicy.FULL_PATH_NO_DRIVE:
        return os.path.join(volume_prefix(base), name)

    return os.path.normpath(os.path.join(base, name))
