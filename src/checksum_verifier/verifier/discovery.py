"""File discovery for checksum databases.

Lists the files a run operates on, from a base directory, a match glob,
an exclusion glob and a recursion flag.
"""

import fnmatch
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from checksum_verifier.common.path_utils import dir_exists_long, long_path

logger = logging.getLogger(__name__)

WILDCARD_CHARACTERS = ("*", "?")


class MatchType(str, Enum):
    """What the match pattern refers to."""

    SINGLE_FILE = "file"
    DIRECTORY = "directory"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class MatchSpec:
    """Scan universe for one run.
    
    Attributes:
        base_path: Directory to scan
        match_pattern: File name glob, or the file path for SINGLE_FILE
        exclude_pattern: Glob matched against full paths to exclude, may be empty
        match_type: How match_pattern is interpreted
        recurse: Scan subdirectories (DIRECTORY only)
    """
    base_path: str
    match_pattern: str = "*"
    exclude_pattern: str = ""
    match_type: MatchType = MatchType.WILDCARD
    recurse: bool = False


def has_wildcards(pattern: str) -> bool:
    """Return True if pattern contains glob wildcard characters."""
    return any(c in pattern for c in WILDCARD_CHARACTERS)


def compile_exclude_pattern(exclude: str) -> Optional[re.Pattern]:
    """
    Convert a simple glob into a regular expression.

    '*' matches any sequence, '?' any single character, everything else
    is literal. The expression is searched anywhere in a path, so '*.tmp'
    excludes every path containing '.tmp'.

    Returns:
        Compiled pattern, or None for an empty exclude
    """
    if not exclude:
        return None

    expression = re.escape(exclude).replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(expression)


def _scandir(directory: str) -> List[os.DirEntry]:
    """List a directory, retrying once with the long-path form."""
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except PermissionError:
        raise
    except OSError:
        alternate = long_path(directory)
        if alternate is None:
            raise

    with os.scandir(alternate) as entries:
        return list(entries)


def get_files_in_directory(directory: str, exclude: str, match: str) -> List[str]:
    """
    Get files directly inside directory matching match and not exclude.

    Args:
        directory: Directory to list
        exclude: Exclusion glob, may be empty
        match: File name glob

    Returns:
        Full paths of matching files, empty if the directory is missing
        or cannot be read
    """
    if not dir_exists_long(directory):
        return []

    try:
        entries = _scandir(directory)
    except OSError as e:
        logger.debug(f"Skipping unreadable directory: {{'path': {directory!r}, 'error': {str(e)!r}}}")
        return []

    mask = compile_exclude_pattern(exclude)
    files = []
    for entry in entries:
        try:
            if not entry.is_file():
                continue
        except OSError:
            continue

        if not fnmatch.fnmatch(entry.name, match):
            continue

        file_path = os.path.join(directory, entry.name)
        if mask is not None and mask.search(file_path):
            continue

        files.append(file_path)

    return files


def _get_directories(directory: str) -> List[str]:
    """Get subdirectories of directory without following symlinks."""
    try:
        entries = _scandir(directory)
    except OSError as e:
        logger.debug(f"Skipping unreadable directory: {{'path': {directory!r}, 'error': {str(e)!r}}}")
        return []

    directories = []
    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                directories.append(os.path.join(directory, entry.name))
        except OSError:
            continue
    return directories


def get_files_recursive(base_path: str, exclude: str, match: str, recurse: bool) -> List[str]:
    """
    Get files in base_path and, if recurse is set, in all subdirectories.

    Directories that cannot be read are skipped, so a partial result is
    returned instead of failing the whole scan.
    """
    files = get_files_in_directory(base_path, exclude, match)

    if recurse:
        for sub_directory in _get_directories(base_path):
            files.extend(get_files_recursive(sub_directory, exclude, match, recurse))

    return files


def list_files(spec: MatchSpec) -> List[str]:
    """
    List the candidate files described by spec.

    SINGLE_FILE returns the match pattern itself, unresolved. WILDCARD
    lists base_path only. DIRECTORY lists base_path and, with recurse,
    every subdirectory; a pattern without wildcards matches all files.

    Returns:
        File paths sorted ascending
    """
    if spec.match_type == MatchType.SINGLE_FILE:
        return [spec.match_pattern]

    if spec.match_type == MatchType.WILDCARD:
        files = get_files_recursive(spec.base_path, spec.exclude_pattern, spec.match_pattern, False)
    else:
        match = spec.match_pattern if has_wildcards(spec.match_pattern) else "*"
        files = get_files_recursive(spec.base_path, spec.exclude_pattern, match, spec.recurse)

    files.sort()
    return files
