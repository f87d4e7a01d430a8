"""Checksum utilities for file integrity verification."""

import hashlib
import logging
from enum import Enum
from pathlib import Path

from .path_utils import long_path

logger = logging.getLogger(__name__)

CHECKSUM_CHUNK_SIZE = 65536  # 64 KB chunks


class ChecksumAlgorithm(str, Enum):
    """Supported checksum algorithms."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"


def _hash_file(file_path: Path | str, algorithm: ChecksumAlgorithm) -> str:
    """Stream a file through the algorithm and return the hex digest.

    Raises:
        OSError: If file cannot be read
    """
    hasher = hashlib.new(algorithm.value, usedforsecurity=False)

    with open(file_path, 'rb') as f:
        while chunk := f.read(CHECKSUM_CHUNK_SIZE):
            hasher.update(chunk)

    return hasher.hexdigest()


def compute_checksum(
    file_path: Path | str,
    algorithm: ChecksumAlgorithm = ChecksumAlgorithm.MD5,
) -> str:
    """
    Compute the checksum of an entire file.
    
    If the file cannot be opened, the read is retried once using the
    platform's long-path form (Windows only). If that also fails, an
    empty string is returned instead of raising.
    
    Args:
        file_path: Path to the file
        algorithm: Checksum algorithm to use
        
    Returns:
        Lowercase hex digest, two characters per byte, or "" when the
        checksum is unavailable. An empty string is never the checksum
        of an empty file.
    """
    try:
        return _hash_file(file_path, algorithm)
    except OSError as e:
        alternate = long_path(file_path)
        if alternate is None:
            logger.warning(f"Checksum unavailable: {{'path': {str(file_path)!r}, 'error': {str(e)!r}}}")
            return ""

    try:
        return _hash_file(alternate, algorithm)
    except OSError as e:
        logger.warning(f"Checksum unavailable: {{'path': {str(file_path)!r}, 'error': {str(e)!r}}}")
        return ""
