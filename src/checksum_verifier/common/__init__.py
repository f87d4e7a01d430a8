"""Common utilities for checksum_verifier packages."""

from .config import ConfigLoader
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .errors import ChecksumVerifierError, ConfigurationError
from .path_utils import absolute_path, exists_long, dir_exists_long, long_path, volume_prefix
from .checksums import ChecksumAlgorithm, compute_checksum

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LogContext',
    'ChecksumVerifierError',
    'ConfigurationError',
    'absolute_path',
    'exists_long',
    'dir_exists_long',
    'long_path',
    'volume_prefix',
    'ChecksumAlgorithm',
    'compute_checksum',
]
