"""Base error definitions for checksum_verifier packages."""

from typing import Any, Dict


class ChecksumVerifierError(Exception):
    """Base exception for all checksum_verifier errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(ChecksumVerifierError):
    """Configuration is invalid or missing."""
    pass
