"""Error classes for the checksum verifier."""

from checksum_verifier.common import ChecksumVerifierError


class VerifierError(ChecksumVerifierError):
    """Base error for checksum verifier operations."""
    pass


class NotScannedError(VerifierError, RuntimeError):
    """Update or verify was called before the file system was scanned."""
    pass


class DatabaseError(VerifierError):
    """Checksum database operation failed."""
    pass


class DatabaseLoadError(DatabaseError):
    """Persisted database exists but could not be parsed."""
    pass


class DuplicateFileError(DatabaseError):
    """File is already present in the database."""
    pass


class FileNotInDatabaseError(DatabaseError):
    """File is not present in the database."""
    pass


class InvalidFileNameError(DatabaseError):
    """File name cannot be stored in the database document."""
    pass
