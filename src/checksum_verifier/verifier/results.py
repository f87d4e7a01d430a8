"""Result types returned by the checksum engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class BadFileType(str, Enum):
    """Ways a file on disk can disagree with the database."""

    MISSING = "missing"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    NEW = "new"


@dataclass(frozen=True)
class BadFile:
    """A file that failed verification.
    
    Attributes:
        name: Database key of the file
        bad_file_type: Kind of discrepancy
        checksum_database: Stored checksum (CHECKSUM_MISMATCH only)
        checksum_disk: Checksum computed from disk (CHECKSUM_MISMATCH only,
            empty if it could not be computed)
    """
    name: str
    bad_file_type: BadFileType
    checksum_database: Optional[str] = None
    checksum_disk: Optional[str] = None


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of Engine.update_checksums()."""
    success: bool
    files_updated: int


@dataclass(frozen=True)
class VerifyResult:
    """Outcome of Engine.verify_checksums().

    bad_files is empty when the base directory did not exist; success is
    False in that case.
    """
    success: bool
    bad_files: Tuple[BadFile, ...] = field(default_factory=tuple)
