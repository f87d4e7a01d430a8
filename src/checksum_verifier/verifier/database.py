"""In-memory checksum database backed by an XML document."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from checksum_verifier.common import ChecksumAlgorithm, absolute_path, compute_checksum, exists_long

from .document import is_storable_name, read_document, write_document
from .errors import DuplicateFileError, FileNotInDatabaseError, InvalidFileNameError
from .paths import PathStoragePolicy, to_canonical, to_filesystem_path

logger = logging.getLogger(__name__)


@dataclass
class FileChecksum:
    """A single file checksum.

    Attributes:
        name: Database key, derived from file_path by the path storage policy
        checksum: Hex digest of the file content
        file_path: File system path of the file (not persisted)
    """
    name: str
    checksum: str
    file_path: str

    @classmethod
    def from_disk(
        cls,
        file_path: Path | str,
        base_path: Path | str,
        path_policy: PathStoragePolicy,
        algorithm: ChecksumAlgorithm,
    ) -> "FileChecksum":
        """Create a record by computing the file's checksum now."""
        full_path = absolute_path(file_path, base_path)
        return cls(
            name=to_canonical(full_path, base_path, path_policy),
            checksum=compute_checksum(full_path, algorithm),
            file_path=full_path,
        )


class ChecksumDatabase:
    """
    Mapping of database key to FileChecksum.

    The dict keeps insertion order, which is the order used for iteration
    and for the persisted document. Replacing a record keeps its position.
    Any add, update or removal marks the database as changed until the
    next successful write().
    """

    def __init__(self, document_path: Path | str) -> None:
        self.document_path = Path(document_path)
        self._files: Dict[str, FileChecksum] = {}
        self._has_changes = False

    @classmethod
    def from_file(
        cls,
        document_path: Path | str,
        base_path: Path | str,
        path_policy: PathStoragePolicy,
    ) -> "ChecksumDatabase":
        """
        Load a database from its document.

        A missing document gives an empty database. Entries with an empty
        name or checksum are skipped.

        Raises:
            DatabaseLoadError: If the document exists but is malformed
        """
        db = cls(document_path)

        if not exists_long(db.document_path):
            logger.info(f"Database not found, starting empty: {{'path': {str(db.document_path)!r}}}")
            return db

        skipped = 0
        for name, checksum in read_document(db.document_path):
            if not name or not checksum:
                skipped += 1
                continue

            db._files[name] = FileChecksum(
                name=name,
                checksum=checksum,
                file_path=to_filesystem_path(name, base_path, path_policy),
            )

        if skipped:
            logger.warning(f"Skipped incomplete database entries: {{'path': {str(db.document_path)!r}, 'count': {skipped}}}")

        logger.info(f"Database loaded: {{'path': {str(db.document_path)!r}, 'files': {len(db._files)}}}")
        return db

    @property
    def files(self) -> List[FileChecksum]:
        """Snapshot of all records, safe to iterate while the database changes."""
        return list(self._files.values())

    def add_file(
        self,
        file_path: Path | str,
        base_path: Path | str,
        path_policy: PathStoragePolicy,
        algorithm: ChecksumAlgorithm,
    ) -> str:
        """
        Compute a file's checksum and add it to the database.

        Returns:
            The checksum. An empty string means the checksum was unavailable
            and nothing was added.

        Raises:
            DuplicateFileError: If the file's key is already present
            InvalidFileNameError: If the key cannot be stored in the document
        """
        name = to_canonical(file_path, base_path, path_policy)
        if not is_storable_name(name):
            raise InvalidFileNameError(f"File name cannot be stored: {name!r}", name=name)
        if name in self._files:
            raise DuplicateFileError(f"File already in database: {name}", name=name)

        record = FileChecksum.from_disk(file_path, base_path, path_policy, algorithm)
        if not record.checksum:
            return ""

        self._files[record.name] = record
        self._has_changes = True
        return record.checksum

    def update_file(
        self,
        file_path: Path | str,
        base_path: Path | str,
        path_policy: PathStoragePolicy,
        algorithm: ChecksumAlgorithm,
    ) -> bool:
        """
        Recompute a file's checksum and store it if it changed.

        Returns:
            True if the stored checksum was replaced. False if the file is
            not in the database, is unchanged, or could not be read.
        """
        name = to_canonical(file_path, base_path, path_policy)
        existing = self._files.get(name)
        if existing is None:
            return False

        record = FileChecksum.from_disk(file_path, base_path, path_policy, algorithm)
        if not record.checksum or record.checksum == existing.checksum:
            return False

        self._files[name] = record
        self._has_changes = True
        return True

    def has_file(self, name: str) -> bool:
        return name in self._files

    def get_file(self, name: str) -> FileChecksum:
        """
        Get the record stored under name.

        Raises:
            FileNotInDatabaseError: If there is no such record
        """
        record: Optional[FileChecksum] = self._files.get(name)
        if record is None:
            raise FileNotInDatabaseError(f"File not in database: {name}", name=name)
        return record

    def remove_file(self, name: str) -> None:
        """Remove a record; unknown names are ignored."""
        if self._files.pop(name, None) is not None:
            self._has_changes = True

    def file_count(self) -> int:
        return len(self._files)

    def has_changes(self) -> bool:
        return self._has_changes

    def write(self) -> None:
        """Persist all records to the document and clear the change flag."""
        write_document(
            self.document_path,
            ((record.name, record.checksum) for record in self._files.values()),
        )
        self._has_changes = False
        logger.info(f"Database written: {{'path': {str(self.document_path)!r}, 'files': {len(self._files)}}}")
