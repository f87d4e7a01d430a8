"""Reconciliation engine: compares scanned files against a checksum database."""

import logging
from pathlib import Path
from typing import List, Optional, Set

from checksum_verifier.common import ChecksumAlgorithm, absolute_path, compute_checksum, dir_exists_long, exists_long

from .database import ChecksumDatabase
from .discovery import MatchSpec, MatchType, list_files
from .document import is_storable_name
from .errors import NotScannedError
from .paths import PathStoragePolicy, to_canonical
from .reporter import EngineReporter, NullReporter
from .results import BadFile, BadFileType, UpdateResult, VerifyResult

logger = logging.getLogger(__name__)


class Engine:
    """
    Runs one update or verify pass over a checksum database.

    The engine loads the database on construction and owns it for its
    lifetime. scan_files() must run before update_checksums() or
    verify_checksums(). All progress goes to the reporter; the engine
    never prints.

    Relative paths (match pattern for a single file, stored keys) are
    resolved against base_path. The process working directory is never
    consulted or changed.
    """

    def __init__(
        self,
        database_path: Path | str,
        base_path: Path | str,
        reporter: Optional[EngineReporter] = None,
        exclude_pattern: str = "",
        match_pattern: str = "*",
        match_type: MatchType = MatchType.WILDCARD,
        path_policy: PathStoragePolicy = PathStoragePolicy.RELATIVE_PATH,
        algorithm: ChecksumAlgorithm = ChecksumAlgorithm.MD5,
    ) -> None:
        """
        Initialize the engine and load the database.

        Args:
            database_path: Path to the XML database document
            base_path: Directory files are scanned in and keys are relative to
            reporter: Progress receiver (default: NullReporter)
            exclude_pattern: Glob of paths to leave out, may be empty
            match_pattern: File name glob, or the file for SINGLE_FILE
            match_type: How match_pattern is interpreted
            path_policy: How file paths are stored as keys
            algorithm: Checksum algorithm for new and recomputed checksums

        Raises:
            DatabaseLoadError: If the database document exists but is malformed
        """
        self.base_path = absolute_path(base_path, base_path)
        self.reporter = reporter if reporter is not None else NullReporter()
        self.exclude_pattern = exclude_pattern
        self.match_pattern = match_pattern
        self.match_type = match_type
        self.path_policy = path_policy
        self.algorithm = algorithm

        self._database = ChecksumDatabase.from_file(database_path, self.base_path, path_policy)
        self._files: Optional[List[str]] = None

    @property
    def database(self) -> ChecksumDatabase:
        return self._database

    @property
    def scanned_files(self) -> List[str]:
        """Files found by the last scan, sorted ascending.

        Raises:
            NotScannedError: If scan_files() has not been called
        """
        if self._files is None:
            raise NotScannedError("scan_files() must be called before this operation")
        return list(self._files)

    def scan_files(self, recurse: bool = False) -> None:
        """
        List the candidate files for this run.

        Args:
            recurse: Include subdirectories (DIRECTORY match type only)
        """
        spec = MatchSpec(
            base_path=self.base_path,
            match_pattern=self.match_pattern,
            exclude_pattern=self.exclude_pattern,
            match_type=self.match_type,
            recurse=recurse,
        )

        self.reporter.scanning_files()
        self._files = list_files(spec)
        self.reporter.scanning_files_completed(len(self._files))

        logger.info(f"Scan complete: {{'base_path': {self.base_path!r}, 'match': {self.match_pattern!r}, 'type': {self.match_type.value!r}, 'recurse': {recurse}, 'files': {len(self._files)}}}")

    def _canonical(self, file_path: str) -> str:
        return to_canonical(file_path, self.base_path, self.path_policy)

    def _exists(self, file_path: str) -> bool:
        return exists_long(absolute_path(file_path, self.base_path))

    def update_checksums(
        self,
        ignore_new: bool,
        remove_missing: bool,
        pretend: bool,
        update_existing: bool = False,
    ) -> UpdateResult:
        """
        Bring the database in line with the scanned files.

        Existing records are refreshed first, then new files are added,
        then records of missing files are removed. Each pass sees the
        database as the previous pass left it, so a changed file is never
        counted as new and removal cannot affect the other passes.

        Args:
            ignore_new: Do not add scanned files missing from the database
            remove_missing: Remove records whose file no longer exists
            pretend: Count the changes without writing the database
            update_existing: Recompute checksums of records whose file exists

        Returns:
            UpdateResult with the number of records updated, added or removed

        Raises:
            NotScannedError: If scan_files() has not been called
        """
        files = self.scanned_files
        db = self._database

        self.reporter.updating_checksums(db.file_count())
        files_updated = 0

        if update_existing:
            for record in db.files:
                if not self._exists(record.file_path):
                    continue
                if db.update_file(record.file_path, self.base_path, self.path_policy, self.algorithm):
                    self.reporter.updated_file(record.file_path)
                    files_updated += 1

        if not ignore_new:
            for file_path in files:
                name = self._canonical(file_path)
                if db.has_file(name):
                    continue

                if not is_storable_name(name):
                    self.reporter.skipped_file(name)
                    logger.warning(f"File name cannot be stored, file not added: {{'name': {name!r}}}")
                    continue

                self.reporter.adding_file(name)
                checksum = db.add_file(file_path, self.base_path, self.path_policy, self.algorithm)
                self.reporter.adding_file_completed(name, checksum)
                if checksum:
                    files_updated += 1
                else:
                    logger.warning(f"Checksum unavailable, file not added: {{'name': {name!r}}}")

        if remove_missing:
            missing = [record for record in db.files if not self._exists(record.file_path)]
            for record in missing:
                self.reporter.removed_file(record.file_path)
            for record in missing:
                db.remove_file(record.name)
            files_updated += len(missing)

        logger.info(f"Update complete: {{'files_updated': {files_updated}, 'pretend': {pretend}}}")

        if pretend:
            return UpdateResult(success=True, files_updated=files_updated)

        had_changes = db.has_changes()
        if had_changes:
            self.reporter.writing_database(str(db.document_path))
            db.write()
            self.reporter.writing_database_completed()

        self.reporter.updating_checksums_completed(had_changes)
        return UpdateResult(success=True, files_updated=files_updated)

    def verify_checksums(
        self,
        ignore_checksum: bool,
        ignore_missing: bool,
        show_new: bool,
    ) -> VerifyResult:
        """
        Compare the database against the files on disk.

        Args:
            ignore_checksum: Only check that files exist
            ignore_missing: Do not report records whose file is missing
            show_new: Report scanned files that are not in the database

        Returns:
            VerifyResult; success is False if any discrepancy was found or
            the base directory does not exist (then bad_files is empty)

        Raises:
            NotScannedError: If scan_files() has not been called
        """
        files = self.scanned_files

        if not dir_exists_long(self.base_path):
            logger.error(f"Base directory does not exist: {{'path': {self.base_path!r}}}")
            return VerifyResult(success=False)

        records = self._database.files
        total = len(records)
        self.reporter.verifying_checksums(total)

        bad_files: List[BadFile] = []
        visited: Set[str] = set()

        for index, record in enumerate(records, start=1):
            self.reporter.verifying_file(index, total, record.name)
            visited.add(record.name)

            full_path = absolute_path(record.file_path, self.base_path)
            if not exists_long(full_path):
                if not ignore_missing:
                    bad_files.append(BadFile(record.name, BadFileType.MISSING))
                continue

            if ignore_checksum:
                continue

            disk = compute_checksum(full_path, self.algorithm)
            if disk != record.checksum:
                bad_files.append(BadFile(
                    record.name,
                    BadFileType.CHECKSUM_MISMATCH,
                    checksum_database=record.checksum,
                    checksum_disk=disk,
                ))

        if show_new:
            for file_path in files:
                name = self._canonical(file_path)
                if name not in visited:
                    bad_files.append(BadFile(name, BadFileType.NEW))

        self.reporter.verifying_checksums_completed(bad_files)

        logger.info(f"Verify complete: {{'files': {total}, 'bad_files': {len(bad_files)}}}")
        return VerifyResult(success=not bad_files, bad_files=tuple(bad_files))
