"""Progress reporting interface for the checksum engine."""

from abc import ABC, abstractmethod
from typing import Sequence

from .results import BadFile


class EngineReporter(ABC):
    """Receives engine progress events.

    The engine calls these synchronously, in order, from the thread running
    the operation.
    """

    @abstractmethod
    def scanning_files(self) -> None:
        """The engine is scanning the file system for matching files."""

    @abstractmethod
    def scanning_files_completed(self, file_count: int) -> None:
        """The scan finished and found file_count files."""

    @abstractmethod
    def updating_checksums(self, file_count: int) -> None:
        """An update starts; file_count files are already in the database."""

    @abstractmethod
    def updated_file(self, file_path: str) -> None:
        """A file's stored checksum was replaced."""

    @abstractmethod
    def adding_file(self, name: str) -> None:
        """A new file was found; its checksum is about to be computed."""

    @abstractmethod
    def adding_file_completed(self, name: str, checksum: str) -> None:
        """A new file was added. checksum is empty if it could not be computed."""

    @abstractmethod
    def skipped_file(self, name: str) -> None:
        """A new file was left out because its name cannot be stored."""

    @abstractmethod
    def removed_file(self, file_path: str) -> None:
        """A file missing from disk is being removed from the database."""

    @abstractmethod
    def writing_database(self, document_path: str) -> None:
        """The database is being written to disk."""

    @abstractmethod
    def writing_database_completed(self) -> None:
        """The database was written."""

    @abstractmethod
    def updating_checksums_completed(self, had_changes: bool) -> None:
        """The update finished."""

    @abstractmethod
    def verifying_checksums(self, file_count: int) -> None:
        """A verification of file_count database entries starts."""

    @abstractmethod
    def verifying_file(self, current: int, total: int, name: str) -> None:
        """Entry number current (1-based) of total is being verified."""

    @abstractmethod
    def verifying_checksums_completed(self, bad_files: Sequence[BadFile]) -> None:
        """The verification finished with the given discrepancies."""


class NullReporter(EngineReporter):
    """Reporter that ignores all events."""

    def scanning_files(self) -> None:
        pass

    def scanning_files_completed(self, file_count: int) -> None:
        pass

    def updating_checksums(self, file_count: int) -> None:
        pass

    def updated_file(self, file_path: str) -> None:
        pass

    def adding_file(self, name: str) -> None:
        pass

    def adding_file_completed(self, name: str, checksum: str) -> None:
        pass

    def skipped_file(self, name: str) -> None:
        pass

    def removed_file(self, file_path: str) -> None:
        pass

    def writing_database(self, document_path: str) -> None:
        pass

    def writing_database_completed(self) -> None:
        pass

    def updating_checksums_completed(self, had_changes: bool) -> None:
        pass

    def verifying_checksums(self, file_count: int) -> None:
        pass

    def verifying_file(self, current: int, total: int, name: str) -> None:
        pass

    def verifying_checksums_completed(self, bad_files: Sequence[BadFile]) -> None:
        pass
