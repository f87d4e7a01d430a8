"""Shared fixtures for verifier tests."""

from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import pytest
from checksum_verifier.verifier.document import write_document
from checksum_verifier.verifier.reporter import EngineReporter

MD5_1 = "c4ca4238a0b923820dcc509a6f75849b"
MD5_2 = "c81e728d9d4c2f636f067f89cc14862c"
MD5_3 = "eccbc87e4b5ce2fe28308fd9f2a7baf3"

MD5_BY_NAME: Dict[str, str] = {"1": MD5_1, "2": MD5_2, "3": MD5_3}


class RecordingReporter(EngineReporter):
    """Reporter that records every event as a tuple."""

    def __init__(self) -> None:
        self.events: List[Tuple] = []

    def names(self) -> List[str]:
        return [event[0] for event in self.events]

    def scanning_files(self) -> None:
        self.events.append(("scanning_files",))

    def scanning_files_completed(self, file_count: int) -> None:
        self.events.append(("scanning_files_completed", file_count))

    def updating_checksums(self, file_count: int) -> None:
        self.events.append(("updating_checksums", file_count))

    def updated_file(self, file_path: str) -> None:
        self.events.append(("updated_file", file_path))

    def adding_file(self, name: str) -> None:
        self.events.append(("adding_file", name))

    def adding_file_completed(self, name: str, checksum: str) -> None:
        self.events.append(("adding_file_completed", name, checksum))

    def skipped_file(self, name: str) -> None:
        self.events.append(("skipped_file", name))

    def removed_file(self, file_path: str) -> None:
        self.events.append(("removed_file", file_path))

    def writing_database(self, document_path: str) -> None:
        self.events.append(("writing_database", document_path))

    def writing_database_completed(self) -> None:
        self.events.append(("writing_database_completed",))

    def updating_checksums_completed(self, had_changes: bool) -> None:
        self.events.append(("updating_checksums_completed", had_changes))

    def verifying_checksums(self, file_count: int) -> None:
        self.events.append(("verifying_checksums", file_count))

    def verifying_file(self, current: int, total: int, name: str) -> None:
        self.events.append(("verifying_file", current, total, name))

    def verifying_checksums_completed(self, bad_files) -> None:
        self.events.append(("verifying_checksums_completed", list(bad_files)))


def make_files(directory: Path, names: Iterable[str]) -> Path:
    """Create files whose content is their own base name."""
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        file_path = directory / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(file_path.name.encode('utf-8'))
    return directory


@pytest.fixture
def corpus(tmp_path) -> Path:
    """Directory with files '1' and '2'."""
    return make_files(tmp_path / "files", ["1", "2"])


@pytest.fixture
def database_path(tmp_path) -> Path:
    """Location for the database document (not created)."""
    return tmp_path / "db" / "checksums.xml"


@pytest.fixture
def good_database(database_path) -> Path:
    """Database document matching the corpus."""
    write_document(database_path, [("1", MD5_1), ("2", MD5_2)])
    return database_path


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
