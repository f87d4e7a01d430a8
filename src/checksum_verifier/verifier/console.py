"""Console reporter for the command line."""

import shutil
import sys
from typing import Optional, Sequence, TextIO

from .reporter import EngineReporter
from .results import BadFile, BadFileType


def display_name(name: str) -> str:
    """Make a file name printable; undecodable bytes are shown as escapes."""
    return name.encode("utf-8", "backslashreplace").decode("utf-8")


class ConsoleReporter(EngineReporter):
    """Reports engine progress to a text stream (stdout by default).

    Per-file verification progress overwrites a single line when the
    stream is a terminal, and prints one line per file otherwise.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _is_terminal(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def write_progress_line(self, text: str) -> None:
        """Write a progress line, overwriting the previous one on a terminal."""
        if not self._is_terminal():
            self._write(text + "\n")
            return

        width = shutil.get_terminal_size().columns - 1
        if len(text) > width:
            text = text[:width - 3] + "..."
        self._write("\r" + text.ljust(width))

    def scanning_files(self) -> None:
        self._write("Scanning for matching files on disk... ")

    def scanning_files_completed(self, file_count: int) -> None:
        self._write("done.\n\n")
        self._write(f"Disk:    {file_count} files\n")

    def updating_checksums(self, file_count: int) -> None:
        self._write(f"XML DB:  {file_count} files\n\n")
        self._write("Updating...\n")

    def updated_file(self, file_path: str) -> None:
        self._write(f"Changes in {file_path}\n")

    def adding_file(self, name: str) -> None:
        self._write(f"Adding {name}: ")

    def adding_file_completed(self, name: str, checksum: str) -> None:
        self._write(f"{checksum or '(checksum unavailable, skipped)'}\n")

    def skipped_file(self, name: str) -> None:
        self._write(f"Skipping {name!r} (name cannot be stored)\n")

    def removed_file(self, file_path: str) -> None:
        self._write(f"Removing {file_path} (does not exist)\n")

    def writing_database(self, document_path: str) -> None:
        self._write(f"Writing {document_path}... ")

    def writing_database_completed(self) -> None:
        self._write("done.\n")

    def updating_checksums_completed(self, had_changes: bool) -> None:
        if not had_changes:
            self._write("No changes required.\n")

    def verifying_checksums(self, file_count: int) -> None:
        self._write(f"XML DB:  {file_count} files\n\n")
        self._write("Verifying files:\n")

    def verifying_file(self, current: int, total: int, name: str) -> None:
        self.write_progress_line(f"[{current:4} / {total:4}] {name}")

    def verifying_checksums_completed(self, bad_files: Sequence[BadFile]) -> None:
        self._write("\n\nResults:\n")

        if not bad_files:
            self._write("\tAll files verified.\n")
            return

        for bad_file in bad_files:
            if bad_file.bad_file_type == BadFileType.MISSING:
                self._write(f"\tMissing: {bad_file.name}\n")
            elif bad_file.bad_file_type == BadFileType.CHECKSUM_MISMATCH:
                self._write(
                    f"\tMismatch: {bad_file.name}: {bad_file.checksum_database} (database) "
                    f"vs. {bad_file.checksum_disk} (disk)\n"
                )
            else:
                self._write(f"\tNew: {display_name(bad_file.name)}\n")
