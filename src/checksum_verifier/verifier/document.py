"""XML document holding a checksum database.

Layout::

    <?xml version='1.0' encoding='utf-8'?>
    <db>
      <files>
        <file name="photos/1.jpg" checksum="a5ea0ad9..." />
      </files>
    </db>
"""

import contextlib
import logging
import os
import re
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, List, Tuple

from .errors import DatabaseLoadError

logger = logging.getLogger(__name__)

ROOT_TAG = "db"
FILES_TAG = "files"
FILE_TAG = "file"
NAME_ATTRIBUTE = "name"
CHECKSUM_ATTRIBUTE = "checksum"

# Characters an attribute value can carry through a write and a parse unchanged:
# XML 1.0 characters minus the whitespace that attribute normalization rewrites
_UNSTORABLE = re.compile("[^\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def is_storable_name(name: str) -> bool:
    """
    Return True if name survives a write_document() / read_document() round trip.

    Control characters and undecodable file name bytes (held as lone
    surrogates) cannot be represented in the document.
    """
    return _UNSTORABLE.search(name) is None


def read_document(document_path: Path) -> List[Tuple[str, str]]:
    """
    Read (name, checksum) entries from a database document.

    Missing attributes are returned as empty strings; callers decide what
    to do with such entries.

    Raises:
        DatabaseLoadError: If the document is not well-formed XML or its
            root element is not a checksum database
        OSError: If the document cannot be read
    """
    try:
        tree = ET.parse(document_path)
    except ET.ParseError as e:
        raise DatabaseLoadError(
            f"Malformed database document: {document_path}",
            path=str(document_path),
            error=str(e),
        ) from e

    root = tree.getroot()
    if root.tag != ROOT_TAG:
        raise DatabaseLoadError(
            f"Unexpected root element <{root.tag}> in {document_path}",
            path=str(document_path),
        )

    entries = [
        (element.get(NAME_ATTRIBUTE, ""), element.get(CHECKSUM_ATTRIBUTE, ""))
        for element in root.iterfind(f"{FILES_TAG}/{FILE_TAG}")
    ]
    logger.debug(f"Read database document: {{'path': {str(document_path)!r}, 'entries': {len(entries)}}}")
    return entries


def write_document(document_path: Path, entries: Iterable[Tuple[str, str]]) -> None:
    """
    Write (name, checksum) entries to a database document, in the given order.

    The document is written to a temporary file next to document_path and
    moved over it, so a failed write leaves the previous document intact.

    Raises:
        ValueError: If a name cannot be stored (see is_storable_name)
        OSError: If the document cannot be written
    """
    root = ET.Element(ROOT_TAG)
    files = ET.SubElement(root, FILES_TAG)
    for name, checksum in entries:
        if not is_storable_name(name):
            raise ValueError(f"File name cannot be stored in the database: {name!r}")
        ET.SubElement(files, FILE_TAG, {NAME_ATTRIBUTE: name, CHECKSUM_ATTRIBUTE: checksum})

    ET.indent(root)

    document_path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(prefix=f".{document_path.name}.", suffix=".tmp", dir=document_path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            ET.ElementTree(root).write(f, encoding="utf-8", xml_declaration=True)
        os.replace(temp_path, document_path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_path)
        raise
