from __future__ import annotations

"""
Archive Reading Component.

Wraps 'zipfile' with the failure classification the walker and the
resolver rely on: undecodable containers become NotAnArchiveError,
password protected members EncryptedEntryError, and damaged members
CorruptEntryError. Members are always read fully into memory.
"""

import io
import logging
import lzma
import struct
import zipfile
import zlib
from typing import BinaryIO, List, Optional, Union

from zipwalk.domain.constants import ZIP_FLAG_ENCRYPTED
from zipwalk.domain.errors import CorruptEntryError, EncryptedEntryError, NotAnArchiveError

logger = logging.getLogger(__name__)

# Errors zipfile raises while parsing a damaged central directory
# (UnicodeDecodeError, a ValueError, comes from flagged UTF-8 names)
_BAD_ARCHIVE_ERRORS = (zipfile.BadZipFile, EOFError, ValueError, OSError, struct.error, NotImplementedError)

# Errors zipfile and its codecs raise while inflating a damaged member (bz2 reports OSError)
CORRUPT_MEMBER_ERRORS = (
    zipfile.BadZipFile,
    EOFError,
    zlib.error,
    lzma.LZMAError,
    OSError,
    NotImplementedError,
)

# -----------------------------------------------------------------------------
# CONTAINER DECODING
# -----------------------------------------------------------------------------

def open_archive(source: Union[bytes, BinaryIO], label: str) -> zipfile.ZipFile:
    """
    Decode the central directory of a ZIP archive.

    Args:
        source: Raw archive bytes or a seekable binary stream.
        label: Addressable path of the archive, used in messages.

    Returns:
        zipfile.ZipFile: Open archive handle. The caller owns and closes it.

    Raises:
        NotAnArchiveError: If the source is not a decodable ZIP archive.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        return zipfile.ZipFile(source)
    except _BAD_ARCHIVE_ERRORS as e:
        raise NotAnArchiveError(f"'{label}' is not a valid zip file: {e}", path=label) from e


def list_entries(archive: zipfile.ZipFile) -> List[zipfile.ZipInfo]:
    """Return the members in the order they are stored in the archive."""
    return archive.infolist()


def find_entry(archive: zipfile.ZipFile, name: str) -> Optional[zipfile.ZipInfo]:
    """
    Locate a member by exact, case-sensitive name.

    An explicit directory entry stored as 'name/' also matches 'name'.
    The first stored match wins.
    """
    for entry in archive.infolist():
        if entry.filename == name:
            return entry
        if entry.is_dir() and entry.filename.rstrip("/") == name:
            return entry
    return None

# -----------------------------------------------------------------------------
# MEMBER ACCESS
# -----------------------------------------------------------------------------

def open_entry(archive: zipfile.ZipFile, entry: zipfile.ZipInfo, label: str) -> BinaryIO:
    """
    Open a streaming reader over one member.

    Raises:
        EncryptedEntryError: If the member is password protected.
        CorruptEntryError: If the member header is damaged or its
                           compression method is unsupported.
    """
    if entry.flag_bits & ZIP_FLAG_ENCRYPTED:
        raise EncryptedEntryError(f"'{label}' is encrypted", path=label)
    try:
        return archive.open(entry)
    except CORRUPT_MEMBER_ERRORS as e:
        raise CorruptEntryError(f"'{label}' cannot be opened: {e}", path=label) from e


def read_entry(archive: zipfile.ZipFile, entry: zipfile.ZipInfo, label: str) -> bytes:
    """
    Read the full decompressed content of one member.

    Args:
        archive: Open archive holding the member.
        entry: Member descriptor from the archive's directory.
        label: Addressable path of the member, used in messages.

    Returns:
        bytes: Decompressed content.

    Raises:
        EncryptedEntryError: If the member is password protected.
        CorruptEntryError: If the member is truncated or fails its CRC.
    """
    stream = open_entry(archive, entry, label)
    try:
        with stream:
            content = stream.read()
    except CORRUPT_MEMBER_ERRORS as e:
        raise CorruptEntryError(f"'{label}' is corrupt or truncated: {e}", path=label) from e

    logger.debug(f"Read {len(content)} bytes from '{label}'")
    return content
