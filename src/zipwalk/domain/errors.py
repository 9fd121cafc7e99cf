from __future__ import annotations

"""
Error Taxonomy.

Exceptions raised by the archive reader and the path resolver, and
reported by the walker as per-node anomalies. Control-flow signals
(skip a directory or an archive) are not errors and live in
'zipwalk.domain.node_models.WalkControl'.
"""

from typing import Optional, Tuple, Type


class ZipWalkError(Exception):
    """
    Base class for every failure raised by zipwalk.

    Attributes:
        path: Addressable path of the node involved, if known.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class NotAnArchiveError(ZipWalkError):
    """Bytes believed to be a ZIP archive could not be decoded as one."""


class EntryNotFoundError(ZipWalkError, FileNotFoundError):
    """A segment of a nested path does not exist inside its archive."""


class EntryReadError(ZipWalkError):
    """An archive member could not be decompressed."""


class EncryptedEntryError(EntryReadError):
    """The member is password protected."""


class CorruptEntryError(EntryReadError):
    """The member is truncated, fails its CRC, or uses an unsupported method."""


class NestingLimitError(ZipWalkError):
    """An archive lies deeper than the configured maximum nesting depth."""


# Node-level problems the walker logs and skips instead of aborting
ArchiveAnomaly: Tuple[Type[ZipWalkError], ...] = (
    NotAnArchiveError,
    EntryReadError,
    NestingLimitError,
)
