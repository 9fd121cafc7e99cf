from __future__ import annotations

"""
zipwalk: walk, stat and open files nested inside ZIP archives.

    import zipwalk

    def visit(path, info, stream, err):
        if err is not None:
            raise err
        print(path, info.size)

    zipwalk.walk("data", visit)
    with zipwalk.open("data/outer.zip/mid.zip/inner.txt") as f:
        content = f.read()
"""

from zipwalk.core.components.nested_stream import NestedFile
from zipwalk.core.services.resolver import open_path, stat_path
from zipwalk.core.services.walker import WalkFunc, walk
from zipwalk.domain.config import WalkOptions
from zipwalk.domain.errors import (
    ArchiveAnomaly,
    CorruptEntryError,
    EncryptedEntryError,
    EntryNotFoundError,
    EntryReadError,
    NestingLimitError,
    NotAnArchiveError,
    ZipWalkError,
)
from zipwalk.domain.node_models import NodeInfo, WalkControl

__version__ = "1.0.0"

SkipDir = WalkControl.SKIP_DIR
SkipZip = WalkControl.SKIP_ZIP

stat = stat_path
open = open_path

__all__ = [
    "walk",
    "stat",
    "open",
    "stat_path",
    "open_path",
    "WalkFunc",
    "WalkOptions",
    "WalkControl",
    "SkipDir",
    "SkipZip",
    "NodeInfo",
    "NestedFile",
    "ZipWalkError",
    "NotAnArchiveError",
    "EntryNotFoundError",
    "EntryReadError",
    "EncryptedEntryError",
    "CorruptEntryError",
    "NestingLimitError",
    "ArchiveAnomaly",
]
