from __future__ import annotations

"""
Node Data Models.

Defines the metadata descriptor shared by real filesystem objects and
virtual archive members, and the control values a visitor returns to
steer the walk.
"""

import enum
import os
import posixpath
import stat as stat_module
import zipfile
from dataclasses import dataclass
from typing import Optional

from zipwalk.domain.constants import ARCHIVE_EXTENSION

# -----------------------------------------------------------------------------
# CONTROL SIGNALS
# -----------------------------------------------------------------------------

class WalkControl(enum.Enum):
    """
    Values a visitor may return to steer the traversal.

    Returning None is the same as CONTINUE. Aborting the walk is done by
    raising from the visitor; the exception leaves 'walk' unchanged.
    """
    CONTINUE = "continue"
    SKIP_DIR = "skip_dir"
    SKIP_ZIP = "skip_zip"


def has_archive_extension(name: str) -> bool:
    """Case-insensitive test for the archive extension."""
    return name.lower().endswith(ARCHIVE_EXTENSION)

# -----------------------------------------------------------------------------
# METADATA DESCRIPTOR
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeInfo:
    """
    Metadata for a single node of the tree, real or virtual.

    Attributes:
        path: Full addressable path, segments joined by '/' inside archives.
        name: Last segment of the path.
        size: Size in bytes (uncompressed for archive members).
        mod_time: Modification time in epoch seconds. Virtual nodes carry
                  the time of the enclosing real archive file.
        is_dir: True for directories and explicit archive directory entries.
        is_archive: True when the name carries the archive extension.
        is_symlink: True for symbolic links (never followed).
        virtual: True when the node only exists inside an archive.
        compressed_size: Stored size for archive members, None otherwise.
    """
    path: str
    name: str
    size: int
    mod_time: float
    is_dir: bool = False
    is_archive: bool = False
    is_symlink: bool = False
    virtual: bool = False
    compressed_size: Optional[int] = None

    @property
    def is_container(self) -> bool:
        """Directories and archives have children."""
        return self.is_dir or self.is_archive

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> NodeInfo:
        """Build the descriptor of a real filesystem object."""
        is_dir = stat_module.S_ISDIR(st.st_mode)
        is_symlink = stat_module.S_ISLNK(st.st_mode)
        name = os.path.basename(os.path.normpath(path)) or path
        return cls(
            path=path,
            name=name,
            size=st.st_size,
            mod_time=st.st_mtime,
            is_dir=is_dir,
            is_archive=not is_dir and not is_symlink and has_archive_extension(name),
            is_symlink=is_symlink,
        )

    @classmethod
    def from_zip_entry(cls, path: str, entry: zipfile.ZipInfo, mod_time: float) -> NodeInfo:
        """
        Build the descriptor of an archive member.

        The timestamp stored in the archive is ignored; 'mod_time' is the
        modification time of the nearest enclosing real archive file.
        """
        is_dir = entry.is_dir()
        name = posixpath.basename(entry.filename.rstrip("/"))
        return cls(
            path=path,
            name=name,
            size=entry.file_size,
            mod_time=mod_time,
            is_dir=is_dir,
            is_archive=not is_dir and has_archive_extension(name),
            virtual=True,
            compressed_size=entry.compress_size,
        )
