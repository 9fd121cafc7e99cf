from __future__ import annotations

"""
Domain Constants.

Centralizes the path conventions shared by the walker and the resolver:
the canonical segment delimiter and the archive extension that marks a
boundary between real and virtual segments.
"""

# Canonical delimiter for every path handed out or accepted by the package
PATH_SEP = "/"

# The only container format understood by the archive reader
ARCHIVE_EXTENSION = ".zip"

# Extension immediately followed by the delimiter: the archive boundary
ARCHIVE_MARKER = ARCHIVE_EXTENSION + PATH_SEP

# General purpose flag bit 0 of a ZIP header: entry is encrypted
ZIP_FLAG_ENCRYPTED = 0x1
