from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Thin abstraction over 'os' used by the walker and the resolver for every
access to real files. Keeping these calls in one place gives tests a
single seam to patch and keeps symbolic links unfollowed during walks.
"""

import os
from typing import BinaryIO, List, Optional

# -----------------------------------------------------------------------------
# METADATA API
# -----------------------------------------------------------------------------

def lstat(path: str) -> os.stat_result:
    """Stat a path without following a trailing symbolic link."""
    return os.lstat(path)


def stat(path: str) -> os.stat_result:
    """Stat a path, following symbolic links."""
    return os.stat(path)


def list_dir_sorted(path: str) -> List[str]:
    """
    List the entry names of a directory in lexical order.

    Args:
        path: Directory to read.

    Returns:
        List[str]: Sorted child names (not full paths).

    Raises:
        OSError: If the directory cannot be read.
    """
    names = os.listdir(path)
    names.sort()
    return names

# -----------------------------------------------------------------------------
# CONTENT API
# -----------------------------------------------------------------------------

def open_binary(path: str) -> BinaryIO:
    """Open a real file for binary reading."""
    return open(path, "rb")


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a user supplied path string into an absolute path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)
