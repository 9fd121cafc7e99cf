from __future__ import annotations

"""
Nested Path Conventions.

Helpers shared by the walker and the resolver to build and split paths
that cross archive boundaries. A boundary is the archive extension
immediately followed by the delimiter, matched case-insensitively:
'a.ZIP/x' crosses one, 'a.zip' and 'a.zipfoo/x' do not.
"""

import posixpath
import re
from typing import Optional, Tuple

from zipwalk.domain.constants import ARCHIVE_EXTENSION, ARCHIVE_MARKER, PATH_SEP

_BOUNDARY_RX = re.compile(re.escape(ARCHIVE_MARKER), re.IGNORECASE)


def normalize(path: str) -> str:
    """
    Bring a path to canonical form: '/' delimiters, redundant segments removed.

    Args:
        path: Raw path, possibly using backslashes.

    Returns:
        str: Cleaned path.
    """
    return posixpath.normpath(path.replace("\\", PATH_SEP))


def split_archive_path(path: str) -> Tuple[str, Optional[str]]:
    """
    Split a path at its first archive boundary.

    Args:
        path: Normalized path.

    Returns:
        Tuple[str, Optional[str]]: (head ending in the archive extension,
        remainder after the delimiter). When no boundary exists the whole
        path is returned as head and the remainder is None.
    """
    match = _BOUNDARY_RX.search(path)
    if match is None:
        return path, None
    cut = match.start() + len(ARCHIVE_EXTENSION)
    return path[:cut], path[cut + 1:]


def join_virtual(prefix: str, entry_name: str) -> str:
    """
    Append an archive member name to the path of its container.

    The member name is cleaned so explicit directory entries ('dir/')
    and redundant segments map onto the same path a caller would type.
    """
    name = posixpath.normpath(entry_name.replace("\\", PATH_SEP)).lstrip(PATH_SEP)
    return prefix + PATH_SEP + name
