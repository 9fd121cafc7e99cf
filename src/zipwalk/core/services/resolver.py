from __future__ import annotations

"""
Nested Path Resolver.

Addresses a single node through a path that mixes real segments and
archive member names, e.g. 'data/outer.zip/mid.zip/inner.txt'. Each
'.zip/' boundary (extension matched case-insensitively) opens the
archive on its left and continues inside it. Lookups are precise:
a missing segment or an undecodable archive is raised, never skipped.
"""

import errno
import io
import logging
import os
import zipfile
from typing import Union

from zipwalk.core.components.archive_reader import find_entry, open_archive, open_entry, read_entry
from zipwalk.core.components.nested_stream import NestedFile, ResourceChain
from zipwalk.core.components.paths import join_virtual, normalize, split_archive_path
from zipwalk.domain.errors import EntryNotFoundError
from zipwalk.domain.node_models import NodeInfo
from zipwalk.infra import fs

logger = logging.getLogger(__name__)

# ==============================================================================
# PUBLIC API
# ==============================================================================

def stat_path(path: Union[str, os.PathLike]) -> NodeInfo:
    """
    Return the metadata of a real or nested node.

    Members report the modification time of the real archive file that
    encloses them, like they do during a walk.

    Args:
        path: Path using '/' (or '\\') delimiters, possibly crossing archives.

    Returns:
        NodeInfo: Metadata of the final segment.

    Raises:
        FileNotFoundError: If a real segment does not exist.
        EntryNotFoundError: If an archive member does not exist.
        NotAnArchiveError: If a segment addressed as an archive cannot be decoded.
        EntryReadError: If an intermediate archive member cannot be decompressed.
    """
    path = normalize(os.fspath(path))
    archive_path, remainder = split_archive_path(path)
    if remainder is None:
        return NodeInfo.from_stat(path, fs.stat(path))

    mod_time = fs.stat(archive_path).st_mtime
    with fs.open_binary(archive_path) as handle:
        with open_archive(handle, archive_path) as archive:
            return _stat_in_archive(archive, archive_path, remainder, mod_time)


def open_path(path: Union[str, os.PathLike]) -> NestedFile:
    """
    Open a real or nested file for binary reading.

    The returned handle owns every file, archive and buffer opened on the
    way down and releases them, innermost first, when it is closed. It is
    also a context manager.

    Args:
        path: Path using '/' (or '\\') delimiters, possibly crossing archives.

    Returns:
        NestedFile: Readable stream over the final segment.

    Raises:
        FileNotFoundError: If a real segment does not exist.
        EntryNotFoundError: If an archive member does not exist.
        IsADirectoryError: If the final segment is a directory.
        NotAnArchiveError: If a segment addressed as an archive cannot be decoded.
        EntryReadError: If a member on the way cannot be decompressed.
    """
    path = normalize(os.fspath(path))
    archive_path, remainder = split_archive_path(path)
    chain = ResourceChain()
    try:
        if remainder is None:
            info = NodeInfo.from_stat(path, fs.stat(path))
            _reject_directory(info)
            return NestedFile(chain.push(fs.open_binary(path)), info, chain)

        mod_time = fs.stat(archive_path).st_mtime
        handle = chain.push(fs.open_binary(archive_path))
        archive = chain.push(open_archive(handle, archive_path))
        prefix = archive_path

        while True:
            target, rest = split_archive_path(remainder)
            entry = _require_entry(archive, prefix, target)
            entry_path = join_virtual(prefix, target)
            if rest is None:
                break
            content = read_entry(archive, entry, entry_path)
            buffer = chain.push(io.BytesIO(content))
            archive = chain.push(open_archive(buffer, entry_path))
            prefix, remainder = entry_path, rest

        info = NodeInfo.from_zip_entry(entry_path, entry, mod_time)
        _reject_directory(info)
        stream = chain.push(open_entry(archive, entry, entry_path))
        logger.debug(f"Opened '{entry_path}' through {len(chain)} resources")
        return NestedFile(stream, info, chain)
    except BaseException:
        chain.release_after_failure()
        raise

# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _stat_in_archive(
        archive: zipfile.ZipFile,
        prefix: str,
        remainder: str,
        mod_time: float,
) -> NodeInfo:
    """Resolve 'remainder' inside an open archive, descending into nested ones."""
    target, rest = split_archive_path(remainder)
    entry = _require_entry(archive, prefix, target)
    entry_path = join_virtual(prefix, target)
    if rest is None:
        return NodeInfo.from_zip_entry(entry_path, entry, mod_time)

    content = read_entry(archive, entry, entry_path)
    with open_archive(content, entry_path) as nested:
        return _stat_in_archive(nested, entry_path, rest, mod_time)


def _require_entry(archive: zipfile.ZipFile, prefix: str, name: str) -> zipfile.ZipInfo:
    entry = find_entry(archive, name)
    if entry is None:
        missing = join_virtual(prefix, name)
        raise EntryNotFoundError(f"No such entry in '{prefix}': '{name}'", path=missing)
    return entry


def _reject_directory(info: NodeInfo) -> None:
    if info.is_dir:
        raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), info.path)
