from __future__ import annotations

"""
Archive-Aware Tree Walker.

Depth-first traversal of a real directory tree that descends into every
ZIP archive it meets, including archives stored inside archives. Real
nodes are visited in lexical order, archive members in stored order, and
every node (real or virtual) is presented to the same visitor callback.
"""

import io
import logging
import os
import stat as stat_module
import zipfile
from typing import BinaryIO, Callable, List, Optional, Union

from zipwalk.core.components.archive_reader import list_entries, open_archive, read_entry
from zipwalk.core.components.paths import join_virtual
from zipwalk.domain.config import DEFAULT_OPTIONS, WalkOptions
from zipwalk.domain.errors import ArchiveAnomaly, NestingLimitError, ZipWalkError
from zipwalk.domain.node_models import NodeInfo, WalkControl
from zipwalk.infra import fs

logger = logging.getLogger(__name__)

WalkFunc = Callable[
    [str, Optional[NodeInfo], Optional[BinaryIO], Optional[BaseException]],
    Optional[WalkControl],
]

# ==============================================================================
# PUBLIC API
# ==============================================================================

def walk(
        root: Union[str, os.PathLike],
        visit: WalkFunc,
        options: Optional[WalkOptions] = None,
) -> None:
    """
    Walk the tree rooted at 'root', descending into ZIP archives.

    The visitor is called as visit(path, info, stream, err) for every node:
    - Directories (real, or explicit entries inside an archive) get no stream.
    - Files get a binary stream positioned at 0 that is closed as soon as
      the visitor returns. Archives are visited this way too, before their
      members.
    - A non-None 'err' describes a problem reaching the node; 'info' may be
      None when even its metadata was unavailable.

    The visitor returns None (or WalkControl.CONTINUE) to go on,
    WalkControl.SKIP_DIR to skip a directory's children (or, for a plain
    file, its remaining siblings), or WalkControl.SKIP_ZIP to keep an
    archive closed. Raising from the visitor aborts the walk: every open
    handle is released and the exception propagates to the caller.

    Archive members inherit the modification time of the real archive file
    that encloses them. Undecodable archives and unreadable members are
    logged and skipped.

    Args:
        root: Directory or file to start from.
        visit: Callback invoked for every node.
        options: Optional tuning of archive descent and anomaly reporting.
    """
    TreeWalker(visit, options or DEFAULT_OPTIONS).run(os.fspath(root))

# ==============================================================================
# TRAVERSAL ENGINE
# ==============================================================================

class TreeWalker:
    """Holds the visitor and options for one traversal."""

    def __init__(self, visit: WalkFunc, options: WalkOptions) -> None:
        self._visit = visit
        self._options = options

    def run(self, root: str) -> None:
        logger.debug(f"Walking tree rooted at '{root}'")
        try:
            st = fs.lstat(root)
        except OSError as e:
            self._call(root, None, None, e)
            return
        self._walk_real(root, st)

    # --------------------------------------------------------------------------
    # Real filesystem
    # --------------------------------------------------------------------------

    def _walk_real(self, path: str, st: os.stat_result) -> WalkControl:
        """Visit one real node. Returns SKIP_DIR when its siblings must be skipped."""
        info = NodeInfo.from_stat(path, st)
        if info.is_dir:
            self._walk_real_dir(path, info)
            return WalkControl.CONTINUE

        # Links, fifos and devices are reported but never opened
        if not stat_module.S_ISREG(st.st_mode):
            return self._call(path, info, None, None)

        return self._walk_real_file(path, info)

    def _walk_real_dir(self, path: str, info: NodeInfo) -> None:
        if self._call(path, info, None, None) is WalkControl.SKIP_DIR:
            logger.debug(f"Skipping directory '{path}'")
            return

        try:
            names = fs.list_dir_sorted(path)
        except OSError as e:
            self._call(path, info, None, e)
            return

        for name in names:
            child = os.path.join(path, name)
            try:
                child_st = fs.lstat(child)
            except OSError as e:
                self._call(child, None, None, e)
                continue
            if self._walk_real(child, child_st) is WalkControl.SKIP_DIR:
                logger.debug(f"Skipping remaining entries of '{path}'")
                break

    def _walk_real_file(self, path: str, info: NodeInfo) -> WalkControl:
        try:
            handle = fs.open_binary(path)
        except OSError as e:
            return self._call(path, info, None, e)

        with handle:
            control = self._call(path, info, handle, None)
            if not info.is_archive:
                return control
            if not self._should_descend(path, info, control, depth=1):
                return WalkControl.CONTINUE
            try:
                content = self._read_back(path, handle)
            except OSError as e:
                self._call(path, info, None, e)
                return WalkControl.CONTINUE

        self._walk_archive(path, info, content, info.mod_time, depth=1)
        return WalkControl.CONTINUE

    @staticmethod
    def _read_back(path: str, handle: BinaryIO) -> bytes:
        """Archive bytes after the visit; a stream the visitor closed is reopened."""
        if handle.closed:
            with fs.open_binary(path) as fresh:
                return fresh.read()
        handle.seek(0)
        return handle.read()

    # --------------------------------------------------------------------------
    # Archive contents
    # --------------------------------------------------------------------------

    def _walk_archive(
            self,
            path: str,
            info: NodeInfo,
            content: bytes,
            mod_time: float,
            depth: int,
    ) -> None:
        """Decode an archive held in memory and visit its members in stored order."""
        try:
            archive = open_archive(content, path)
        except ArchiveAnomaly as e:
            self._report_anomaly(path, info, e)
            return

        with archive:
            skipped_dirs: List[str] = []
            for entry in list_entries(archive):
                if any(entry.filename.startswith(d) for d in skipped_dirs):
                    continue
                control = self._walk_entry(archive, entry, path, mod_time, depth)
                if control is not WalkControl.SKIP_DIR:
                    continue
                if entry.is_dir():
                    skipped_dirs.append(entry.filename)
                else:
                    logger.debug(f"Skipping remaining entries of '{path}'")
                    break

    def _walk_entry(
            self,
            archive: zipfile.ZipFile,
            entry: zipfile.ZipInfo,
            prefix: str,
            mod_time: float,
            depth: int,
    ) -> WalkControl:
        path = join_virtual(prefix, entry.filename)
        info = NodeInfo.from_zip_entry(path, entry, mod_time)

        # Directory entries are metadata only; their children are later entries
        if info.is_dir:
            return self._call(path, info, None, None)

        try:
            content = read_entry(archive, entry, path)
        except ArchiveAnomaly as e:
            self._report_anomaly(path, info, e)
            return WalkControl.CONTINUE

        with io.BytesIO(content) as stream:
            control = self._call(path, info, stream, None)

        if not info.is_archive:
            return control
        if self._should_descend(path, info, control, depth=depth + 1):
            self._walk_archive(path, info, content, mod_time, depth + 1)
        return WalkControl.CONTINUE

    def _should_descend(self, path: str, info: NodeInfo, control: WalkControl, depth: int) -> bool:
        if control in (WalkControl.SKIP_ZIP, WalkControl.SKIP_DIR):
            logger.debug(f"Visitor skipped archive '{path}'")
            return False
        if not self._options.descend_archives:
            return False
        if not self._options.allows_depth(depth):
            error = NestingLimitError(
                f"'{path}' is nested {depth} levels deep, limit is {self._options.max_depth}",
                path=path,
            )
            self._report_anomaly(path, info, error)
            return False
        return True

    # --------------------------------------------------------------------------
    # Visitor plumbing
    # --------------------------------------------------------------------------

    def _call(
            self,
            path: str,
            info: Optional[NodeInfo],
            stream: Optional[BinaryIO],
            err: Optional[BaseException],
    ) -> WalkControl:
        result = self._visit(path, info, stream, err)
        if result is None:
            return WalkControl.CONTINUE
        if not isinstance(result, WalkControl):
            raise TypeError(
                f"Visitor returned {result!r} for '{path}'; expected None or a WalkControl"
            )
        return result

    def _report_anomaly(self, path: str, info: Optional[NodeInfo], error: ZipWalkError) -> None:
        """Log a node-level problem and, if requested, hand it to the visitor."""
        logger.warning(f"Skipping '{path}': {error}")
        if self._options.report_anomalies:
            self._call(path, info, None, error)
