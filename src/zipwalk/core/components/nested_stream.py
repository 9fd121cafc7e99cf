from __future__ import annotations

"""
Nested Stream Handle.

A binary stream over a file reached through any number of archives.
The handle owns every resource opened while descending to it (the outer
file, each archive, each in-memory buffer) and releases them together.
"""

import io
import logging
from typing import Any, BinaryIO, List, NoReturn, Optional, TypeVar

from zipwalk.core.components.archive_reader import CORRUPT_MEMBER_ERRORS
from zipwalk.domain.errors import CorruptEntryError
from zipwalk.domain.node_models import NodeInfo

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class ResourceChain:
    """
    Ordered set of closable resources released in reverse acquisition order.

    close() attempts every resource, then raises the first error it met.
    Calling it again is a no-op.
    """

    def __init__(self) -> None:
        self._resources: List[Any] = []
        self._closed = False

    def push(self, resource: _T) -> _T:
        self._resources.append(resource)
        return resource

    def __len__(self) -> int:
        return len(self._resources)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        first_error: Optional[BaseException] = None
        while self._resources:
            resource = self._resources.pop()
            try:
                resource.close()
            except Exception as e:
                logger.debug(f"Error closing {resource!r}: {e}")
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise first_error

    def release_after_failure(self) -> None:
        """Release everything while another exception is already propagating."""
        try:
            self.close()
        except Exception as e:
            logger.warning(f"Error releasing resources after a failed open: {e}")


class NestedFile(io.RawIOBase):
    """
    Readable binary stream returned by 'zipwalk.open'.

    Attributes:
        info: Metadata of the opened node.
    """

    def __init__(self, stream: BinaryIO, info: NodeInfo, chain: ResourceChain) -> None:
        super().__init__()
        self._stream = stream
        self._chain = chain
        self.info = info

    @property
    def name(self) -> str:
        return self.info.path

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        try:
            return self._stream.readinto(buffer)
        except CORRUPT_MEMBER_ERRORS as e:
            self._raise_corrupt(e)

    def readall(self) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        try:
            return self._stream.read()
        except CORRUPT_MEMBER_ERRORS as e:
            self._raise_corrupt(e)

    def seekable(self) -> bool:
        return not self.closed and self._stream.seekable()

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        # Seeking a compressed member decompresses up to the target
        try:
            return self._stream.seek(offset, whence)
        except CORRUPT_MEMBER_ERRORS as e:
            self._raise_corrupt(e)

    def tell(self) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        return self._stream.tell()

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._chain.close()
        finally:
            super().close()

    def _raise_corrupt(self, error: BaseException) -> NoReturn:
        """Decompression failures of archive members surface as CorruptEntryError."""
        if not self.info.virtual:
            raise error
        path = self.info.path
        raise CorruptEntryError(f"'{path}' is corrupt or truncated: {error}", path=path) from error

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<NestedFile {self.info.path!r} {state}>"
