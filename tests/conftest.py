from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Factories that build ZIP archives in memory, optionally damaged.
3. Ready-made directory trees holding archives nested several levels deep.
"""

import hashlib
import io
import os
import struct
import sys
import zipfile
from pathlib import Path
from typing import Callable, Iterable, List, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

HI_THERE = b"hi there"

# Fixed, whole-second timestamps so comparisons are exact on every filesystem
ARCHIVE_MTIME = 1_600_000_000
OTHER_MTIME = 1_500_000_000

ZipEntries = Iterable[Tuple[str, bytes]]


# -----------------------------------------------------------------------------
# Archive Builders
# -----------------------------------------------------------------------------
def _build_zip(entries: ZipEntries, compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Write (name, content) pairs into a ZIP held in memory, preserving order."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        for name, content in entries:
            zf.writestr(name, content)
    return buf.getvalue()


def _mark_encrypted(data: bytes, name: str) -> bytes:
    """Set the 'encrypted' general purpose flag of one member in both headers."""
    raw = bytearray(data)
    encoded = name.encode("utf-8")

    # Local file headers: flags at offset 6, name length at 26, name at 30
    pos = raw.find(b"PK\x03\x04")
    while pos != -1:
        (name_len,) = struct.unpack_from("<H", raw, pos + 26)
        if bytes(raw[pos + 30:pos + 30 + name_len]) == encoded:
            (flags,) = struct.unpack_from("<H", raw, pos + 6)
            struct.pack_into("<H", raw, pos + 6, flags | 0x1)
        pos = raw.find(b"PK\x03\x04", pos + 4)

    # Central directory headers: flags at offset 8, name length at 28, name at 46
    pos = raw.find(b"PK\x01\x02")
    while pos != -1:
        (name_len,) = struct.unpack_from("<H", raw, pos + 28)
        if bytes(raw[pos + 46:pos + 46 + name_len]) == encoded:
            (flags,) = struct.unpack_from("<H", raw, pos + 8)
            struct.pack_into("<H", raw, pos + 8, flags | 0x1)
        pos = raw.find(b"PK\x01\x02", pos + 4)

    return bytes(raw)


def _central_headers(raw: bytearray, name: str) -> List[int]:
    """Offsets of the central directory headers naming 'name'."""
    encoded = name.encode("utf-8")
    found = []
    pos = raw.find(b"PK\x01\x02")
    while pos != -1:
        (name_len,) = struct.unpack_from("<H", raw, pos + 28)
        if bytes(raw[pos + 46:pos + 46 + name_len]) == encoded:
            found.append(pos)
        pos = raw.find(b"PK\x01\x02", pos + 4)
    return found


def _truncate_member(data: bytes, name: str) -> bytes:
    """Halve the compressed size recorded for 'name' so its stream ends early."""
    raw = bytearray(data)
    for pos in _central_headers(raw, name):
        (size,) = struct.unpack_from("<I", raw, pos + 20)
        struct.pack_into("<I", raw, pos + 20, size // 2)
    return bytes(raw)


def _damage_member_data(data: bytes, name: str, offset: int = 16, length: int = 48) -> bytes:
    """Invert a run of the compressed bytes of 'name'."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        info = zf.getinfo(name)

    raw = bytearray(data)
    name_len, extra_len = struct.unpack_from("<HH", raw, info.header_offset + 26)
    data_start = info.header_offset + 30 + name_len + extra_len
    start = data_start + offset
    end = min(start + length, data_start + info.compress_size)
    assert end > start, "member too small to damage"
    for i in range(start, end):
        raw[i] ^= 0xFF
    return bytes(raw)


def _break_name_encoding(data: bytes, name: str) -> bytes:
    """Flag 'name' as UTF-8 in the central directory and make its bytes invalid UTF-8."""
    raw = bytearray(data)
    for pos in _central_headers(raw, name):
        (flags,) = struct.unpack_from("<H", raw, pos + 8)
        struct.pack_into("<H", raw, pos + 8, flags | 0x800)
        raw[pos + 46:pos + 48] = b"\xff\xfe"
    return bytes(raw)


@pytest.fixture
def make_zip() -> Callable[..., bytes]:
    """Return the in-memory ZIP builder."""
    return _build_zip


@pytest.fixture
def make_encrypted_zip() -> Callable[[ZipEntries, str], bytes]:
    """Build a ZIP whose member 'name' is flagged as password protected."""
    def factory(entries: ZipEntries, name: str) -> bytes:
        return _mark_encrypted(_build_zip(entries), name)
    return factory


@pytest.fixture
def make_corrupt_zip() -> Callable[[ZipEntries, bytes], bytes]:
    """
    Build a stored (uncompressed) ZIP, then flip the case of 'payload'
    inside the member data so its CRC check fails on read.
    """
    def factory(entries: ZipEntries, payload: bytes) -> bytes:
        data = _build_zip(entries, compression=zipfile.ZIP_STORED)
        assert data.count(payload) == 1, "payload must appear exactly once"
        return data.replace(payload, payload.swapcase())
    return factory


@pytest.fixture
def noise() -> bytes:
    """4 KiB of incompressible bytes, so every codec emits a long stream."""
    return b"".join(hashlib.sha256(str(i).encode()).digest() for i in range(128))


@pytest.fixture
def make_truncated_zip() -> Callable[[ZipEntries, str], bytes]:
    """Build a deflated ZIP whose member 'name' ends halfway through its stream."""
    def factory(entries: ZipEntries, name: str) -> bytes:
        return _truncate_member(_build_zip(entries), name)
    return factory


@pytest.fixture
def make_damaged_zip() -> Callable[[ZipEntries, str, int], bytes]:
    """Build a ZIP with the given codec, then garble the compressed data of 'name'."""
    def factory(entries: ZipEntries, name: str, compression: int) -> bytes:
        return _damage_member_data(_build_zip(entries, compression=compression), name)
    return factory


@pytest.fixture
def make_bad_directory_zip() -> Callable[[ZipEntries, str], bytes]:
    """Build a ZIP whose central directory entry for 'name' cannot be decoded."""
    def factory(entries: ZipEntries, name: str) -> bytes:
        return _break_name_encoding(_build_zip(entries), name)
    return factory


# -----------------------------------------------------------------------------
# Sample Trees
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Minimal nested tree.

    Structure:
    /root
      a.txt                      "hi there"
      a.zip
        a.txt                    "hi there"
        dir1.zip
          dir1/
          dir1/dir1.txt          "hi there"
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_bytes(HI_THERE)

    dir1_zip = _build_zip([("dir1/", b""), ("dir1/dir1.txt", HI_THERE)])
    a_zip = root / "a.zip"
    a_zip.write_bytes(_build_zip([("a.txt", HI_THERE), ("dir1.zip", dir1_zip)]))
    os.utime(a_zip, (ARCHIVE_MTIME, ARCHIVE_MTIME))
    return root


@pytest.fixture
def testdata_tree(tmp_path: Path) -> Path:
    """
    Richer tree with archives three levels deep.

    Structure:
    /testdata
      a.txt                      "hi there"
      a.zip
        a.txt
        dir1.zip  {dir1/, dir1/dir1.txt}
        b.zip
          a.txt
          dir1.zip {dir1/, dir1/dir1.txt}
      dir2.zip
        dir1/
        dir1/dir1.txt
    """
    root = tmp_path / "testdata"
    root.mkdir()
    (root / "a.txt").write_bytes(HI_THERE)

    dir1_zip = _build_zip([("dir1/", b""), ("dir1/dir1.txt", HI_THERE)])
    b_zip = _build_zip([("a.txt", HI_THERE), ("dir1.zip", dir1_zip)])
    a_zip = root / "a.zip"
    a_zip.write_bytes(_build_zip([("a.txt", HI_THERE), ("dir1.zip", dir1_zip), ("b.zip", b_zip)]))
    os.utime(a_zip, (ARCHIVE_MTIME, ARCHIVE_MTIME))

    dir2_zip = root / "dir2.zip"
    dir2_zip.write_bytes(dir1_zip)
    os.utime(dir2_zip, (OTHER_MTIME, OTHER_MTIME))
    return root
