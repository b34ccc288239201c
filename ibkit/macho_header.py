"""Locating the 64-bit Mach-O header in a thin binary, a fat binary or a library."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from .errors import ScannerError, ScannerErrorCode

MH_MAGIC_64 = 0xFEEDFACF
MH_CIGAM_64 = 0xCFFAEDFE
FAT_MAGIC = 0xCAFEBABE
FAT_CIGAM = 0xBEBAFECA
CPU_TYPE_ARM64 = 0x0100000C
ARCHIVE_MAGIC = b"!<arch>\n"

_MACH_HEADER_64 = struct.Struct("8I")
_FAT_HEADER = struct.Struct("2I")
_FAT_ARCH = struct.Struct("5I")


@dataclass(frozen=True)
class HeaderInfo:
    """A decoded mach_header_64 and where its image sits in the file.

    ``size`` is 0 when the image is the whole input (a thin binary).
    """

    magic: int
    cputype: int
    cpusubtype: int
    filetype: int
    ncmds: int
    sizeofcmds: int
    flags: int
    reserved: int
    big_endian: bool = False
    offset: int = 0
    size: int = 0


def _is_archive(data: bytes, offset: int) -> bool:
    return data[offset:offset + len(ARCHIVE_MAGIC)] == ARCHIVE_MAGIC


def _read_magic(data: bytes, offset: int) -> int:
    if len(data) < offset + 4:
        raise ScannerError(ScannerErrorCode.INVALID_BINARY, "file too short for a header")
    return struct.unpack_from("<I", data, offset)[0]


def _parse_mach_header(data: bytes, offset: int, size: int) -> HeaderInfo:
    if len(data) < offset + _MACH_HEADER_64.size:
        raise ScannerError(ScannerErrorCode.INVALID_BINARY, "truncated mach header")
    big_endian = _read_magic(data, offset) == MH_CIGAM_64
    order = ">" if big_endian else "<"
    fields = struct.unpack_from(order + _MACH_HEADER_64.format, data, offset)
    return HeaderInfo(*fields, big_endian=big_endian, offset=offset, size=size)


def _find_arm64_slice(data: bytes, big_endian: bool) -> tuple[int, int]:
    order = ">" if big_endian else "<"
    _, narchs = struct.unpack_from(order + _FAT_HEADER.format, data, 0)
    table_end = _FAT_HEADER.size + narchs * _FAT_ARCH.size
    if len(data) < table_end:
        raise ScannerError(ScannerErrorCode.INVALID_BINARY, "truncated fat arch table")
    for index in range(narchs):
        cputype, _, offset, size, _ = struct.unpack_from(
            order + _FAT_ARCH.format, data, _FAT_HEADER.size + index * _FAT_ARCH.size
        )
        if cputype == CPU_TYPE_ARM64:
            return offset, size
    return 0, 0


def detect_header(data: bytes) -> HeaderInfo:
    """Find the arm64 mach_header_64 in ``data``.

    Raises ScannerError: NEED_ARCHIVE_NOLIPO for a static library,
    NEED_ARCHIVE_LIPO for a fat static library, UNSUPPORT_ARCH when there
    is no arm64 image or the magic is unknown.
    """
    data = bytes(data)
    if _is_archive(data, 0):
        raise ScannerError(ScannerErrorCode.NEED_ARCHIVE_NOLIPO)

    magic = _read_magic(data, 0)
    if magic in (MH_MAGIC_64, MH_CIGAM_64):
        return _parse_mach_header(data, 0, 0)

    if magic in (FAT_MAGIC, FAT_CIGAM):
        if len(data) < _FAT_HEADER.size:
            raise ScannerError(ScannerErrorCode.INVALID_BINARY, "truncated fat header")
        offset, size = _find_arm64_slice(data, big_endian=magic == FAT_CIGAM)
        if offset == 0:
            raise ScannerError(ScannerErrorCode.UNSUPPORT_ARCH)
        if _is_archive(data, offset):
            raise ScannerError(ScannerErrorCode.NEED_ARCHIVE_LIPO)
        return _parse_mach_header(data, offset, size)

    raise ScannerError(ScannerErrorCode.UNSUPPORT_ARCH)


def detect_header_in_file(path: str | Path) -> tuple[bytes, HeaderInfo]:
    """Read ``path`` and return the arm64 image bytes with its header.

    A thin binary's image is the whole file, and its header's size is
    set to the file size.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ScannerError(ScannerErrorCode.INVALID_BINARY, f"cannot read {path}") from exc

    header = detect_header(data)
    size = header.size if header.size else len(data)
    if header.size == 0:
        header = HeaderInfo(
            header.magic,
            header.cputype,
            header.cpusubtype,
            header.filetype,
            header.ncmds,
            header.sizeofcmds,
            header.flags,
            header.reserved,
            big_endian=header.big_endian,
            offset=header.offset,
            size=size,
        )
    return data[header.offset:header.offset + size], header