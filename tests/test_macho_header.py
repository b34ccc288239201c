import struct

import pytest

from ibkit.errors import ScannerError, ScannerErrorCode
from ibkit.macho_header import (
    ARCHIVE_MAGIC,
    CPU_TYPE_ARM64,
    FAT_MAGIC,
    MH_MAGIC_64,
    detect_header,
    detect_header_in_file,
)

X86_64 = 0x01000007


def mach_header(order="<", cputype=CPU_TYPE_ARM64, ncmds=5, sizeofcmds=400, flags=0x85):
    return struct.pack(order + "8I", MH_MAGIC_64, cputype, 0, 2, ncmds, sizeofcmds, flags, 0)


def fat_binary(slices, order=">"):
    """slices: list of (cputype, payload); payloads laid out after the table."""
    table_len = 8 + 20 * len(slices)
    offset = (table_len + 0xF) & ~0xF
    table = struct.pack(order + "2I", FAT_MAGIC, len(slices))
    body = b""
    for cputype, payload in slices:
        table += struct.pack(order + "5I", cputype, 0, offset + len(body), len(payload), 4)
        body += payload
    return table + b"\0" * (offset - len(table)) + body


def test_thin_little_endian():
    info = detect_header(mach_header() + b"\0" * 64)
    assert info.magic == MH_MAGIC_64
    assert info.cputype == CPU_TYPE_ARM64
    assert (info.ncmds, info.sizeofcmds, info.flags) == (5, 400, 0x85)
    assert (info.offset, info.size) == (0, 0)
    assert info.big_endian is False


def test_thin_big_endian_is_swapped():
    info = detect_header(mach_header(">", ncmds=7))
    assert info.magic == MH_MAGIC_64
    assert info.ncmds == 7
    assert info.big_endian is True


def test_fat_big_endian_selects_arm64():
    arm = mach_header(ncmds=9) + b"\xaa" * 16
    data = fat_binary([(X86_64, mach_header(cputype=X86_64)), (CPU_TYPE_ARM64, arm)])
    info = detect_header(data)
    assert info.cputype == CPU_TYPE_ARM64
    assert info.ncmds == 9
    assert info.size == len(arm)
    assert data[info.offset:info.offset + info.size] == arm


def test_fat_little_endian():
    arm = mach_header(ncmds=3)
    data = fat_binary([(CPU_TYPE_ARM64, arm)], order="<")
    info = detect_header(data)
    assert info.ncmds == 3
    assert data[info.offset:info.offset + info.size] == arm


def test_fat_without_arm64():
    data = fat_binary([(X86_64, mach_header(cputype=X86_64))])
    with pytest.raises(ScannerError) as err:
        detect_header(data)
    assert err.value.code is ScannerErrorCode.UNSUPPORT_ARCH


def test_static_library_needs_extraction():
    with pytest.raises(ScannerError) as err:
        detect_header(ARCHIVE_MAGIC + b"\0" * 64)
    assert err.value.code is ScannerErrorCode.NEED_ARCHIVE_NOLIPO


def test_fat_static_library_needs_lipo():
    data = fat_binary([(CPU_TYPE_ARM64, ARCHIVE_MAGIC + b"\0" * 32)])
    with pytest.raises(ScannerError) as err:
        detect_header(data)
    assert err.value.code is ScannerErrorCode.NEED_ARCHIVE_LIPO


def test_unknown_magic():
    with pytest.raises(ScannerError) as err:
        detect_header(b"\x7fELF" + b"\0" * 60)
    assert err.value.code is ScannerErrorCode.UNSUPPORT_ARCH


def test_too_short():
    with pytest.raises(ScannerError) as err:
        detect_header(b"\xcf\xfa")
    assert err.value.code is ScannerErrorCode.INVALID_BINARY


def test_file_thin_uses_file_size(tmp_path):
    data = mach_header() + b"\x01" * 100
    path = tmp_path / "thin"
    path.write_bytes(data)
    image, info = detect_header_in_file(path)
    assert image == data
    assert info.size == len(data)
    assert info.offset == 0


def test_file_fat_returns_slice(tmp_path):
    arm = mach_header(ncmds=4) + b"\x02" * 20
    path = tmp_path / "fat"
    path.write_bytes(fat_binary([(X86_64, mach_header(cputype=X86_64)), (CPU_TYPE_ARM64, arm)]))
    image, info = detect_header_in_file(path)
    assert image == arm
    assert info.ncmds == 4


def test_file_missing(tmp_path):
    with pytest.raises(ScannerError) as err:
        detect_header_in_file(tmp_path / "absent")
    assert err.value.code is ScannerErrorCode.INVALID_BINARY