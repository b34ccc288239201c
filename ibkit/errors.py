"""Error codes and the exception raised when loading a binary fails."""

from __future__ import annotations

from enum import IntEnum


class ScannerErrorCode(IntEnum):
    """Reasons a scan setup can fail."""

    OK = 0
    UNKNOWN = 1
    NEED_ARCHIVE_LIPO = 2
    NEED_ARCHIVE_NOLIPO = 3
    INVALID_ARGUMENTS = 4
    INVALID_BINARY = 5
    RESET_WORK_DIR = 6
    MAP_FAILED = 7
    UNSUPPORT_ARCH = 8
    MACHO_MISSING_SEGMENT_TEXT = 9
    MACHO_MISSING_SEGMENT_DYLD = 10
    MACHO_MISSING_SEGMENT_SYMTAB = 11
    MACHO_MISSING_SEGMENT_DYSYMTAB = 12


_DESCRIPTIONS = {
    ScannerErrorCode.OK: "no error",
    ScannerErrorCode.UNKNOWN: "unknown error",
    ScannerErrorCode.NEED_ARCHIVE_LIPO: "fat static library needs thinning and extraction",
    ScannerErrorCode.NEED_ARCHIVE_NOLIPO: "static library needs extraction",
    ScannerErrorCode.INVALID_ARGUMENTS: "invalid arguments",
    ScannerErrorCode.INVALID_BINARY: "invalid binary file",
    ScannerErrorCode.RESET_WORK_DIR: "cannot reset work directory",
    ScannerErrorCode.MAP_FAILED: "mapping the file failed",
    ScannerErrorCode.UNSUPPORT_ARCH: "unsupported arch, only aarch64 is supported",
    ScannerErrorCode.MACHO_MISSING_SEGMENT_TEXT: "__TEXT segment not found",
    ScannerErrorCode.MACHO_MISSING_SEGMENT_DYLD: "DYLD_INFO_ONLY segment not found",
    ScannerErrorCode.MACHO_MISSING_SEGMENT_SYMTAB: "SYMTAB segment not found",
    ScannerErrorCode.MACHO_MISSING_SEGMENT_DYSYMTAB: "DYSYMTAB segment not found",
}


class ScannerError(Exception):
    """Raised when a binary cannot be prepared for scanning."""

    def __init__(self, code: ScannerErrorCode | int, message: str | None = None) -> None:
        self.code = ScannerErrorCode(code)
        self.message = message if message is not None else _DESCRIPTIONS[self.code]
        super().__init__(self.message)