"""Reading the symbol-wrapper report that lists wrapper functions and prototypes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .method_chain import VersionMismatchError, detect_version, _parse_hex
from .strutil import split

CURRENT_VERSION = "0.1"
_COLUMN_COUNT = 4

log = logging.getLogger(__name__)


@dataclass
class SymbolWrapperInfo:
    """A wrapper function: where it is, what it wraps and its prototype."""

    address: int
    name: str
    prototype: str


def detect_report_version(path: str | Path) -> str | None:
    """Return the format version named on the first line, or None if absent."""
    return detect_version(path)


def load_wrapper_infos(path: str | Path) -> list[SymbolWrapperInfo]:
    """Load wrapper entries from a symbol-wrapper report.

    Raises VersionMismatchError when the report has another format version.
    """
    version = detect_report_version(path)
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    if version != CURRENT_VERSION:
        raise VersionMismatchError(CURRENT_VERSION, version)

    lines = split(text, "\n")
    log.info("load symbol-wrappers db for version %s", lines[0])
    if len(lines) > 1:
        log.info("table keys %s", lines[1])

    infos = []
    for line in lines[2:]:
        cols = split(line, ";")
        if len(cols) != _COLUMN_COUNT:
            log.warning("bad line %s", line)
            continue
        infos.append(SymbolWrapperInfo(address=_parse_hex(cols[1]), name=cols[2], prototype=cols[3]))
    return infos