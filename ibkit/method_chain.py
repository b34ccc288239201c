"""Reading and writing the method-chain report of Objective-C call xrefs."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .strutil import has_suffix, split

CURRENT_VERSION = "0.2"
_HEADER = "iblessing methodchains,ver:{version};"
_TABLE_KEYS = "chainId,sel,prefix,className,methodName,prevMethods,nextMethods"
_COLUMN_COUNT = 8
_UINT64_MASK = (1 << 64) - 1

_DEC_RE = re.compile(r"\s*([+-]?)([0-9]*)")
_HEX_RE = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")

log = logging.getLogger(__name__)


class VersionMismatchError(ValueError):
    """Raised when a report was written by a different format version."""

    def __init__(self, expected: str, found: str | None) -> None:
        self.expected = expected
        self.found = found
        super().__init__(
            f"report version mismatch, current {expected}, input {found or ''}, "
            "please regenerate the report"
        )


@dataclass(eq=False)
class MethodChain:
    """A method with the methods that call it and the methods it calls.

    Links are ``(chain, call_site_address)`` pairs.
    """

    chain_id: int = 0
    imp_addr: int = 0
    prefix: str = ""
    class_name: str = ""
    method_name: str = ""
    prev_methods: set[tuple[MethodChain, int]] = field(default_factory=set, repr=False)
    next_methods: set[tuple[MethodChain, int]] = field(default_factory=set, repr=False)


def _parse_int(text: str, pattern: re.Pattern[str], base: int) -> int:
    """Parse a leading integer leniently, yielding 0 when there is none."""
    match = pattern.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits, base)
    if sign == "-":
        value = -value & _UINT64_MASK
    return value


def _parse_dec(text: str) -> int:
    return _parse_int(text, _DEC_RE, 10)


def _parse_hex(text: str) -> int:
    return _parse_int(text, _HEX_RE, 16)


def _version_from_line(line: str) -> str | None:
    parts = split(line, ",")
    if len(parts) < 2:
        return None
    parts = split(parts[1], ":")
    if len(parts) < 2 or parts[0] != "ver":
        return None
    expr = parts[1]
    if not has_suffix(expr, ";"):
        return None
    return expr[:-1]


def _format_links(links: Iterable[tuple[MethodChain, int]]) -> str:
    ordered = sorted(links, key=lambda link: (link[0].chain_id, link[1]))
    return "[" + "@".join(f"{chain.chain_id}#0x{addr:x}" for chain, addr in ordered) + "]"


def _parse_links(desc: str) -> list[tuple[int, int]]:
    if len(desc) <= 2:
        return []
    links = []
    for item in split(desc[1:-1], "@"):
        parts = split(item, "#")
        if len(parts) != 2:
            log.warning("bad id %s", item)
            continue
        links.append((_parse_dec(parts[0]), _parse_hex(parts[1])))
    return links


def store_method_chain(path: str | Path, sel2chain: Mapping[str, MethodChain]) -> None:
    """Write ``sel2chain`` to ``path`` as a method-chain report, ordered by chain id."""
    entries = sorted(sel2chain.items(), key=lambda item: item[1].chain_id)
    with open(path, "w", encoding="utf-8", newline="\n") as out:
        out.write(_HEADER.format(version=CURRENT_VERSION) + "\n")
        out.write(_TABLE_KEYS + "\n")
        for sel, chain in entries:
            out.write(
                f"{chain.chain_id},0x{chain.imp_addr:x},{sel},{chain.prefix},"
                f"{chain.class_name},{chain.method_name},"
                f"{_format_links(chain.prev_methods)},{_format_links(chain.next_methods)}\n"
            )


def detect_version(path: str | Path) -> str | None:
    """Return the format version named on the first line, or None if absent."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as src:
            first = src.readline()
    except OSError:
        return None
    return _version_from_line(first.split("\n", 1)[0])


def load_method_chain(path: str | Path) -> dict[str, MethodChain]:
    """Load a method-chain report, linking callers and callees by chain id.

    Raises VersionMismatchError when the report has another format version.
    """
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    lines = split(text, "\n")
    version = _version_from_line(lines[0]) if lines else None
    if version != CURRENT_VERSION:
        raise VersionMismatchError(CURRENT_VERSION, version)

    log.info("load method-chain db for version %s", lines[0])
    if len(lines) > 1:
        log.info("table keys %s", lines[1])

    id2instance: dict[int, MethodChain] = {}
    sel2chain: dict[str, MethodChain] = {}
    pending: dict[int, tuple[list[tuple[int, int]], list[tuple[int, int]]]] = {}
    for line in lines[2:]:
        cols = split(line, ",")
        if len(cols) != _COLUMN_COUNT:
            log.warning("bad line %s", line)
            continue
        sel = cols[2]
        if not sel:
            log.warning("bad line %s", line)
            continue
        chain = MethodChain(
            chain_id=_parse_dec(cols[0]),
            imp_addr=_parse_hex(cols[1]),
            prefix=cols[3],
            class_name=cols[4],
            method_name=cols[5],
        )
        pending[id(chain)] = (_parse_links(cols[6]), _parse_links(cols[7]))
        sel2chain[sel] = chain
        id2instance[chain.chain_id] = chain

    def resolve(links: list[tuple[int, int]]) -> set[tuple[MethodChain, int]]:
        resolved = set()
        for chain_id, addr in links:
            target = id2instance.get(chain_id)
            if target is None:
                log.warning("unknown chain id %d", chain_id)
                continue
            resolved.add((target, addr))
        return resolved

    for chain in sel2chain.values():
        prev_links, next_links = pending[id(chain)]
        chain.prev_methods = resolve(prev_links)
        chain.next_methods = resolve(next_links)
    return dict(sorted(sel2chain.items()))