"""Records of reflective Objective-C calls and their JSON report."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .strutil import count_nonprintable

REPORT_VERSION = "0.1"
_UNPRINTABLE = "<<unprintable>>"


def _json_text(text: str) -> str:
    text = text.split("\0", 1)[0]
    if count_nonprintable(text, 1000) > 0:
        return _UNPRINTABLE
    return text


@dataclass
class ReflectionCallArg:
    """One argument of a reflective call."""

    type: str
    value: str
    resolved: bool


@dataclass
class ReflectionCall:
    """A reflective call site and its arguments."""

    pc: int
    args: list[ReflectionCallArg] = field(default_factory=list)
    resolved: bool = False


@dataclass
class ReflectionCallStatistics:
    """How many calls were seen and how many of them were resolved."""

    resolved_count: int = 0
    total_count: int = 0


@dataclass
class ReflectionInfo:
    """Calls grouped by the name of the reflective function."""

    call_map: dict[str, tuple[list[ReflectionCall], ReflectionCallStatistics]] = field(
        default_factory=dict
    )
    visited_pc: set[int] = field(default_factory=set)

    def add_call(self, name: str, call: ReflectionCall) -> None:
        """Record ``call`` under ``name`` unless its pc is marked visited."""
        if call.pc in self.visited_pc:
            return
        calls, stats = self.call_map.setdefault(name, ([], ReflectionCallStatistics()))
        calls.append(call)
        stats.total_count += 1
        if call.resolved:
            stats.resolved_count += 1


@dataclass
class ReflectionInfoManager:
    """Holds reflection info and writes it out as a JSON report."""

    info: ReflectionInfo = field(default_factory=ReflectionInfo)
    report_path: str = ""

    def to_json(self) -> str:
        """Render the report as compact JSON."""
        infos: dict[str, dict] = {}
        for name in sorted(self.info.call_map):
            calls, stats = self.info.call_map[name]
            infos[_json_text(name)] = {
                "total": stats.total_count,
                "resolved": stats.resolved_count,
                "calls": [
                    {
                        "r": call.resolved,
                        "args": [
                            {
                                "type": _json_text(arg.type),
                                "value": _json_text(arg.value),
                                "resolved": arg.resolved,
                            }
                            for arg in call.args
                        ],
                    }
                    for call in calls
                ],
            }
        document = {"version": REPORT_VERSION, "infos": infos}
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False)

    def sync_to_disk(self, path: str | None = None) -> None:
        """Write the report to ``path``, or to ``report_path`` when none is given."""
        target = Path(path if path is not None else self.report_path)
        target.write_text(self.to_json(), encoding="utf-8")