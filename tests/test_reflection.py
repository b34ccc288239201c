import json

import pytest

from ibkit.reflection import (
    ReflectionCall,
    ReflectionCallArg,
    ReflectionCallStatistics,
    ReflectionInfo,
    ReflectionInfoManager,
)


def _call(pc, resolved, value="IBSRoot"):
    return ReflectionCall(
        pc=pc,
        args=[ReflectionCallArg("NSString", value, resolved)],
        resolved=resolved,
    )


def test_add_call_updates_statistics():
    info = ReflectionInfo()
    info.add_call("NSClassFromString", _call(0x10, True))
    info.add_call("NSClassFromString", _call(0x20, False))
    calls, stats = info.call_map["NSClassFromString"]
    assert len(calls) == 2
    assert stats == ReflectionCallStatistics(resolved_count=1, total_count=2)


def test_add_call_skips_visited_pc():
    info = ReflectionInfo()
    info.visited_pc.add(0x10)
    info.add_call("NSSelectorFromString", _call(0x10, True))
    assert info.call_map == {}


def test_json_structure_round_trip():
    mgr = ReflectionInfoManager()
    mgr.info.add_call("NSClassFromString", _call(0x10, True))
    doc = json.loads(mgr.to_json())
    assert doc["version"] == "0.1"
    entry = doc["infos"]["NSClassFromString"]
    assert entry["total"] == 1
    assert entry["resolved"] == 1
    assert entry["calls"] == [
        {"r": True, "args": [{"type": "NSString", "value": "IBSRoot", "resolved": True}]}
    ]


def test_json_is_compact_with_version_first():
    mgr = ReflectionInfoManager()
    text = mgr.to_json()
    assert text.startswith('{"version":"0.1","infos":')
    assert " " not in text


def test_unprintable_strings_replaced():
    mgr = ReflectionInfoManager()
    mgr.info.add_call("NSClassFromString", _call(0x10, False, value="\x01bad"))
    doc = json.loads(mgr.to_json())
    arg = doc["infos"]["NSClassFromString"]["calls"][0]["args"][0]
    assert arg["value"] == "<<unprintable>>"


def test_names_are_sorted():
    mgr = ReflectionInfoManager()
    mgr.info.add_call("b_call", _call(1, True))
    mgr.info.add_call("a_call", _call(2, True))
    doc = json.loads(mgr.to_json())
    assert list(doc["infos"]) == ["a_call", "b_call"]


def test_sync_to_disk_writes_json(tmp_path):
    mgr = ReflectionInfoManager()
    mgr.info.add_call("NSClassFromString", _call(0x10, True))
    out = tmp_path / "report.json"
    mgr.sync_to_disk(str(out))
    assert out.read_text(encoding="utf-8") == mgr.to_json()


def test_sync_to_disk_uses_report_path(tmp_path):
    out = tmp_path / "default.json"
    mgr = ReflectionInfoManager(report_path=str(out))
    mgr.sync_to_disk()
    assert json.loads(out.read_text(encoding="utf-8"))["infos"] == {}


def test_sync_to_disk_bad_path_raises(tmp_path):
    mgr = ReflectionInfoManager()
    with pytest.raises(OSError):
        mgr.sync_to_disk(str(tmp_path / "missing" / "report.json"))