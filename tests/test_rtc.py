import json
import struct

import pytest

from fuelpak.common import RESOURCE_OBJECT, FormatError
from fuelpak.rtc import RTC, RTC_OBJECT_FORMAT, RTC_UNKNOWN1, RTC_UNKNOWN8


def _numbered(count, start=0):
    return {f"unknown{index}": start + index for index in range(count)}


def _empty_rtc():
    return {
        "unknown0": 0.5,
        "unknown1s": [],
        "unknown2s": [],
        "unknown3s": [],
        "unknown4s": [],
        "unknown8s": [],
        "unknown9s": [],
        "unknown10s": [],
        "unknown11s": [],
        "unknown12s": [],
    }


def _unknown1():
    return {
        "unknown_node_crc32": 99,
        "unknown1": 2,
        "unknown2s": [_numbered(3)],
        "unknown3flag": 1,
        "unknown3s": [{"unknowns": [_numbered(2, index) for index in range(5)]}],
        "unknown4flag": 0,
        "unknown4s": [],
        "unknown5s": [{"unknown0": 4, "unknown1s": [_numbered(5, 10)]}],
    }


def _full_rtc():
    doc = _empty_rtc()
    doc["unknown1s"] = [_unknown1()]
    doc["unknown2s"] = [
        {
            "unknown0": 1,
            "unknown1": 2,
            "unknown2flag": 3,
            "unknown2s": [_numbered(3)],
            "unknown3flag": 0,
            "unknown3s": [],
            "unknown4flag": 1,
            "unknown4s": [_numbered(4, 7)],
            "unknown5flag": 0,
            "unknown5s": [_numbered(3, 20)],
        }
    ]
    doc["unknown3s"] = [5, 6, 7]
    doc["unknown4s"] = [
        {
            "unknown0": 8,
            "unknown1": 9,
            "unknown5flag": 1,
            "unknown5s": [{"unknowns": [_numbered(2, index) for index in range(3)]}],
            "unknown6flag": 0,
            "unknown6s": [_numbered(3)],
            "unknown7flag": 2,
            "unknown7s": [],
        }
    ]
    doc["unknown8s"] = [
        {
            "unknown0": 1,
            "unknown1": 2,
            "unknown2": 3,
            "unknown3": 4,
            "unknown4": 255,
            "unknown5": 6,
            "unknown6": 7,
        }
    ]
    doc["unknown9s"] = [_numbered(6)]
    doc["unknown10s"] = [11]
    doc["unknown11s"] = [12, 13]
    doc["unknown12s"] = [{"unknown0": 3, "unknown1s": [_numbered(5), _numbered(5, 1)]}]
    return doc


def test_empty_rtc_wire_layout():
    data = RTC.to_bytes(RTC.from_json(_empty_rtc()))
    assert data == struct.pack("<f9I", 0.5, *([0] * 9))


def test_full_rtc_round_trip():
    doc = _full_rtc()
    data = RTC.to_bytes(RTC.from_json(doc))
    assert RTC.to_json(RTC.parse_bytes(data)) == doc


def test_round_trip_is_stable_in_bytes():
    data = RTC.to_bytes(RTC.from_json(_full_rtc()))
    assert RTC.to_bytes(RTC.parse_bytes(data)) == data


def test_unknown8_keeps_single_byte_field():
    doc = _full_rtc()["unknown8s"][0]
    data = RTC_UNKNOWN8.to_bytes(RTC_UNKNOWN8.from_json(doc))
    assert data == struct.pack("<4IB2I", 1, 2, 3, 4, 255, 6, 7)


def test_unknown1_fixed_vector_survives():
    doc = _unknown1()
    value = RTC_UNKNOWN1.from_json(doc)
    assert RTC_UNKNOWN1.to_json(value)["unknown3s"] == doc["unknown3s"]


def test_trailing_bytes_are_rejected():
    data = RTC.to_bytes(RTC.from_json(_empty_rtc()))
    with pytest.raises(FormatError):
        RTC.parse_bytes(data + b"\x00")


def test_truncated_data_is_rejected():
    data = RTC.to_bytes(RTC.from_json(_full_rtc()))
    with pytest.raises(FormatError):
        RTC.parse_bytes(data[:-3])


def test_rtc_has_no_links():
    value = RTC.parse_bytes(RTC.to_bytes(RTC.from_json(_full_rtc())))
    assert RTC.hard_links(value) == []
    assert RTC.soft_links(value) == []


def test_object_format_pack_and_unpack(tmp_path):
    source = tmp_path / "in"
    source.mkdir()
    header = {"friendly_name_crc32": 17, "crc32s": [1, 2]}
    document = {"header": header, "body": _full_rtc()}
    (source / "object.json").write_text(json.dumps(document))

    packed = RTC_OBJECT_FORMAT.pack(source)
    assert packed.soft_links == [1, 2]
    assert packed.hard_links == []
    assert packed.header == RESOURCE_OBJECT.to_bytes(RESOURCE_OBJECT.from_json(header))

    target = tmp_path / "out"
    target.mkdir()
    RTC_OBJECT_FORMAT.unpack(packed.header, packed.body, target)
    written = json.loads((target / "object.json").read_text())
    assert written["body"] == document["body"]
    assert written["header"]["crc32s"] == [1, 2]