import struct

import pytest

from fuelpak.common import FormatError
from fuelpak.skeleton import (
    SKEL,
    SKEL_BONE,
    SKEL_OBJECT_FORMAT,
    SKIN,
    SKIN_ALT,
    SKIN_OBJECT_FORMAT,
)

EMPTY_SKEL = bytes(52)
ZERO_OBJECT_HEADER = bytes(98)


def _skin_body(count=21, one_and_a_half=1.5):
    data = struct.pack("<III", 2, 100, 200)
    data += struct.pack("<4I", 0, 0, 0, 0)
    data += struct.pack("<f", one_and_a_half)
    data += struct.pack("<I", count)
    data += struct.pack("<II", 1, 1)
    data += struct.pack("<4I", 1, 2, 3, 4)
    data += struct.pack(f"<{count}I", *range(count))
    return data


def _skin_alt_body(count):
    data = struct.pack("<I", 0)
    data += struct.pack("<IIB", 0, 0, 9)
    data += struct.pack("<fI", 1.5, count)
    data += struct.pack("<II", 1, 1)
    data += struct.pack("<4I", 1, 2, 3, 4)
    data += struct.pack(f"<{count}I", *range(count))
    return data


def _bone(user_define_crc32):
    zeros3 = [0.0, 0.0, 0.0]
    ints3 = [0, 0, 0]
    return {
        "user_define_crc32": user_define_crc32,
        "quat": [0.0, 0.0, 0.0, 1.0],
        "vec0": zeros3,
        "bone_flags": 0,
        "vec1": zeros3,
        "child_bone_begin": 0,
        "vec2": zeros3,
        "some_mat_pro0": 0,
        "vec3": zeros3,
        "some_mat_pro1": 0,
        "vec4": zeros3,
        "some_mat_pro2": 0,
        "quat1": [0.0, 0.0, 0.0, 1.0],
        "vec5": ints3,
        "parent_bone_ptr": 0,
        "vec6": ints3,
        "some_bone_ptr": 0,
        "vec7": ints3,
        "child_bone_ptr": 0,
        "transformation": [1.0] + [0.0] * 15,
        "parent_index": -1,
        "child_bones_index0": -1,
        "child_bones_index1": -1,
        "some_bone_index": -1,
        "bone_name": 42,
    }


def test_skin_subsection_data_uses_data_count():
    data = _skin_body()
    value = SKIN.parse_bytes(data)
    assert value["skin_sections"][0][0]["data"] == list(range(21))
    assert SKIN.to_bytes(value) == data


def test_skin_soft_links_are_meshes():
    value = SKIN.parse_bytes(_skin_body())
    assert SKIN.soft_links(value) == [100, 200]
    assert SKIN.hard_links(value) == []


def test_skin_rejects_other_data_count():
    with pytest.raises(FormatError):
        SKIN.parse_bytes(_skin_body(count=20))


def test_skin_rejects_other_scale():
    with pytest.raises(FormatError):
        SKIN.parse_bytes(_skin_body(one_and_a_half=1.0))


def test_skin_alt_accepts_any_data_count():
    data = _skin_alt_body(3)
    value = SKIN_ALT.parse_bytes(data)
    assert value["skin_sections"][0][0]["data"] == [0, 1, 2]
    assert SKIN_ALT.to_bytes(value) == data
    assert SKIN_ALT.soft_links(value) == []


def test_skin_object_format_round_trip(tmp_path):
    body = _skin_body()
    links = SKIN_OBJECT_FORMAT.unpack(ZERO_OBJECT_HEADER, body, tmp_path)
    assert links.soft_links == [100, 200]
    packed = SKIN_OBJECT_FORMAT.pack(tmp_path)
    assert packed.header == ZERO_OBJECT_HEADER
    assert packed.body == body


def test_empty_skel_round_trips():
    value = SKEL.parse_bytes(EMPTY_SKEL)
    assert value["bones"] == []
    assert SKEL.to_bytes(value) == EMPTY_SKEL


def test_skel_rejects_trailing_bytes():
    with pytest.raises(FormatError):
        SKEL.parse_bytes(EMPTY_SKEL + b"\x01")


def test_bone_round_trip():
    bone = SKEL_BONE.from_json(_bone(5))
    data = SKEL_BONE.to_bytes(bone)
    assert SKEL_BONE.to_json(SKEL_BONE.parse_bytes(data)) == _bone(5)


def test_skel_soft_links_skip_zero_bones():
    value = SKEL.parse_bytes(EMPTY_SKEL)
    value["bones"] = [SKEL_BONE.from_json(_bone(5)), SKEL_BONE.from_json(_bone(0))]
    value["material_crc32s"] = [7]
    value["mesh_data_crc32s"] = [8, 9]
    assert SKEL.soft_links(value) == [5, 7, 8, 9]
    reparsed = SKEL.parse_bytes(SKEL.to_bytes(value))
    assert SKEL.soft_links(reparsed) == [5, 7, 8, 9]


def test_skel_object_format_round_trip(tmp_path):
    header = struct.pack("<I", 77)
    SKEL_OBJECT_FORMAT.unpack(header, EMPTY_SKEL, tmp_path)
    packed = SKEL_OBJECT_FORMAT.pack(tmp_path)
    assert packed.header == header
    assert packed.body == EMPTY_SKEL