import json
import struct

import pytest

from fuelpak.common import FormatError
from fuelpak.scene import (
    CAMERA,
    CAMERA_OBJECT_FORMAT,
    COLLISION_VOL,
    LIGHT_DATA,
    OMNI,
    ROT_SHAPE,
    SPLINE,
    SPLINE_GRAPH,
    SURFACE,
)

IDENTITY = [1.0 if row == column else 0.0 for row in range(4) for column in range(4)]


def _object_header():
    return {
        "link_crc32": 1,
        "data_crc32": 5,
        "rot": [0.0, 0.0, 0.0, 1.0],
        "transform": IDENTITY,
        "radius": 2.5,
        "flags": 0,
        "object_type": 3,
    }


def _surface(with_optional):
    doc = {
        "vertices": [[0.0, 1.0, 2.0]],
        "unknown1s": [[0.0, 0.0, 0.0, 1.0]],
        "unknown2s": [{"data": list(range(32))}],
        "unknown3s": [],
        "surfaces": [{"data": list(range(43)), "unknown": 9}],
        "curves": [{"unknown0": 1, "unknown1": 2}],
        "normals": [[0.0, 0.0, 1.0]],
        "unknown9s": [],
        "unknown10s": [[0.5, 0.25]],
        "surface_indices": [0, 1, 2],
        "unknown12s": [],
    }
    if with_optional:
        doc.update(
            {
                "polylines": [{"surface_index": 0, "count": 3}],
                "surface_indices1": [2, 1],
                "unknown15": list(range(52)),
                "surface_count1": 1,
            }
        )
    return doc


def test_camera_wire_layout():
    doc = {"angle_of_view": 1.5, "zero": 0.0, "node_crc32": 0xDEADBEEF}
    assert CAMERA.to_bytes(CAMERA.from_json(doc)) == struct.pack("<ffI", 1.5, 0.0, 0xDEADBEEF)


def test_camera_round_trip():
    doc = {"angle_of_view": 0.75, "zero": 0.0, "node_crc32": 42}
    data = CAMERA.to_bytes(CAMERA.from_json(doc))
    assert CAMERA.to_json(CAMERA.parse_bytes(data)) == doc


def test_camera_trailing_bytes_rejected():
    data = CAMERA.to_bytes(CAMERA.from_json({"angle_of_view": 1.0, "zero": 0.0, "node_crc32": 1}))
    with pytest.raises(FormatError):
        CAMERA.parse_bytes(data + b"\x01")


def test_camera_missing_member_rejected():
    with pytest.raises(FormatError):
        CAMERA.from_json({"angle_of_view": 1.0, "zero": 0.0})


def test_collision_volume_round_trip():
    doc = {
        "unknown0": 7,
        "local_transform": IDENTITY,
        "local_transform_inverse": IDENTITY,
        "zeros": [0] * 28,
        "volume_type": 2,
        "unknown1": 3,
    }
    data = COLLISION_VOL.to_bytes(COLLISION_VOL.from_json(doc))
    assert COLLISION_VOL.to_json(COLLISION_VOL.parse_bytes(data)) == doc


def test_omni_round_trip():
    doc = {"data": list(range(48)), "crc32s": [10, 20]}
    data = OMNI.to_bytes(OMNI.from_json(doc))
    assert OMNI.to_json(OMNI.parse_bytes(data)) == doc


def test_light_data_round_trip_keeps_signed_vector():
    doc = {
        "unknown0": 1,
        "color": [1.0, 0.5, 0.25],
        "unknown1": [0.0, 0.0, 0.0],
        "unknown2": [-1, 0, 1],
        "unknown_flag": 1,
        "unknown3": [2.0, 4.0, 8.0],
    }
    data = LIGHT_DATA.to_bytes(LIGHT_DATA.from_json(doc))
    assert LIGHT_DATA.to_json(LIGHT_DATA.parse_bytes(data)) == doc


def test_rot_shape_round_trip_and_no_links():
    doc = {
        "vertices": [[1.0, 2.0, 3.0]],
        "unknown1": 0.5,
        "ints": [1, 2],
        "sizes": [[1.0, 1.0, 1.0]],
        "texcoords": [[0.0, 1.0]],
        "material_crc32s": [77],
        "scale": 1.0,
        "billboard_mode": 2,
    }
    value = ROT_SHAPE.parse_bytes(ROT_SHAPE.to_bytes(ROT_SHAPE.from_json(doc)))
    assert ROT_SHAPE.to_json(value) == doc
    assert ROT_SHAPE.hard_links(value) == []


def test_spline_round_trip():
    subsection = {"point1": [0.0, 0.0, 0.0], "point2": [1.0, 1.0, 1.0], "length": 0.5}
    doc = {
        "vertices": [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
        "spline_sections": [
            {
                "p1": 0,
                "p2": 1,
                "p1_t": 2,
                "p2_t": 3,
                "unknown0": 4,
                "length": 4.0,
                "spline_subsections": [subsection] * 8,
            }
        ],
        "unknown2": 1.0,
        "unknown3": 2.0,
        "unknown4": 3.0,
        "unknown5": 4.0,
        "length": 4.0,
    }
    data = SPLINE.to_bytes(SPLINE.from_json(doc))
    assert SPLINE.to_json(SPLINE.parse_bytes(data)) == doc


def test_spline_graph_round_trip_with_nested_arrays():
    doc = {
        "unknown0s": [[1.0, 2.0, 3.0]],
        "unknown1s": [{"unknowns": [{"data": list(range(60))}] * 4}],
        "unknown2": 0.0,
        "unknown3": 0.5,
        "unknown4": 1.0,
        "unknown5": 1.5,
        "unknown6": 2.0,
        "unknown7s": [3],
        "unknown8s": [[1, 2, 3], []],
        "unknown9s": [[255]],
    }
    data = SPLINE_GRAPH.to_bytes(SPLINE_GRAPH.from_json(doc))
    assert SPLINE_GRAPH.to_json(SPLINE_GRAPH.parse_bytes(data)) == doc


def test_surface_with_optional_tail_round_trip():
    doc = _surface(with_optional=True)
    data = SURFACE.to_bytes(SURFACE.from_json(doc))
    assert SURFACE.to_json(SURFACE.parse_bytes(data)) == doc


def test_surface_without_optional_tail_writes_clear_flag():
    doc = _surface(with_optional=False)
    data = SURFACE.to_bytes(SURFACE.from_json(doc))
    assert data[-1] == 0
    value = SURFACE.parse_bytes(data)
    assert value.get("polylines") is None
    assert SURFACE.to_json(value)["surface_indices"] == [0, 1, 2]


def test_surface_optional_tail_sets_flag_and_grows():
    short = SURFACE.to_bytes(SURFACE.from_json(_surface(with_optional=False)))
    long = SURFACE.to_bytes(SURFACE.from_json(_surface(with_optional=True)))
    assert long[: len(short) - 1] == short[:-1]
    assert long[len(short) - 1] == 1


def test_camera_object_format_links_and_unpack(tmp_path):
    source = tmp_path / "in"
    source.mkdir()
    body = {"angle_of_view": 1.5, "zero": 0.0, "node_crc32": 9}
    (source / "object.json").write_text(json.dumps({"header": _object_header(), "body": body}))

    packed = CAMERA_OBJECT_FORMAT.pack(source)
    assert packed.soft_links == [5]
    assert packed.body == CAMERA.to_bytes(CAMERA.from_json(body))

    target = tmp_path / "out"
    target.mkdir()
    CAMERA_OBJECT_FORMAT.unpack(packed.header, packed.body, target)
    written = json.loads((target / "object.json").read_text())
    assert written["body"] == body
    assert written["header"]["data_crc32"] == 5