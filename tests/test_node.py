import pytest

from fuelpak.common import RESOURCE_OBJECT, FormatError
from fuelpak.node import NODE, NODE_ALT, NODE_OBJECT_FORMAT, NODE_OBJECT_FORMAT_ALT

_LINKS = [
    "parent_crc32",
    "head_child_crc32",
    "prev_node_crc32",
    "next_node_crc32",
    "lod_crc32",
    "lod_data_crc32",
    "user_define_crc32",
    "unknown7",
    "unknown8",
    "unknown9",
]


def _node_json(link_values):
    doc = dict(zip(_LINKS, link_values))
    doc.update(
        {
            "rotation": [0.0, 0.0, 0.0, 1.0],
            "translation": [1.0, 2.0, 3.0],
            "flags": 17,
            "rotation2": [0.0, 1.0, 0.0, 0.0],
            "scale": 1.0,
            "scale2": 2.0,
            "reciprocal_scale": 0.5,
            "unknown10": 0.0,
            "color": {"r": 1.0, "g": 0.5, "b": 0.25, "a": 1.0},
            "sphere": {"center": [0.0, 0.0, 0.0], "radius": 4.0},
            "display_seeds_rect": {"x1": -1, "y1": -2, "x2": 3, "y2": 4},
            "collide_seeds_rect": {"x1": 0, "y1": 0, "x2": 0, "y2": 0},
            "negative_four": -4,
            "world_transform": [1.0] * 16,
        }
    )
    return doc


def _node_alt_json():
    doc = {name: index for index, name in enumerate(
        ["parent_crc32", "some_node_crc320", "some_node_crc321", "some_node_crc322",
         "some_crc320", "some_crc321", "some_crc322", "some_crc323", "some_crc324"]
    )}
    doc.update(
        {
            "mat0": [0.5] * 16,
            "unknown0s": [value % 256 for value in range(208)],
            "mat1": [2.0] * 16,
            "unknown2": 1,
            "unknown3": 2,
            "unknown4": 3,
            "unknown5": 4,
            "unknown6": 5,
        }
    )
    return doc


def test_node_round_trip():
    doc = _node_json(range(1, 11))
    parsed = NODE.parse_bytes(NODE.to_bytes(NODE.from_json(doc)))
    assert NODE.to_json(parsed) == doc


def test_node_soft_links_skip_zero_in_order():
    value = NODE.from_json(_node_json([1, 0, 3, 0, 5, 0, 7, 0, 9, 0]))
    assert NODE.soft_links(value) == [1, 3, 5, 7, 9]
    assert NODE.hard_links(value) == []


def test_node_all_zero_links_give_nothing():
    value = NODE.from_json(_node_json([0] * 10))
    assert NODE.soft_links(value) == []


def test_node_truncated_input_raises():
    data = NODE.to_bytes(NODE.from_json(_node_json(range(10))))
    with pytest.raises(FormatError):
        NODE.parse_bytes(data[:-1])


def test_node_missing_field_raises():
    doc = _node_json(range(10))
    del doc["flags"]
    with pytest.raises(FormatError):
        NODE.from_json(doc)


def test_node_alt_round_trip_without_links():
    doc = _node_alt_json()
    parsed = NODE_ALT.parse_bytes(NODE_ALT.to_bytes(NODE_ALT.from_json(doc)))
    assert NODE_ALT.to_json(parsed) == doc
    assert NODE_ALT.soft_links(parsed) == []


def test_node_alt_rejects_short_byte_block():
    doc = _node_alt_json()
    doc["unknown0s"] = [0] * 207
    with pytest.raises(FormatError):
        NODE_ALT.from_json(doc)


def test_node_object_format_round_trip(tmp_path):
    header = RESOURCE_OBJECT.to_bytes(RESOURCE_OBJECT.from_json({"friendly_name_crc32": 9}))
    body = NODE.to_bytes(NODE.from_json(_node_json([2, 0, 0, 0, 0, 0, 0, 0, 0, 6])))
    links = NODE_OBJECT_FORMAT.unpack(header, body, tmp_path)
    assert links.soft_links == [2, 6]
    packed = NODE_OBJECT_FORMAT.pack(tmp_path)
    assert (packed.header, packed.body) == (header, body)


def test_node_alt_object_format_round_trip(tmp_path):
    header = RESOURCE_OBJECT.to_bytes(RESOURCE_OBJECT.from_json({"friendly_name_crc32": 9}))
    body = NODE_ALT.to_bytes(NODE_ALT.from_json(_node_alt_json()))
    NODE_OBJECT_FORMAT_ALT.unpack(header, body, tmp_path)
    packed = NODE_OBJECT_FORMAT_ALT.pack(tmp_path)
    assert (packed.header, packed.body) == (header, body)