"""World layouts: generated worlds, road networks, worlds and world references."""

from __future__ import annotations

from typing import Any, Mapping

from fuelpak.common import (
    F32,
    I8,
    I16,
    I32,
    MAT4F,
    OBJECT,
    QUAT,
    RESOURCE_OBJECT,
    U8,
    U16,
    U32,
    VEC2F,
    VEC3F,
    CountedVec,
    Field,
    FixedStringNull,
    FixedVec,
    PascalArray,
    PascalStringNull,
    Struct,
    StructObjectFormat,
)


def _u32_record(name: str, *names: str) -> Struct:
    return Struct(name, [Field(member, U32) for member in names])


def _nonzero(value: Mapping[str, Any], *names: str) -> list[int]:
    return [value[name] for name in names if value[name] != 0]


CATEGORY = Struct(
    "Category",
    [
        Field("name", PascalStringNull()),
        Field("node_crc32s_arrays", PascalArray(PascalArray(U32))),
    ],
)

GEN_WORLD_UNKNOWN8 = Struct(
    "GenWorldZUnknown8",
    [
        Field("zero", U32),
        Field("mat", MAT4F),
        Field("quat", QUAT),
        Field("vec", VEC3F),
        Field("unknown1", F32),
        Field("unknown3", I32),
        Field("unknown5", I32),
        Field("unknown6", I32),
        Field("unknown7", I32),
        Field("unknown8", I32),
        Field("unknown9", I32),
        Field("unknown4", I16),
        Field("unknown10", I32),
        Field("unknown2", I8),
    ],
)

GEN_WORLD_UNKNOWN10 = Struct(
    "GenWorldZUnknown10",
    [
        Field("unknown0", U32),
        Field("unknown1s", FixedVec(U32, 8)),
        Field("unknown2", U32),
        Field("unknown3", U32),
        Field("unknown4", U32),
    ],
)

COORDS_LINE_SEGMENT = _u32_record("CoordsLineSegment", "coords_index_a", "coords_index_b")

REGION = Struct(
    "Region",
    [
        Field("name", FixedStringNull(31)),
        Field("always_255", U8),
        Field("coords_line_segments_indices", PascalArray(U32)),
    ],
)


def _gen_world_soft_links(value: Mapping[str, Any]) -> list[int]:
    return (
        _nonzero(value, "node_crc32", "user_define_crc32", "gw_road_crc32")
        + list(value["binary_crc32s"])
        + list(value["bitmap_crc32s"])
        + list(value["material_crc32s"])
    )


GEN_WORLD = Struct(
    "GenWorldZ",
    [
        Field("node_crc32", U32),
        Field("user_define_crc32", U32),
        Field("gw_road_crc32", U32),
        Field("binary_crc32s", PascalArray(U32)),
        Field("bitmap_crc32s", PascalArray(U32)),
        Field("material_crc32s", PascalArray(U32)),
        Field("equals41", U32),
        Field("categories", PascalArray(CATEGORY)),
        Field("unknown8s", PascalArray(GEN_WORLD_UNKNOWN8)),
        Field("mats", PascalArray(MAT4F)),
        Field("unknown10s", PascalArray(GEN_WORLD_UNKNOWN10)),
        Field("coords", PascalArray(VEC2F)),
        Field("coords_line_segments", PascalArray(COORDS_LINE_SEGMENT)),
        Field("regions", PascalArray(REGION)),
    ],
    exact=True,
    soft_links=_gen_world_soft_links,
)

GEN_WORLD_OBJECT_FORMAT = StructObjectFormat(OBJECT, GEN_WORLD)


GW_ROAD_POINT = Struct("GwRoadZPoint", [Field("encoded_vec2hf", U32), Field("a", U8)])

GW_ROAD_ROAD = Struct(
    "GwRoadZRoad",
    [
        Field("road_type", U8),
        Field("point_count", U16),
        Field("points", CountedVec(GW_ROAD_POINT, "point_count")),
    ],
)

GW_ROAD_UNKNOWN5 = Struct(
    "GwRoadZUnknown5",
    [Field(f"unknown{index}", U32) for index in range(8)]
    + [Field("unknown8s", CountedVec(U32, lambda scope: scope["unknown0"] & 0xFFFF))],
)

GW_ROAD = Struct(
    "GwRoadZ",
    [
        Field("road_count", U32, in_json=False, derive=lambda value: len(value["roads"])),
        Field("gen_road_min", VEC2F),
        Field("gen_road_max", VEC2F),
        Field("roads", CountedVec(GW_ROAD_ROAD, "road_count")),
        Field(
            "unknown5_count", U32, in_json=False, derive=lambda value: len(value["unknown5s"])
        ),
        Field("unknown5_min", VEC2F),
        Field("unknown5_max", VEC2F),
        Field("unknown5s", CountedVec(GW_ROAD_UNKNOWN5, "unknown5_count")),
        Field("unknown_crc32", U32),
    ],
    exact=True,
    soft_links=lambda value: _nonzero(value, "unknown_crc32"),
)

GW_ROAD_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, GW_ROAD)


WORLD_UNKNOWN2 = _u32_record(
    "WorldZUnknown2",
    "placeholder0",
    "placeholder1",
    "index",
    "placeholder2",
    "unknown4",
    "zero",
)

_WORLD_LINKS = (
    "node_crc32",
    "warp_crc32",
    "game_obj_crc32",
    "unused14",
    "gen_world_crc32",
    "node_crc321",
)

WORLD = Struct(
    "WorldZ",
    [Field(name, U32) for name in _WORLD_LINKS]
    + [
        Field("unused17s", PascalArray(U32)),
        Field("unuseds", PascalArray(U8)),
        Field("unknown0", MAT4F),
        Field("indices0", PascalArray(U32)),
        Field("unknown2s", PascalArray(WORLD_UNKNOWN2)),
        Field("unknown3", MAT4F),
        Field("indices1", PascalArray(U32)),
        Field("unknown5s", PascalArray(WORLD_UNKNOWN2)),
        Field("unused6s", PascalArray(U32)),
        Field("unused7s", PascalArray(U32)),
        Field("unused8s", PascalArray(U32)),
        Field("unused9s", PascalArray(U32)),
        Field("unused10s", PascalArray(U32)),
        Field("spline_graph_crc32", PascalArray(U32)),
        Field("unused12s", PascalArray(U32)),
        Field("material_anim_crc32", PascalArray(U32)),
    ],
    exact=True,
)

WORLD_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, WORLD)


UUID_PAIR = _u32_record("UUIDPair", "uuid0", "uuid1")

WORLD_REF = Struct(
    "WorldRefZ",
    [Field(name, U32) for name in _WORLD_LINKS]
    + [
        Field("unused17s", PascalArray(U32)),
        Field("unuseds", PascalArray(U8)),
        Field("mats", PascalArray(MAT4F)),
        Field("point_a", VEC3F),
        Field("point_b", VEC3F),
        Field("uuid_pairs", PascalArray(UUID_PAIR)),
        Field("init_script", PascalStringNull()),
        Field("node_crc32s", PascalArray(U32)),
        Field("zero", U32),
    ],
    exact=True,
    soft_links=lambda value: _nonzero(value, *_WORLD_LINKS) + list(value["node_crc32s"]),
)

WORLD_REF_OBJECT_FORMAT = StructObjectFormat(OBJECT, WORLD_REF)