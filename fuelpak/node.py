"""Scene graph node layouts."""

from __future__ import annotations

from typing import Any, Mapping

from fuelpak.common import (
    COLOR,
    F32,
    I16,
    MAT4F,
    QUAT,
    RECT,
    RESOURCE_OBJECT,
    SPHERE,
    U8,
    U16,
    U32,
    VEC3F,
    Field,
    FixedVec,
    Struct,
    StructObjectFormat,
)

_NODE_LINKS = (
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
)


def _node_soft_links(value: Mapping[str, Any]) -> list[int]:
    return [value[name] for name in _NODE_LINKS if value[name] != 0]


NODE = Struct(
    "NodeZ",
    [
        *[Field(name, U32) for name in _NODE_LINKS],
        Field("rotation", QUAT),
        Field("translation", VEC3F),
        Field("flags", U32),
        Field("rotation2", QUAT),
        Field("scale", F32),
        Field("scale2", F32),
        Field("reciprocal_scale", F32),
        Field("unknown10", F32),
        Field("color", COLOR),
        Field("sphere", SPHERE),
        Field("display_seeds_rect", RECT),
        Field("collide_seeds_rect", RECT),
        Field("negative_four", I16),
        Field("world_transform", MAT4F),
    ],
    exact=True,
    soft_links=_node_soft_links,
)

NODE_ALT = Struct(
    "NodeZAlt",
    [
        Field("parent_crc32", U32),
        Field("some_node_crc320", U32),
        Field("some_node_crc321", U32),
        Field("some_node_crc322", U32),
        Field("some_crc320", U32),
        Field("some_crc321", U32),
        Field("some_crc322", U32),
        Field("some_crc323", U32),
        Field("some_crc324", U32),
        Field("mat0", MAT4F),
        Field("unknown0s", FixedVec(U8, 208)),
        Field("mat1", MAT4F),
        Field("unknown2", U32),
        Field("unknown3", U32),
        Field("unknown4", U16),
        Field("unknown5", U32),
        Field("unknown6", U32),
    ],
    exact=True,
)

NODE_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, NODE)
NODE_OBJECT_FORMAT_ALT = StructObjectFormat(RESOURCE_OBJECT, NODE_ALT)