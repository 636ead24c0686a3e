"""Skin and skeleton layouts."""

from __future__ import annotations

from typing import Any, Mapping

from fuelpak.common import (
    F32,
    I32,
    MAT4F,
    OBJECT,
    QUAT,
    RESOURCE_OBJECT,
    U8,
    U32,
    VEC3F,
    VEC3I32,
    CountedVec,
    Field,
    PascalArray,
    Struct,
    StructObjectFormat,
)

SKIN_SUBSECTION = Struct(
    "SkinZSkinSubsection",
    [
        Field("vertex_group_crc32", U32),
        Field("unknown_crc320", U32),
        Field("unknown_crc321", U32),
        Field("unknown_crc322", U32),
        Field("data", CountedVec(U32, "data_count")),
    ],
)

_SKIN_SECTIONS = PascalArray(PascalArray(SKIN_SUBSECTION))

SKIN = Struct(
    "SkinZ",
    [
        Field("mesh_crc32s", PascalArray(U32)),
        Field("u0", U32),
        Field("u1", U32),
        Field("u2", U32),
        Field("u3", U32),
        Field("one_and_a_half", F32, verify=lambda value: value == 1.5),
        Field("data_count", U32, verify=lambda value: value == 21),
        Field("skin_sections", _SKIN_SECTIONS),
    ],
    exact=True,
    soft_links=lambda value: list(value["mesh_crc32s"]),
)

SKIN_ALT = Struct(
    "SkinZAlt",
    [
        Field("mesh_crc32s", PascalArray(U32)),
        Field("u0", U32),
        Field("u1", U32),
        Field("u2", U8),
        Field("one_and_a_half", F32),
        Field("data_count", U32),
        Field("skin_sections", _SKIN_SECTIONS),
    ],
    exact=True,
)

SKIN_OBJECT_FORMAT = StructObjectFormat(OBJECT, SKIN)
SKIN_OBJECT_FORMAT_ALT = StructObjectFormat(OBJECT, SKIN_ALT)


SKEL_BONE = Struct(
    "SkelZBone",
    [
        Field("user_define_crc32", U32),
        Field("quat", QUAT),
        Field("vec0", VEC3F),
        Field("bone_flags", U32),
        Field("vec1", VEC3F),
        Field("child_bone_begin", U32),
        Field("vec2", VEC3F),
        Field("some_mat_pro0", U32),
        Field("vec3", VEC3F),
        Field("some_mat_pro1", U32),
        Field("vec4", VEC3F),
        Field("some_mat_pro2", U32),
        Field("quat1", QUAT),
        Field("vec5", VEC3I32),
        Field("parent_bone_ptr", U32),
        Field("vec6", VEC3I32),
        Field("some_bone_ptr", U32),
        Field("vec7", VEC3I32),
        Field("child_bone_ptr", U32),
        Field("transformation", MAT4F),
        Field("parent_index", I32),
        Field("child_bones_index0", I32),
        Field("child_bones_index1", I32),
        Field("some_bone_index", I32),
        Field("bone_name", U32),
    ],
)

SKEL_UNKNOWN4 = Struct("SkelZUnknown4", [Field(f"unknown{index}", U32) for index in range(7)])

SKEL_UNKNOWN2 = Struct(
    "SkelZUnknown2",
    [
        Field("mat", MAT4F),
        Field("unknown0", U32),
        Field("unknown1", U32),
        Field("unknown2", U32),
    ],
)


def _skel_soft_links(value: Mapping[str, Any]) -> list[int]:
    bone_links = [bone["user_define_crc32"] for bone in value["bones"]]
    return (
        [link for link in bone_links if link != 0]
        + list(value["material_crc32s"])
        + list(value["mesh_data_crc32s"])
    )


SKEL = Struct(
    "SkelZ",
    [
        Field("u0", U32),
        Field("u1", F32),
        Field("u2", F32),
        Field("u3", F32),
        Field("u4", F32),
        Field("bones", PascalArray(SKEL_BONE)),
        Field("material_crc32s", PascalArray(U32)),
        Field("mesh_data_crc32s", PascalArray(U32)),
        Field("unknown5s", PascalArray(PascalArray(U32))),
        Field("unknown3", PascalArray(U32)),
        Field("unknown4s", PascalArray(SKEL_UNKNOWN4)),
        Field("unknown1s", PascalArray(SKEL_UNKNOWN4)),
        Field("unknown2s", PascalArray(SKEL_UNKNOWN2)),
    ],
    exact=True,
    soft_links=_skel_soft_links,
)

SKEL_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, SKEL)