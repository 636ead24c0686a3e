"""Material layouts and material object tables."""

from __future__ import annotations

from typing import Any, Mapping

from fuelpak.common import (
    I32,
    RESOURCE_OBJECT,
    U8,
    U32,
    VEC3F,
    VEC4F,
    Field,
    FixedVec,
    PascalArray,
    Struct,
    StructObjectFormat,
)

_BITMAP_LINKS = (
    "diffuse_bitmap_crc32",
    "unknown_bitmap_crc320",
    "metal_bitmap_crc32",
    "unknown_bitmap_crc321",
    "grey_bitmap_crc32",
    "normal_bitmap_crc32",
    "dirt_bitmap_crc32",
    "unknown_bitmap_crc322",
    "unknown_bitmap_crc323",
)


def _material_hard_links(value: Mapping[str, Any]) -> list[int]:
    return [value[name] for name in _BITMAP_LINKS if value[name] != 0]


def _reversed_bitmaps(value: Mapping[str, Any]) -> list[int]:
    return list(reversed(value["bitmap_crc32s"]))


def _crc_present(value: Mapping[str, Any]) -> int:
    return 0 if value.get("unknown_crc320") is None else 1


def _opt_set(scope: Mapping[str, Any], reader: Any) -> bool:
    return scope["opt"] != 0


MATERIAL = Struct(
    "MaterialZ",
    [
        Field("color", VEC4F),
        Field("emission", VEC3F),
        Field("unknown0", I32),
        Field("vertex_shader_constant_fs", FixedVec(U32, 26)),
        *[Field(name, U32) for name in _BITMAP_LINKS],
    ],
    exact=True,
    hard_links=_material_hard_links,
)


def _material_alt(name: str, constants: int, opt_in_json: bool) -> Struct:
    return Struct(
        name,
        [
            Field("color", VEC4F),
            Field("emission", VEC3F),
            Field("unknown0", I32),
            Field("vertex_shader_constant_fs", FixedVec(U32, constants)),
            Field("opt", U8, in_json=opt_in_json, derive=_crc_present),
            Field("unknown_crc320", U32, condition=_opt_set),
            Field("unknown_crc321", U32, condition=_opt_set),
            Field("bitmap_crc32s", FixedVec(U32, 6)),
        ],
        exact=True,
        hard_links=_reversed_bitmaps,
    )


MATERIAL_ALT = _material_alt("MaterialZAlt", 28, opt_in_json=False)
# This layout keeps its flag in JSON, but the written flag still follows presence.
MATERIAL_ALT_ALT = _material_alt("MaterialZAltAlt", 31, opt_in_json=True)

MATERIAL_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, MATERIAL)
MATERIAL_OBJECT_FORMAT_ALT = StructObjectFormat(RESOURCE_OBJECT, MATERIAL_ALT)
MATERIAL_OBJECT_FORMAT_ALT_ALT = StructObjectFormat(RESOURCE_OBJECT, MATERIAL_ALT_ALT)


MATERIAL_OBJ_ENTRY = Struct(
    "MaterialObjZEntry",
    [
        Field("array_name_crc32", U32),
        Field("material_anim_crc32s", PascalArray(U32)),
    ],
)

MATERIAL_OBJ = Struct(
    "MaterialObjZ",
    [Field("entries", PascalArray(MATERIAL_OBJ_ENTRY))],
    exact=True,
)

MATERIAL_OBJ_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, MATERIAL_OBJ)