"""Level-of-detail layouts and their per-resource data."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from fuelpak.common import (
    DYN_BOX,
    DYN_SPHERE,
    F32,
    OBJECT,
    RESOURCE_OBJECT,
    U8,
    U32,
    Codec,
    Field,
    FixedVec,
    PascalArray,
    Scalar,
    Struct,
    StructObjectFormat,
)


def _present(name: str) -> Callable[[Mapping[str, Any]], int]:
    """Flag value written before an optional field: 1 when it is present."""
    return lambda value: 0 if value.get(name) is None else 1


def _when(flag: str) -> Callable[[Mapping[str, Any], Any], bool]:
    return lambda scope, reader: scope[flag] != 0


def _flagged_option(flag: str, name: str, codec: Codec, flag_codec: Scalar) -> list[Field]:
    return [
        Field(flag, flag_codec, in_json=False, derive=_present(name)),
        Field(name, codec, condition=_when(flag)),
    ]


SOUND_ENTRY = Struct("LodZSoundEntry", [Field("id", U32), Field("sound_crc32", U32)])
LOD_UNKNOWN4 = Struct("LodZUnknown4", [Field("a", U32), Field("b", U32)])

_SOUND_ENTRIES = PascalArray(SOUND_ENTRY)
_UNKNOWN4S = PascalArray(LOD_UNKNOWN4)


def _lod_soft_links(value: Mapping[str, Any]) -> list[int]:
    links = list(value["skin_crc32s"])
    for key in ("sound_entries", "sound_entries1"):
        links.extend(entry["sound_crc32"] for entry in value.get(key) or [])
    if value["user_define_crc32"] != 0:
        links.append(value["user_define_crc32"])
    return links


LOD = Struct(
    "LodZ",
    [
        Field("dyn_spheres", PascalArray(DYN_SPHERE)),
        Field("dyn_boxes", PascalArray(DYN_BOX)),
        Field("close_x", F32),
        Field("close_y", F32),
        Field("close_z", F32),
        Field("skin_crc32s", PascalArray(U32)),
        Field("zero", U32),
        *_flagged_option("sound_entries_option", "sound_entries", _SOUND_ENTRIES, U32),
        *_flagged_option("sound_entries_option1", "sound_entries1", _SOUND_ENTRIES, U32),
        Field("user_define_crc32", U32),
    ],
    exact=True,
    soft_links=_lod_soft_links,
)


def _lod_alt(name: str, flag_codec: Scalar) -> Struct:
    return Struct(
        name,
        [
            Field("x", U32),
            Field("unused0", U32, condition=_when("x")),
            Field("sphere_col_node_optional", DYN_SPHERE, condition=_when("x")),
            Field("sphere_col_nodes", PascalArray(DYN_SPHERE)),
            Field("box_cols", PascalArray(DYN_BOX)),
            Field("unknown2", U32),
            Field("unknown3", U32),
            Field("unknown4", U32),
            Field("u0", F32),
            Field("skin_crc32s", PascalArray(U32)),
            Field("u1", U32),
            *_flagged_option("sound_entries_option", "sound_entries", _SOUND_ENTRIES, flag_codec),
            *_flagged_option("unknown4_option", "unknown4s", _UNKNOWN4S, flag_codec),
            Field("unknown5", U32),
        ],
        exact=True,
    )


LOD_ALT = _lod_alt("LodZAlt", U8)
LOD_ALT_ALT = _lod_alt("LodZAltAlt", U32)

LOD_OBJECT_FORMAT = StructObjectFormat(OBJECT, LOD)
LOD_OBJECT_FORMAT_ALT = StructObjectFormat(OBJECT, LOD_ALT)
LOD_OBJECT_FORMAT_ALT_ALT = StructObjectFormat(OBJECT, LOD_ALT_ALT)


_LOD_DATA_TAIL = [
    ("u1", U32),
    ("zero1", U32),
    ("u2", U32),
    ("zero2", U32),
    ("zero3", U32),
    ("zero4", U32),
    ("scale_x", F32),
    ("scale_y", F32),
    ("scale_z", F32),
    ("zero5", U32),
    ("zero6", U32),
    ("zero7", U32),
    ("u6", U32),
    ("zero8", U32),
    ("zero9", U32),
    ("zero10", U32),
    ("zero11", U32),
]

LOD_DATA = Struct(
    "LodDataZ",
    [
        Field("unknown_byte0", U8),
        Field("unknown_byte1", U8),
        Field("zero_byte0", U8),
        Field("zero_byte1", U8),
        Field("crc32s", PascalArray(U32)),
        Field("zero0", U32),
        *_flagged_option("opt", "padding", FixedVec(U8, 24), U8),
        *[Field(name, codec, condition=_when("opt")) for name, codec in _LOD_DATA_TAIL],
    ],
    exact=True,
)

LOD_DATA_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, LOD_DATA)