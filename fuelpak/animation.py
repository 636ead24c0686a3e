"""Animation and material animation layouts."""

from __future__ import annotations

from fuelpak.common import (
    F32,
    RESOURCE_OBJECT,
    U8,
    U16,
    U32,
    VEC3I32,
    Codec,
    Field,
    FixedVec,
    PascalArray,
    Struct,
    StructObjectFormat,
)


def _record(name: str, codec: Codec, count: int) -> Struct:
    return Struct(name, [Field(f"unknown{index}", codec) for index in range(count)])


def _flagged(name: str, codec: Codec) -> list[Field]:
    return [Field(f"{name}flag", U16), Field(f"{name}s", PascalArray(codec))]


ANIMATION_UNKNOWN0 = Struct("AnimationZUnknown0", [Field("data", FixedVec(U8, 40))])
ANIMATION_UNKNOWN = _record("AnimationZUnknown", U32, 2)
ANIMATION_UNKNOWN2 = Struct(
    "AnimationZUnknown2", [Field("unknowns", FixedVec(ANIMATION_UNKNOWN, 3))]
)
ANIMATION_UNKNOWN1 = _record("AnimationZUnknown1", U32, 5)
ANIMATION_UNKNOWN4 = Struct(
    "AnimationZUnknown4",
    [Field("unknown0", U32), Field("unknown1s", PascalArray(ANIMATION_UNKNOWN1))],
)
ANIMATION_UNKNOWN5 = _record("AnimationZUnknown5", U32, 3)
ANIMATION_UNKNOWN12 = _record("AnimationZUnknown12", U32, 7)

ANIMATION = Struct(
    "AnimationZ",
    [
        Field("a", U32),
        Field("b", U32),
        Field("c", U16),
        Field("d", U16),
        Field("vectors", PascalArray(VEC3I32)),
        Field("unknown0s", PascalArray(ANIMATION_UNKNOWN0)),
        *_flagged("unknown2", ANIMATION_UNKNOWN2),
        *_flagged("unknown3", ANIMATION_UNKNOWN2),
        Field("unknown4s", PascalArray(ANIMATION_UNKNOWN4)),
        *_flagged("unknown5", ANIMATION_UNKNOWN5),
        *_flagged("unknown6", ANIMATION_UNKNOWN5),
        *_flagged("unknown7", ANIMATION_UNKNOWN2),
        *_flagged("unknown8", ANIMATION_UNKNOWN2),
        *_flagged("unknown9", ANIMATION_UNKNOWN5),
        *_flagged("unknown10", ANIMATION_UNKNOWN5),
        *_flagged("unknown11", ANIMATION_UNKNOWN5),
        Field("unknown12s", PascalArray(ANIMATION_UNKNOWN12)),
        Field("unknown13s", PascalArray(ANIMATION_UNKNOWN12)),
        Field("unknown14s", PascalArray(ANIMATION_UNKNOWN5)),
        Field("unknown15s", PascalArray(ANIMATION_UNKNOWN5)),
    ],
    exact=True,
)

ANIMATION_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, ANIMATION)


MATERIAL_ANIM_UNKNOWN0 = _record("MaterialAnimZUnknown0", F32, 2)
MATERIAL_ANIM_UNKNOWN23 = _record("MaterialAnimZUnknown23", F32, 3)
MATERIAL_ANIM_UNKNOWN56 = _record("MaterialAnimZUnknown56", F32, 4)
MATERIAL_ANIM_UNKNOWN89 = _record("MaterialAnimZUnknown89", F32, 5)
MATERIAL_ANIM_UNKNOWN1011 = _record("MaterialAnimZUnknown1011", F32, 2)
MATERIAL_ANIM_COLOR = Struct(
    "MaterialAnimZColor", [Field("unknown", F32), Field("rgba", U32)]
)

MATERIAL_ANIM = Struct(
    "MaterialAnimZ",
    [
        Field("unknown0s", PascalArray(MATERIAL_ANIM_UNKNOWN0)),
        *_flagged("unknown2", MATERIAL_ANIM_UNKNOWN23),
        *_flagged("unknown3", MATERIAL_ANIM_UNKNOWN23),
        *_flagged("unknown4", MATERIAL_ANIM_COLOR),
        *_flagged("unknown5", MATERIAL_ANIM_UNKNOWN56),
        *_flagged("unknown6", MATERIAL_ANIM_UNKNOWN56),
        Field("colorsflag", U16),
        Field("colors", PascalArray(MATERIAL_ANIM_COLOR)),
        *_flagged("unknown8", MATERIAL_ANIM_UNKNOWN89),
        *_flagged("unknown9", MATERIAL_ANIM_UNKNOWN89),
        Field("unknown10s", PascalArray(MATERIAL_ANIM_UNKNOWN1011)),
        Field("unknown11s", PascalArray(MATERIAL_ANIM_UNKNOWN1011)),
        Field("material_crc32", U32),
        Field("unknown_float", F32),
        Field("unknown15", U8),
    ],
    exact=True,
)

MATERIAL_ANIM_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, MATERIAL_ANIM)