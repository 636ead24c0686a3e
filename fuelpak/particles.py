"""Particle emitter layouts and particle data resources."""

from __future__ import annotations

from fuelpak.common import (
    F32,
    MAT4F,
    OBJECT,
    RESOURCE_OBJECT,
    U16,
    U32,
    Codec,
    Field,
    FixedVec,
    PascalArray,
    Struct,
    StructObjectFormat,
)


def _record(name: str, count: int) -> Struct:
    return Struct(name, [Field(f"unknown{index}", U32) for index in range(count)])


def _flagged(name: str, codec: Codec) -> list[Field]:
    return [Field(f"{name}flag", U16), Field(f"{name}s", PascalArray(codec))]


def _emitter(name: str, c1: Codec, c2: Codec, c4: Codec, c5: Codec) -> Struct:
    return Struct(
        name,
        [
            Field("data", FixedVec(U32, 19)),
            *_flagged("unknown1", c1),
            *_flagged("unknown2", c2),
            *_flagged("unknown3", c2),
            *_flagged("unknown4", c4),
            *_flagged("unknown5", c5),
            *_flagged("unknown6", c5),
            *_flagged("unknown7", c4),
            Field("unknown8", U32),
        ],
    )


PARTICLES_UNKNOWN1 = _record("ParticlesZUnknown1", 3)
PARTICLES_UNKNOWN2 = _record("ParticlesZUnknown2", 5)
PARTICLES_UNKNOWN4 = _record("ParticlesZUnknown4", 2)
PARTICLES_UNKNOWN5 = _record("ParticlesZUnknown5", 4)

PARTICLES_UNKNOWN0 = _emitter(
    "ParticlesZUnknown0",
    PARTICLES_UNKNOWN1,
    PARTICLES_UNKNOWN2,
    PARTICLES_UNKNOWN4,
    PARTICLES_UNKNOWN5,
)

PARTICLES = Struct(
    "ParticlesZ",
    [
        Field("unknown0s", PascalArray(PARTICLES_UNKNOWN0)),
        Field("mats", PascalArray(MAT4F)),
        Field("unknown2", U32),
        Field("unknown3", U16),
    ],
    exact=True,
)

# The older layout stores the same records as plain integer vectors.
PARTICLES_UNKNOWN0_ALT = Struct(
    "ParticlesZUnknown0Alt",
    [
        Field("data", FixedVec(U32, 19)),
        *_flagged("unknown1", FixedVec(U32, 2)),
        *_flagged("unknown2", FixedVec(U32, 3)),
        *_flagged("unknown3", FixedVec(U32, 3)),
        *_flagged("unknown4", FixedVec(U32, 2)),
        *_flagged("unknown5", FixedVec(U32, 4)),
        *_flagged("unknown6", FixedVec(U32, 4)),
        *_flagged("unknown7", FixedVec(U32, 2)),
        Field("unknown8", U32),
    ],
)

PARTICLES_ALT = Struct(
    "ParticlesZAlt",
    [
        Field("unknown0s", PascalArray(PARTICLES_UNKNOWN0_ALT)),
        Field("mats", PascalArray(FixedVec(U32, 16))),
        Field("unknown2", U32),
        Field("unknown3", U16),
    ],
    exact=True,
)

PARTICLES_OBJECT_FORMAT = StructObjectFormat(OBJECT, PARTICLES)
PARTICLES_OBJECT_FORMAT_ALT = StructObjectFormat(OBJECT, PARTICLES_ALT)


PARTICLES_DATA = Struct(
    "ParticlesDataZ",
    [
        Field("equals257", U32),
        Field("position_x", F32),
        Field("position_y", F32),
        Field("position_z", F32),
        Field("velocity_x", F32),
        Field("velocity_y", F32),
        Field("velocity_z", F32),
        Field("shorts", PascalArray(U16)),
        Field("zero", U32),
    ],
    exact=True,
)

PARTICLES_DATA_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, PARTICLES_DATA)