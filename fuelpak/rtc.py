"""Real-time cinematic (RTC) layouts."""

from __future__ import annotations

from fuelpak.common import (
    F32,
    RESOURCE_OBJECT,
    U8,
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


RTC_UNKNOWN1_UNKNOWN2 = _record("RtcZUnknown1Unknown2", 3)
RTC_UNKNOWN1_UNKNOWN3_UNKNOWN = _record("RtcZUnknown1Unknown3Unknown", 2)
RTC_UNKNOWN1_UNKNOWN3 = Struct(
    "RtcZUnknown1Unknown3",
    [Field("unknowns", FixedVec(RTC_UNKNOWN1_UNKNOWN3_UNKNOWN, 5))],
)
RTC_UNKNOWN1_UNKNOWN5_UNKNOWN1 = _record("RtcZUnknown1Unknown5Unknown1", 5)
RTC_UNKNOWN1_UNKNOWN5 = Struct(
    "RtcZUnknown1Unknown5",
    [
        Field("unknown0", U32),
        Field("unknown1s", PascalArray(RTC_UNKNOWN1_UNKNOWN5_UNKNOWN1)),
    ],
)

RTC_UNKNOWN1 = Struct(
    "RtcZUnknown1",
    [
        Field("unknown_node_crc32", U32),
        Field("unknown1", U16),
        Field("unknown2s", PascalArray(RTC_UNKNOWN1_UNKNOWN2)),
        *_flagged("unknown3", RTC_UNKNOWN1_UNKNOWN3),
        *_flagged("unknown4", RTC_UNKNOWN1_UNKNOWN3),
        Field("unknown5s", PascalArray(RTC_UNKNOWN1_UNKNOWN5)),
    ],
)

RTC_UNKNOWN2_UNKNOWN2 = _record("RtcZUnknown2Unknown2", 3)
RTC_UNKNOWN2_UNKNOWN4 = _record("RtcZUnknown2Unknown4", 4)

RTC_UNKNOWN2 = Struct(
    "RtcZUnknown2",
    [
        Field("unknown0", U32),
        Field("unknown1", U16),
        *_flagged("unknown2", RTC_UNKNOWN2_UNKNOWN2),
        *_flagged("unknown3", RTC_UNKNOWN2_UNKNOWN2),
        *_flagged("unknown4", RTC_UNKNOWN2_UNKNOWN4),
        *_flagged("unknown5", RTC_UNKNOWN2_UNKNOWN2),
    ],
)

RTC_UNKNOWN4_UNKNOWN5_UNKNOWN = _record("RtcZUnknown4RtcZUnknown5Unknown", 2)
RTC_UNKNOWN4_UNKNOWN5 = Struct(
    "RtcZUnknown4RtcZUnknown5",
    [Field("unknowns", FixedVec(RTC_UNKNOWN4_UNKNOWN5_UNKNOWN, 3))],
)
RTC_UNKNOWN4_UNKNOWN6 = _record("RtcZUnknown4RtcZUnknown6", 3)

RTC_UNKNOWN4 = Struct(
    "RtcZUnknown4",
    [
        Field("unknown0", U32),
        Field("unknown1", U16),
        *_flagged("unknown5", RTC_UNKNOWN4_UNKNOWN5),
        *_flagged("unknown6", RTC_UNKNOWN4_UNKNOWN6),
        *_flagged("unknown7", RTC_UNKNOWN4_UNKNOWN6),
    ],
)

RTC_UNKNOWN8 = Struct(
    "RtcZUnknown8",
    [
        Field("unknown0", U32),
        Field("unknown1", U32),
        Field("unknown2", U32),
        Field("unknown3", U32),
        Field("unknown4", U8),
        Field("unknown5", U32),
        Field("unknown6", U32),
    ],
)

RTC_UNKNOWN9 = _record("RtcZUnknown9", 6)

RTC_UNKNOWN12_UNKNOWN1 = _record("RtcZUnknown12Unknown1", 5)
RTC_UNKNOWN12 = Struct(
    "RtcZUnknown12",
    [
        Field("unknown0", U32),
        Field("unknown1s", PascalArray(RTC_UNKNOWN12_UNKNOWN1)),
    ],
)

RTC = Struct(
    "RtcZ",
    [
        Field("unknown0", F32),
        Field("unknown1s", PascalArray(RTC_UNKNOWN1)),
        Field("unknown2s", PascalArray(RTC_UNKNOWN2)),
        Field("unknown3s", PascalArray(U32)),
        Field("unknown4s", PascalArray(RTC_UNKNOWN4)),
        Field("unknown8s", PascalArray(RTC_UNKNOWN8)),
        Field("unknown9s", PascalArray(RTC_UNKNOWN9)),
        Field("unknown10s", PascalArray(U32)),
        Field("unknown11s", PascalArray(U32)),
        Field("unknown12s", PascalArray(RTC_UNKNOWN12)),
    ],
    exact=True,
)

RTC_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, RTC)