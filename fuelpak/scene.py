"""Scene object layouts: cameras, volumes, lights, shapes, splines and surfaces."""

from __future__ import annotations

from typing import Any, Mapping

from fuelpak.common import (
    F32,
    MAT4F,
    OBJECT,
    QUAT,
    RESOURCE_OBJECT,
    U8,
    U16,
    U32,
    VEC2F,
    VEC3F,
    VEC3I32,
    Field,
    FixedVec,
    PascalArray,
    Struct,
    StructObjectFormat,
)


def _record(name: str, count: int) -> Struct:
    return Struct(name, [Field(f"unknown{index}", U32) for index in range(count)])


CAMERA = Struct(
    "CameraZ",
    [
        Field("angle_of_view", F32),
        Field("zero", F32),
        Field("node_crc32", U32),
    ],
    exact=True,
)

CAMERA_OBJECT_FORMAT = StructObjectFormat(OBJECT, CAMERA)


COLLISION_VOL = Struct(
    "CollisionVolZ",
    [
        Field("unknown0", U32),
        Field("local_transform", MAT4F),
        Field("local_transform_inverse", MAT4F),
        Field("zeros", FixedVec(U32, 28)),
        Field("volume_type", U32),
        Field("unknown1", U32),
    ],
    exact=True,
)

COLLISION_VOL_OBJECT_FORMAT = StructObjectFormat(OBJECT, COLLISION_VOL)


OMNI = Struct(
    "OmniZ",
    [
        Field("data", FixedVec(U32, 48)),
        Field("crc32s", FixedVec(U32, 2)),
    ],
    exact=True,
)

OMNI_OBJECT_FORMAT = StructObjectFormat(OBJECT, OMNI)


LIGHT_DATA = Struct(
    "LightDataZ",
    [
        Field("unknown0", U32),
        Field("color", VEC3F),
        Field("unknown1", VEC3F),
        Field("unknown2", VEC3I32),
        Field("unknown_flag", U32),
        Field("unknown3", VEC3F),
    ],
    exact=True,
)

LIGHT_DATA_OBJECT_FORMAT = StructObjectFormat(RESOURCE_OBJECT, LIGHT_DATA)


ROT_SHAPE = Struct(
    "RotShapeZ",
    [
        Field("vertices", PascalArray(VEC3F)),
        Field("unknown1", F32),
        Field("ints", PascalArray(U32)),
        Field("sizes", PascalArray(VEC3F)),
        Field("texcoords", PascalArray(VEC2F)),
        Field("material_crc32s", PascalArray(U32)),
        Field("scale", F32),
        Field("billboard_mode", U16),
    ],
    exact=True,
)

ROT_SHAPE_OBJECT_FORMAT = StructObjectFormat(OBJECT, ROT_SHAPE)


SPLINE_SUBSECTION = Struct(
    "SplineZSubsection",
    [
        Field("point1", VEC3F),
        Field("point2", VEC3F),
        Field("length", F32),
    ],
)

SPLINE_SECTION = Struct(
    "SplineZSection",
    [
        Field("p1", U16),
        Field("p2", U16),
        Field("p1_t", U16),
        Field("p2_t", U16),
        Field("unknown0", U32),
        Field("length", F32),
        Field("spline_subsections", FixedVec(SPLINE_SUBSECTION, 8)),
    ],
)

SPLINE = Struct(
    "SplineZ",
    [
        Field("vertices", PascalArray(VEC3F)),
        Field("spline_sections", PascalArray(SPLINE_SECTION)),
        Field("unknown2", F32),
        Field("unknown3", F32),
        Field("unknown4", F32),
        Field("unknown5", F32),
        Field("length", F32),
    ],
    exact=True,
)

SPLINE_OBJECT_FORMAT = StructObjectFormat(OBJECT, SPLINE)


SPLINE_GRAPH_UNKNOWN = Struct("SplineGraphZUnknown", [Field("data", FixedVec(U8, 60))])

SPLINE_GRAPH_UNKNOWN1 = Struct(
    "SplineGraphZUnknown1", [Field("unknowns", FixedVec(SPLINE_GRAPH_UNKNOWN, 4))]
)

SPLINE_GRAPH = Struct(
    "SplineGraphZ",
    [
        Field("unknown0s", PascalArray(VEC3F)),
        Field("unknown1s", PascalArray(SPLINE_GRAPH_UNKNOWN1)),
        Field("unknown2", F32),
        Field("unknown3", F32),
        Field("unknown4", F32),
        Field("unknown5", F32),
        Field("unknown6", F32),
        Field("unknown7s", PascalArray(U32)),
        Field("unknown8s", PascalArray(PascalArray(U8))),
        Field("unknown9s", PascalArray(PascalArray(U8))),
    ],
    exact=True,
)

SPLINE_GRAPH_OBJECT_FORMAT = StructObjectFormat(OBJECT, SPLINE_GRAPH)


SURFACE_UNKNOWN2 = Struct("SurfaceZUnknown2", [Field("data", FixedVec(U8, 32))])
SURFACE_CURVE = _record("SurfaceZCurve", 2)
SURFACE_UNKNOWN8 = _record("SurfaceZUnknown8", 3)
SURFACE_POLYLINE = Struct(
    "SurfaceZPolyline", [Field("surface_index", U16), Field("count", U16)]
)
SURFACE_SURFACE = Struct(
    "SurfaceZSurface", [Field("data", FixedVec(U32, 43)), Field("unknown", U32)]
)


def _polylines_present(value: Mapping[str, Any]) -> int:
    return 0 if value.get("polylines") is None else 1


def _opt_set(scope: Mapping[str, Any], reader: Any) -> bool:
    return scope["opt"] != 0


SURFACE = Struct(
    "SurfaceZ",
    [
        Field("vertices", PascalArray(VEC3F)),
        Field("unknown1s", PascalArray(QUAT)),
        Field("unknown2s", PascalArray(SURFACE_UNKNOWN2)),
        Field("unknown3s", PascalArray(SURFACE_UNKNOWN2)),
        Field("surfaces", PascalArray(SURFACE_SURFACE)),
        Field("curves", PascalArray(SURFACE_CURVE)),
        Field("normals", PascalArray(VEC3F)),
        Field("unknown9s", PascalArray(VEC3F)),
        Field("unknown10s", PascalArray(VEC2F)),
        Field("surface_indices", PascalArray(U16)),
        Field("unknown12s", PascalArray(SURFACE_UNKNOWN2)),
        Field("opt", U8, in_json=False, derive=_polylines_present),
        Field("polylines", PascalArray(SURFACE_POLYLINE), condition=_opt_set),
        Field("surface_indices1", PascalArray(U16), condition=_opt_set),
        Field("unknown15", FixedVec(U32, 52), condition=_opt_set),
        Field("surface_count1", U32, condition=_opt_set),
    ],
    exact=True,
)

SURFACE_OBJECT_FORMAT = StructObjectFormat(OBJECT, SURFACE)