"""Mesh layouts: headers, vertex and index buffers, morphers and collision data."""

from __future__ import annotations

from typing import Any, Mapping, NamedTuple

from fuelpak.common import (
    DYN_BOX,
    DYN_SPHERE,
    F32,
    FADE_DISTANCES,
    I16,
    I32,
    MAT4F,
    QUAT,
    RANGE_BEGIN_END,
    RANGE_BEGIN_SIZE,
    RANGE_BEGIN_SIZE_U32,
    U8,
    U16,
    U32,
    VEC2F,
    VEC3F,
    VEC4F,
    Codec,
    CountedVec,
    Field,
    FixedVec,
    FormatError,
    NumeratorFloat,
    PascalArray,
    PascalString,
    Struct,
    StructObjectFormat,
    VertexVectorComponent,
)


def _u32_record(name: str, *names: str) -> Struct:
    return Struct(name, [Field(member, U32) for member in names])


def _numbered(name: str, codec: Codec, count: int) -> Struct:
    return Struct(name, [Field(f"unknown{index}", codec) for index in range(count)])


UNUSED0 = _numbered("Unused0", U32, 4)
MESH_UNKNOWN1 = _numbered("MeshZUnknown1", U32, 2)

STRIP = Struct(
    "Strip",
    [
        Field("strip_vertices_indices", PascalArray(U16)),
        Field("material_name", U32),
        Field("tri_order", U32),
    ],
)

UNUSED4 = Struct("Unused4", [Field("unknown0s", PascalArray(MESH_UNKNOWN1))])

COLLISION_AABB = Struct(
    "CollisionAABB",
    [
        Field("min", VEC3F),
        Field("collision_aabb_range", RANGE_BEGIN_END),
        Field("max", VEC3F),
        Field("collision_faces_range", RANGE_BEGIN_SIZE),
    ],
)

COLLISION_FACE = Struct(
    "CollisionFace",
    [Field("short_vec_weirds_indices", FixedVec(U16, 3)), Field("surface_type", U16)],
)

VERTEX_VECTOR = FixedVec(VertexVectorComponent(), 3)

VERTEX_LAYOUT_POSITION = Struct("VertexLayoutPosition", [Field("position", VEC3F)])

_VERTEX_COMMON = [
    Field("position", VEC3F),
    Field("tangent", VERTEX_VECTOR),
    Field("pad0", U8),
    Field("normal", VERTEX_VECTOR),
    Field("pad1", U8),
    Field("uv", VEC2F),
]

VERTEX_LAYOUT_NO_BLEND = Struct("VertexLayoutNoBlend", [*_VERTEX_COMMON, Field("luv", VEC2F)])

VERTEX_BLEND_INDEX = Struct("VertexBlendIndex", [Field("index", F32)])

VERTEX_LAYOUT_1_BLEND = Struct(
    "VertexLayout1Blend",
    [
        *_VERTEX_COMMON,
        Field("blend_index", VERTEX_BLEND_INDEX),
        Field("pad2", FixedVec(I32, 3)),
        Field("blend_weight", F32),
    ],
)

VERTEX_LAYOUT_4_BLEND = Struct(
    "VertexLayout4Blend",
    [
        *_VERTEX_COMMON,
        Field("blend_indies", FixedVec(VERTEX_BLEND_INDEX, 4)),
        Field("blend_weights", FixedVec(F32, 4)),
    ],
)

# Vertex size in bytes -> layout, in the order JSON input is matched against them.
VERTEX_LAYOUTS: dict[int, Struct] = {
    60: VERTEX_LAYOUT_4_BLEND,
    48: VERTEX_LAYOUT_1_BLEND,
    36: VERTEX_LAYOUT_NO_BLEND,
    12: VERTEX_LAYOUT_POSITION,
}


class VertexData(NamedTuple):
    """Vertices of one buffer together with the size that selects their layout."""

    vertex_size: int
    vertices: list


def _layout(vertex_size: int) -> Struct:
    try:
        return VERTEX_LAYOUTS[vertex_size]
    except KeyError as exc:
        raise FormatError(f"invalid vertex size {vertex_size}") from exc


class VertexBufferData(Codec):
    """Vertices whose layout depends on the buffer's vertex size."""

    def parse(self, reader, scope=None):
        scope = scope or {}
        try:
            size = int(scope["vertex_size"])
            count = int(scope["vertex_count"])
        except KeyError as exc:
            raise FormatError("vertex size and count must precede the vertices") from exc
        layout = _layout(size)
        return VertexData(size, [layout.parse(reader, scope) for _ in range(count)])

    def write(self, value, out):
        layout = _layout(value.vertex_size)
        for vertex in value.vertices:
            layout.write(vertex, out)

    def to_json(self, value):
        layout = _layout(value.vertex_size)
        return [layout.to_json(vertex) for vertex in value.vertices]

    def from_json(self, data):
        if not isinstance(data, list):
            raise FormatError(f"expected a list of vertices, got {data!r}")
        for size, layout in VERTEX_LAYOUTS.items():
            try:
                return VertexData(size, [layout.from_json(item) for item in data])
            except FormatError:
                continue
        raise FormatError("vertices match no known vertex layout")


VERTEX_BUFFER = Struct(
    "VertexBufferExt",
    [
        Field(
            "vertex_count",
            U32,
            in_json=False,
            derive=lambda value: len(value["vertices"].vertices),
        ),
        Field(
            "vertex_size",
            U32,
            in_json=False,
            derive=lambda value: value["vertices"].vertex_size,
        ),
        Field("vertex_buffer_id", U32),
        Field("vertices", VertexBufferData()),
    ],
)

INDEX_BUFFER = Struct(
    "IndexBufferExt",
    [
        Field("index_count", U32, in_json=False, derive=lambda value: len(value["indices"])),
        Field("index_buffer_id", U32),
        Field("indices", CountedVec(U16, "index_count")),
    ],
)

QUAD = Struct("Quad", [Field("vertices", FixedVec(VEC3F, 4)), Field("normal", VEC3F)])

VERTEX_GROUP_UNUSED1 = _numbered("MeshZVertexGroupUnused1", U32, 7)

VERTEX_GROUP = Struct(
    "VertexGroup",
    [
        Field("vertex_buffer_index", U32),
        Field("index_buffer_index", U32),
        Field("quad_range", RANGE_BEGIN_SIZE_U32),
        Field("flags", U32),
        Field("vertex_buffer_range", RANGE_BEGIN_END),
        Field("vertex_count", U32),
        Field("index_buffer_index_begin", U32),
        Field("face_count", U32),
        Field("zero", U32),
        Field("vertex_buffer_range_begin_or_zero", U32),
        Field("vertex_size", U16),
        Field("material_index", I16),
        Field("unuseds1", PascalArray(VERTEX_GROUP_UNUSED1)),
    ],
)

AABB_MORPH_TRIGGER = Struct(
    "AABBMorphTrigger",
    [
        Field("min", VEC3F),
        Field("aabb_morph_triggers_range", RANGE_BEGIN_END),
        Field("max", VEC3F),
        Field("map_index_range", RANGE_BEGIN_SIZE),
    ],
)

MESH_PAIR = Struct("MeshZPair", [Field("first", U16), Field("second", U16)])

SHORT_VEC_WEIRD = FixedVec(NumeratorFloat(I16, 1024), 3)

DISPLACEMENT_VECTOR = Struct(
    "DisplacementVector",
    [
        Field("displacement", SHORT_VEC_WEIRD),
        Field("displacement_vectors_self_index", U16),
    ],
)

MORPH_TARGET_DESC = Struct(
    "MorphTargetDesc",
    [
        Field("name", PascalString()),
        Field("base_vertex_buffer_id", U32),
        Field("displacement_vertex_buffer_index", U16),
        Field("displacement_vectors_indicies", PascalArray(U16)),
        Field("displacement_vectors", PascalArray(DISPLACEMENT_VECTOR)),
    ],
)

MORPHER = Struct(
    "Morpher",
    [
        Field("aabb_morph_triggers", PascalArray(AABB_MORPH_TRIGGER)),
        Field("map", PascalArray(MESH_PAIR)),
        Field("displacement_vectors_indices", PascalArray(U16)),
        Field("morphs", PascalArray(MORPH_TARGET_DESC)),
    ],
)

MESH_BUFFERS = Struct(
    "MeshBuffers",
    [
        Field("vertex_buffers", PascalArray(VERTEX_BUFFER)),
        Field("index_buffers", PascalArray(INDEX_BUFFER)),
        Field("quads", PascalArray(QUAD)),
        Field("vertex_groups", PascalArray(VERTEX_GROUP)),
        Field("morpher", MORPHER),
    ],
)

MESH_UNKNOWN12 = Struct("MeshZUnknown12", [Field("u0", U16), Field("u1", U16), Field("u2", U16)])


def _materials(value: Mapping[str, Any]) -> list[int]:
    return list(value["material_crc32s"])


MESH = Struct(
    "MeshZ",
    [
        Field("strip_vertices", PascalArray(VEC3F)),
        Field("unused0s", PascalArray(UNUSED0)),
        Field("texcoords", PascalArray(VEC2F)),
        Field("normals", PascalArray(VEC3F)),
        Field("strips", PascalArray(STRIP)),
        Field("unused4s", PascalArray(UNUSED4)),
        Field("material_crc32s", PascalArray(U32)),
        Field("collision_aabbs", PascalArray(COLLISION_AABB)),
        Field("collision_faces", PascalArray(COLLISION_FACE)),
        Field("unused8s", PascalArray(COLLISION_AABB)),
        Field("mesh_buffers", MESH_BUFFERS),
        Field("short_vec_weirds", PascalArray(SHORT_VEC_WEIRD)),
    ],
    exact=True,
    hard_links=_materials,
)

_MESH_ALT_COMMON = [
    Field("vecs", PascalArray(VEC3F)),
    Field("unknown0s", PascalArray(UNUSED0)),
    Field("unknown1s", PascalArray(MESH_UNKNOWN1)),
    Field("vertices1", PascalArray(VEC3F)),
    Field("unknown2s", PascalArray(STRIP)),
    Field("unknown4s", PascalArray(UNUSED4)),
    Field("material_crc32s", PascalArray(U32)),
    Field("unknown6s", PascalArray(COLLISION_AABB)),
    Field("unknown7s", PascalArray(COLLISION_FACE)),
    Field("unknown8s", PascalArray(COLLISION_AABB)),
    Field("sub_meshes", PascalArray(VERTEX_BUFFER)),
    Field("indices", PascalArray(INDEX_BUFFER)),
    Field("unknown11s", PascalArray(QUAD)),
    Field("unknown13s", PascalArray(VERTEX_GROUP)),
]

MESH_ALT = Struct(
    "MeshZAlt",
    [*_MESH_ALT_COMMON, Field("unknown12s", PascalArray(MESH_UNKNOWN12))],
    exact=True,
    hard_links=_materials,
)

MESH_ALT_ALT = Struct("MeshZAltAlt", _MESH_ALT_COMMON, exact=True, hard_links=_materials)

MESH_ALT_ALT_ALT_UNKNOWN11 = _numbered("MeshZAltAltAltUnknown11", U32, 24)

MESH_ALT_ALT_ALT = Struct(
    "MeshZAltAltAlt",
    [
        Field("vecs", PascalArray(VEC3F)),
        Field("unknown0s", PascalArray(UNUSED0)),
        Field("material_crc32s0", PascalArray(U32)),
        Field("unknown1s", PascalArray(MESH_UNKNOWN1)),
        Field("vertices1", PascalArray(VEC3F)),
        Field("unknown2s", PascalArray(STRIP)),
        Field("unknown4s", PascalArray(UNUSED4)),
        Field("material_crc32s1", PascalArray(U32)),
        Field("unknown6s", PascalArray(COLLISION_AABB)),
        Field("unknown7s", PascalArray(COLLISION_FACE)),
        Field("unknown8s", PascalArray(COLLISION_AABB)),
        Field("sub_meshes", PascalArray(VERTEX_BUFFER)),
        Field("indices", PascalArray(INDEX_BUFFER)),
        Field("unknown11s", PascalArray(MESH_ALT_ALT_ALT_UNKNOWN11)),
    ],
    exact=True,
    hard_links=lambda value: list(value["material_crc32s0"]) + list(value["material_crc32s1"]),
)

MESH_HEADER = Struct(
    "MeshZHeader",
    [
        Field("link_name", U32),
        Field("data_name", U32),
        Field("rot", QUAT),
        Field("transform", MAT4F),
        Field("radius", F32),
        Field("flags", U32),
        Field("typ", U16),
        Field("crc32s", PascalArray(U32)),
        Field("fade", FADE_DISTANCES),
        Field("dyn_spheres", PascalArray(DYN_SPHERE)),
        Field("dyn_boxes", PascalArray(DYN_BOX)),
    ],
    exact=True,
    soft_links=lambda value: list(value["crc32s"]) + [value["data_name"]],
)

MESH_HEADER_ALT = Struct(
    "MeshZHeaderAlt",
    [
        Field("friendly_name_crc32", U32),
        Field("crc32_or_zero", U32),
        Field("rot", QUAT),
        Field("transform", MAT4F),
        Field("unknown3", F32),
        Field("unknown4", F32),
        Field("unknown5", U16),
        Field("crc32s", PascalArray(U32)),
        Field("unknown0", U32),
        Field("unknown1", U32),
        Field("unknown2", U32),
        Field("unknown3s", PascalArray(DYN_SPHERE)),
        Field("unknown4s", PascalArray(DYN_BOX)),
        Field("zeros", FixedVec(U32, 4)),
    ],
    exact=True,
    soft_links=lambda value: list(value["crc32s"]) + [value["crc32_or_zero"]],
)

MESH_HEADER_ALT_ALT_UNKNOWN10 = Struct(
    "MeshZHeaderAltAltUnknown10",
    [
        Field("unknown0", U32),
        Field("unknown1s", VEC3F),
        Field("unknown2", U32),
        Field("unknown3", U32),
    ],
)

MESH_HEADER_ALT_ALT_UNKNOWN4 = Struct(
    "MeshZHeaderAltAltUnknown4", [Field("unknown0", U32), Field("unknown1", U16)]
)

MESH_HEADER_ALT_ALT_UNKNOWN5 = _numbered("MeshZHeaderAltAltUnknown5", U32, 8)

MESH_HEADER_ALT_ALT_UNKNOWN8 = Struct(
    "MeshZHeaderAltAltUnknown8",
    [
        Field("name", PascalArray(U8)),
        Field("unknown0", U32),
        Field("unknown1flag", U16),
        Field("unknown1s", PascalArray(U16)),
        Field("unknown2s", PascalArray(VEC4F)),
    ],
)

MESH_HEADER_ALT_ALT = Struct(
    "MeshZHeaderAltAlt",
    [
        Field("friendly_name_crc32", U32),
        Field("crc32s", PascalArray(U32)),
        Field("rot", QUAT),
        Field("transform", MAT4F),
        Field("unknown2", F32),
        Field("unknown0", F32),
        Field("unknown1", U16),
        Field("unknown3", VEC4F),
        Field("unknown4", U32),
        Field("unknown5", U32),
        Field("unknown6", U32),
        Field("unknown7", U32),
        Field("unknown10s", PascalArray(MESH_HEADER_ALT_ALT_UNKNOWN10)),
        Field("unknown8", U32),
        Field("unknown9", U32),
        Field("unknown4s", PascalArray(MESH_HEADER_ALT_ALT_UNKNOWN4)),
        Field("unknown5s", PascalArray(MESH_HEADER_ALT_ALT_UNKNOWN5)),
        Field("unknown6s", PascalArray(U32)),
        Field("unknown7s", PascalArray(U16)),
        Field("unknown8s", PascalArray(MESH_HEADER_ALT_ALT_UNKNOWN8)),
    ],
    exact=True,
    soft_links=lambda value: list(value["crc32s"]),
)

MESH_OBJECT_FORMAT = StructObjectFormat(MESH_HEADER, MESH)
MESH_OBJECT_FORMAT_ALT = StructObjectFormat(MESH_HEADER_ALT, MESH_ALT)
MESH_OBJECT_FORMAT_ALT_ALT = StructObjectFormat(MESH_HEADER_ALT_ALT, MESH_ALT_ALT)
MESH_OBJECT_FORMAT_ALT_ALT_ALT = StructObjectFormat(MESH_HEADER_ALT_ALT, MESH_ALT_ALT_ALT)