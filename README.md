# fuelpak

`fuelpak` reads and writes the object records found inside FUEL game
archives. Each record has a binary *header* and a binary *body*;
`fuelpak` turns such a pair into an editable directory (an
`object.json`, plus for some kinds a `data.bin`, `data.txt`, `data.wav`
or `data.dds` file) and turns that directory back into header and body
bytes.

Every object also reports the CRC32 names of the other objects it refers
to, split into *hard links* and *soft links*.

The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

## Object formats

Every object format is an `ObjectFormat` (from `fuelpak.common`) with two
methods:

* `unpack(header, body, output_path)` parses the bytes, writes
  `object.json` (and any side file) into the existing directory
  `output_path`, and returns a `Links` named tuple
  (`hard_links`, `soft_links`).
* `pack(input_path)` reads that directory back and returns a
  `PackedObject` with `header`, `body`, `hard_links` and `soft_links`.

Malformed binary or JSON input raises `fuelpak.common.FormatError`
(a `ValueError`).

The formats available are:

| Module | Formats |
| --- | --- |
| `fuelpak.rawfiles` | `BinaryObjectFormat()`, `UserDefineObjectFormat()`, `SoundObjectFormat()` |
| `fuelpak.bitmap` | `BitmapObjectFormat()`, `BitmapObjectFormatAlt()` |
| `fuelpak.world` | `GEN_WORLD_OBJECT_FORMAT`, `GW_ROAD_OBJECT_FORMAT`, `WORLD_OBJECT_FORMAT`, `WORLD_REF_OBJECT_FORMAT` |
| `fuelpak.animation` | `ANIMATION_OBJECT_FORMAT`, `MATERIAL_ANIM_OBJECT_FORMAT` |
| `fuelpak.mesh` | `MESH_OBJECT_FORMAT`, `MESH_OBJECT_FORMAT_ALT`, `MESH_OBJECT_FORMAT_ALT_ALT`, `MESH_OBJECT_FORMAT_ALT_ALT_ALT` |
| `fuelpak.skeleton` | `SKIN_OBJECT_FORMAT`, `SKIN_OBJECT_FORMAT_ALT`, `SKEL_OBJECT_FORMAT` |
| `fuelpak.lod` | `LOD_OBJECT_FORMAT`, `LOD_OBJECT_FORMAT_ALT`, `LOD_OBJECT_FORMAT_ALT_ALT`, `LOD_DATA_OBJECT_FORMAT` |
| `fuelpak.material` | `MATERIAL_OBJECT_FORMAT`, `MATERIAL_OBJECT_FORMAT_ALT`, `MATERIAL_OBJECT_FORMAT_ALT_ALT`, `MATERIAL_OBJ_OBJECT_FORMAT` |
| `fuelpak.node` | `NODE_OBJECT_FORMAT`, `NODE_OBJECT_FORMAT_ALT` |
| `fuelpak.particles` | `PARTICLES_OBJECT_FORMAT`, `PARTICLES_OBJECT_FORMAT_ALT`, `PARTICLES_DATA_OBJECT_FORMAT` |
| `fuelpak.rtc` | `RTC_OBJECT_FORMAT` |
| `fuelpak.scene` | `CAMERA_OBJECT_FORMAT`, `COLLISION_VOL_OBJECT_FORMAT`, `OMNI_OBJECT_FORMAT`, `LIGHT_DATA_OBJECT_FORMAT`, `ROT_SHAPE_OBJECT_FORMAT`, `SPLINE_OBJECT_FORMAT`, `SPLINE_GRAPH_OBJECT_FORMAT`, `SURFACE_OBJECT_FORMAT` |

The `_ALT` variants describe older layouts of the same kind of object.

## Unpacking and packing a record

```python
from pathlib import Path

from fuelpak.mesh import MESH_OBJECT_FORMAT

out_dir = Path("unpacked/my_mesh")
out_dir.mkdir(parents=True, exist_ok=True)

links = MESH_OBJECT_FORMAT.unpack(header_bytes, body_bytes, out_dir)
print(links.hard_links, links.soft_links)

packed = MESH_OBJECT_FORMAT.pack(out_dir)
assert packed.header == header_bytes
```

## What the files hold

* Structure-based formats write `object.json` with a `"header"` and a
  `"body"` member.
* **Binary** records keep their body verbatim in `data.bin`; the JSON
  holds `"resource_object"`.
* **UserDefine** records keep their text in `data.txt`; the
  length prefix is added back when packing.
* **Sound** records keep their 16-bit mono samples in `data.wav`
  (44100 Hz when the header's sample rate is zero); the JSON holds
  `"sound_header"`.
* **Bitmap** records keep their pixel data in `data.dds` (DXT1, DXT5 or
  A8L8); the JSON holds `"bitmap_header"`, and for the older layout also
  `"bitmap"`. Width and height come from the DDS file when packing.
  `fuelpak.bitmap.read_dds` and `write_dds` handle that file on their own.

## Describing new layouts

`fuelpak.common` holds the building blocks every format uses: `Scalar`
codecs (`U8`, `U16`, `U32`, `I8`, `I16`, `I32`, `F32`), `FixedVec`,
`PascalArray`, `CountedVec`, `Blob`, `PascalString`, `PascalStringNull`,
`FixedStringNull`, `NumeratorFloat`, `VertexVectorComponent`, and
`Struct`, built from `Field` entries. A `Struct` parses into a dict
(`parse_bytes`), writes back (`to_bytes`), converts to and from JSON
(`to_json`, `from_json`) and reports links (`hard_links`, `soft_links`).
`StructObjectFormat(header, body)` turns two structures into an object
format. The shared headers are `RESOURCE_OBJECT` and `OBJECT`.

## What this package does not do

* It does not open archive files or read the records out of them; it
  works on header and body bytes you supply.
* It has no table mapping an archive's version string and class CRC32s
  to object formats; picking the right format (including the right
  `_ALT` variant) is up to the caller.
* It has no formats for fonts, game objects, warps, mesh data, rotating
  shape data or surface data records.
* It has no command-line tool.

## Running the tests

```
pip install ".[test]"
pytest
```