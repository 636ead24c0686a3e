"""Bitmap objects, stored unpacked as object.json plus a DDS texture."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fuelpak.common import (
    F32,
    U8,
    U16,
    U32,
    Blob,
    ByteReader,
    Field,
    FormatError,
    Links,
    ObjectFormat,
    PackedObject,
    Struct,
)

DDS_MAGIC = b"DDS "
_HEADER_SIZE = 124
_PIXEL_FORMAT_SIZE = 32

_HEADER = struct.Struct("<7I44x")
_PIXEL_FORMAT = struct.Struct("<II4s5I")
_CAPS = struct.Struct("<4I4x")
_DX10_HEADER_SIZE = 20

_DDSD_CAPS = 0x1
_DDSD_HEIGHT = 0x2
_DDSD_WIDTH = 0x4
_DDSD_PITCH = 0x8
_DDSD_PIXELFORMAT = 0x1000
_DDSD_MIPMAPCOUNT = 0x20000
_DDSD_LINEARSIZE = 0x80000

_DDPF_ALPHAPIXELS = 0x1
_DDPF_FOURCC = 0x4
_DDPF_LUMINANCE = 0x20000

_DDSCAPS_COMPLEX = 0x8
_DDSCAPS_TEXTURE = 0x1000
_DDSCAPS_MIPMAP = 0x400000


class DdsFormat(Enum):
    """Pixel formats a bitmap object can carry."""

    DXT1 = "DXT1"
    DXT5 = "DXT5"
    A8L8 = "A8L8"

    @property
    def block_size(self) -> int | None:
        """Bytes per 4x4 block for compressed formats, ``None`` otherwise."""
        if self is DdsFormat.DXT1:
            return 8
        if self is DdsFormat.DXT5:
            return 16
        return None

    @property
    def bits_per_pixel(self) -> int:
        if self is DdsFormat.DXT1:
            return 4
        if self is DdsFormat.DXT5:
            return 8
        return 16


@dataclass(frozen=True)
class DdsImage:
    """The parts of a DDS file that bitmap objects use."""

    width: int
    height: int
    pixel_format: DdsFormat | None
    mip_map_count: int
    data: bytes


def _pixel_format_fields(pixel_format: DdsFormat) -> tuple:
    if pixel_format.block_size is not None:
        return (_DDPF_FOURCC, pixel_format.value.encode("ascii"), 0, 0, 0, 0, 0)
    return (_DDPF_LUMINANCE | _DDPF_ALPHAPIXELS, bytes(4), 16, 0xFF, 0, 0, 0xFF00)


def _detect_format(flags: int, fourcc: bytes, bits: int, alpha_mask: int) -> DdsFormat | None:
    if flags & _DDPF_FOURCC:
        for candidate in (DdsFormat.DXT1, DdsFormat.DXT5):
            if fourcc == candidate.value.encode("ascii"):
                return candidate
        return None
    if flags & _DDPF_LUMINANCE and bits == 16 and alpha_mask == 0xFF00:
        return DdsFormat.A8L8
    return None


def read_dds(path) -> DdsImage:
    """Read a DDS file."""
    raw = Path(path).read_bytes()
    reader = ByteReader(raw)
    if reader.read(4) != DDS_MAGIC:
        raise FormatError(f"{path}: not a DDS file")
    size, _flags, height, width, _pitch, _depth, mip_map_count = _HEADER.unpack(
        reader.read(_HEADER.size)
    )
    if size != _HEADER_SIZE:
        raise FormatError(f"{path}: DDS header size is {size}, expected {_HEADER_SIZE}")
    _pf_size, pf_flags, fourcc, bits, _r, _g, _b, alpha_mask = _PIXEL_FORMAT.unpack(
        reader.read(_PIXEL_FORMAT.size)
    )
    reader.read(_CAPS.size)
    if pf_flags & _DDPF_FOURCC and fourcc == b"DX10":
        reader.read(_DX10_HEADER_SIZE)
    return DdsImage(
        width=width,
        height=height,
        pixel_format=_detect_format(pf_flags, fourcc, bits, alpha_mask),
        mip_map_count=mip_map_count,
        data=reader.read(reader.remaining()),
    )


def write_dds(path, width, height, pixel_format, mip_map_count, data) -> None:
    """Write a DDS file holding ``data`` with the given dimensions and format."""
    pixel_format = DdsFormat(pixel_format)
    mips = mip_map_count or 0
    flags = _DDSD_CAPS | _DDSD_HEIGHT | _DDSD_WIDTH | _DDSD_PIXELFORMAT
    caps = _DDSCAPS_TEXTURE
    if mips > 1:
        flags |= _DDSD_MIPMAPCOUNT
        caps |= _DDSCAPS_COMPLEX | _DDSCAPS_MIPMAP
    block = pixel_format.block_size
    if block is not None:
        flags |= _DDSD_LINEARSIZE
        pitch = max(1, (width + 3) // 4) * max(1, (height + 3) // 4) * block
    else:
        flags |= _DDSD_PITCH
        pitch = (width * pixel_format.bits_per_pixel + 7) // 8
    Path(path).write_bytes(
        b"".join(
            [
                DDS_MAGIC,
                _HEADER.pack(_HEADER_SIZE, flags, height, width, pitch, 0, mips),
                _PIXEL_FORMAT.pack(_PIXEL_FORMAT_SIZE, *_pixel_format_fields(pixel_format)),
                _CAPS.pack(caps, 0, 0, 0),
                bytes(data),
            ]
        )
    )


BITMAP_HEADER = Struct(
    "BitmapZHeader",
    [
        Field("friendly_name_crc32", U32),
        Field("dw_caps2", U16),
        Field("width", U32, in_json=False),
        Field("height", U32, in_json=False),
        Field("data_size", U32),
        Field("u1", U8),
        Field("bitmap_type", U8),
        Field("zero", U16),
        Field("u7", F32),
        Field("dxt_version0", U8),
        Field("mip_map_count", U8),
        Field("u2", U8),
        Field("u3", U8),
        Field("dxt_version1", U8),
        Field("u4", U8),
    ],
    exact=True,
)

BITMAP_HEADER_ALT = Struct(
    "BitmapZHeaderAlternate",
    [
        Field("friendly_name_crc32", U32),
        Field("zero0", U32),
        Field("unknown0", U8),
        Field("dxt_version0", U8),
        Field("unknown1", U8),
        Field("zero1", U16),
    ],
    exact=True,
)

BITMAP_ALT = Struct(
    "BitmapZAlternate",
    [
        Field("width", U32, in_json=False),
        Field("height", U32, in_json=False),
        Field("zero0", U32),
        Field("unknown0", U32),
        Field(
            "zero1",
            U32,
            condition=lambda scope, reader: reader.peek(4) == bytes(4),
        ),
        Field("unknown1", U16),
        Field("unknown2", U8),
        Field("data", Blob()),
    ],
    exact=True,
)


class BitmapObjectFormat(ObjectFormat):
    """Bitmap header plus compressed texture data stored as data.dds."""

    def pack(self, input_path):
        directory = Path(input_path)
        document = self._load_json(directory / "object.json")
        header = BITMAP_HEADER.from_json(self._member(document, "bitmap_header"))
        image = read_dds(directory / "data.dds")
        header["width"] = image.width
        header["height"] = image.height
        return PackedObject(
            header=BITMAP_HEADER.to_bytes(header),
            body=image.data,
            hard_links=BITMAP_HEADER.hard_links(header),
            soft_links=BITMAP_HEADER.soft_links(header),
        )

    def unpack(self, header, body, output_path):
        directory = Path(output_path)
        bitmap_header = BITMAP_HEADER.parse_bytes(header)
        pixel_format = DdsFormat.DXT1 if bitmap_header["dxt_version1"] == 14 else DdsFormat.DXT5
        write_dds(
            directory / "data.dds",
            bitmap_header["width"],
            bitmap_header["height"],
            pixel_format,
            bitmap_header["mip_map_count"],
            body,
        )
        self._dump_json(
            directory / "object.json", {"bitmap_header": BITMAP_HEADER.to_json(bitmap_header)}
        )
        return Links(
            BITMAP_HEADER.hard_links(bitmap_header), BITMAP_HEADER.soft_links(bitmap_header)
        )


class BitmapObjectFormatAlt(ObjectFormat):
    """Older bitmap layout whose body starts with its own small header."""

    def pack(self, input_path):
        directory = Path(input_path)
        document = self._load_json(directory / "object.json")
        bitmap_header = BITMAP_HEADER_ALT.from_json(self._member(document, "bitmap_header"))
        bitmap = BITMAP_ALT.from_json(self._member(document, "bitmap"))
        image = read_dds(directory / "data.dds")
        bitmap["width"] = image.width
        bitmap["height"] = image.height
        bitmap["data"] = b""
        return PackedObject(
            header=BITMAP_HEADER_ALT.to_bytes(bitmap_header),
            body=BITMAP_ALT.to_bytes(bitmap) + image.data,
            hard_links=BITMAP_HEADER_ALT.hard_links(bitmap_header),
            soft_links=BITMAP_HEADER_ALT.soft_links(bitmap_header),
        )

    def unpack(self, header, body, output_path):
        directory = Path(output_path)
        bitmap_header = BITMAP_HEADER_ALT.parse_bytes(header)
        bitmap = BITMAP_ALT.parse_bytes(body)
        version = bitmap_header["dxt_version0"]
        if version == 7:
            pixel_format = DdsFormat.A8L8
        elif version == 14:
            pixel_format = DdsFormat.DXT1
        else:
            pixel_format = DdsFormat.DXT5
        write_dds(
            directory / "data.dds",
            bitmap["width"],
            bitmap["height"],
            pixel_format,
            0,
            bitmap["data"],
        )
        self._dump_json(
            directory / "object.json",
            {
                "bitmap_header": BITMAP_HEADER_ALT.to_json(bitmap_header),
                "bitmap": BITMAP_ALT.to_json(bitmap),
            },
        )
        return Links(
            BITMAP_HEADER_ALT.hard_links(bitmap_header),
            BITMAP_HEADER_ALT.soft_links(bitmap_header),
        )