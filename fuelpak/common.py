"""Binary codecs, structure layouts and object formats shared by every object type."""

from __future__ import annotations

import json
import math
import struct
from abc import ABC, abstractmethod
from collections import ChainMap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, NamedTuple, Sequence, Union

_F32 = struct.Struct("<f")
_U32 = struct.Struct("<I")

Scope = ChainMap
CountSpec = Union[int, str, Callable[[Mapping[str, Any]], int]]


class FormatError(ValueError):
    """Raised when binary or JSON data does not match its declared layout."""


class ByteReader:
    """Sequential little-endian reader over an immutable byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self.position = 0

    def remaining(self) -> int:
        """Number of bytes not yet consumed."""
        return len(self._data) - self.position

    def peek(self, size: int) -> bytes:
        """Return the next ``size`` bytes without consuming them."""
        if size < 0 or size > self.remaining():
            raise FormatError(
                f"need {size} bytes at offset {self.position}, "
                f"only {self.remaining()} left"
            )
        return self._data[self.position:self.position + size]

    def read(self, size: int) -> bytes:
        """Consume and return the next ``size`` bytes."""
        chunk = self.peek(size)
        self.position += size
        return chunk


def _to_f32(value: float) -> float:
    try:
        return _F32.unpack(_F32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _f32_json(value: float) -> float | None:
    """Shortest decimal that reads back as the same single-precision value."""
    if not math.isfinite(value):
        return None
    for digits in range(1, 10):
        candidate = float(f"{value:.{digits}g}")
        if _to_f32(candidate) == value:
            return candidate
    return value


def _json_number(data: Any) -> float:
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise FormatError(f"expected a number, got {data!r}")
    return float(data)


def _json_list(data: Any) -> list:
    if not isinstance(data, list):
        raise FormatError(f"expected a list, got {data!r}")
    return data


def _resolve_count(spec: CountSpec, scope: Mapping[str, Any]) -> int:
    if callable(spec):
        return int(spec(scope))
    if isinstance(spec, str):
        try:
            return int(scope[spec])
        except KeyError as exc:
            raise FormatError(f"count field {spec!r} not parsed yet") from exc
    return int(spec)


def _child_scope(scope: Mapping[str, Any] | None) -> ChainMap:
    if isinstance(scope, ChainMap):
        return scope.new_child()
    return ChainMap({}, dict(scope or {}))


class Codec(ABC):
    """Reads, writes and converts one kind of value."""

    @abstractmethod
    def parse(self, reader: ByteReader, scope: Mapping[str, Any] | None = None) -> Any:
        """Read one value from ``reader``."""

    @abstractmethod
    def write(self, value: Any, out: bytearray) -> None:
        """Append the binary form of ``value`` to ``out``."""

    def to_json(self, value: Any) -> Any:
        """Convert a parsed value to its JSON form."""
        return value

    def from_json(self, data: Any) -> Any:
        """Convert a JSON form back to a value that can be written."""
        return data


class Scalar(Codec):
    """A single little-endian number described by a :mod:`struct` code."""

    def __init__(self, fmt: str) -> None:
        self.fmt = fmt
        self._struct = struct.Struct("<" + fmt)
        self.is_float = fmt in ("f", "d")

    @property
    def size(self) -> int:
        return self._struct.size

    def parse(self, reader, scope=None):
        return self._struct.unpack(reader.read(self._struct.size))[0]

    def write(self, value, out):
        try:
            out.extend(self._struct.pack(value))
        except (struct.error, OverflowError, TypeError) as exc:
            raise FormatError(f"cannot write {value!r} as {self.fmt!r}") from exc

    def to_json(self, value):
        return _f32_json(value) if self.is_float else value

    def from_json(self, data):
        if self.is_float:
            if data is None:
                raise FormatError("expected a number, got null")
            return _to_f32(_json_number(data))
        if isinstance(data, bool) or not isinstance(data, int):
            raise FormatError(f"expected an integer, got {data!r}")
        try:
            self._struct.pack(data)
        except struct.error as exc:
            raise FormatError(f"{data} is out of range for {self.fmt!r}") from exc
        return data


U8 = Scalar("B")
U16 = Scalar("H")
U32 = Scalar("I")
I8 = Scalar("b")
I16 = Scalar("h")
I32 = Scalar("i")
F32 = Scalar("f")


class _Sequence(Codec):
    def __init__(self, item: Codec) -> None:
        self.item = item

    def _parse_items(self, reader, scope, count):
        return [self.item.parse(reader, scope) for _ in range(count)]

    def _write_items(self, value, out):
        for element in value:
            self.item.write(element, out)

    def to_json(self, value):
        return [self.item.to_json(element) for element in value]

    def from_json(self, data):
        return [self.item.from_json(element) for element in _json_list(data)]


class FixedVec(_Sequence):
    """Exactly ``count`` items with no length prefix."""

    def __init__(self, item: Codec, count: int) -> None:
        super().__init__(item)
        self.count = count

    def parse(self, reader, scope=None):
        return self._parse_items(reader, scope, self.count)

    def write(self, value, out):
        if len(value) != self.count:
            raise FormatError(f"expected {self.count} items, got {len(value)}")
        self._write_items(value, out)

    def from_json(self, data):
        items = super().from_json(data)
        if len(items) != self.count:
            raise FormatError(f"expected {self.count} items, got {len(items)}")
        return items


class PascalArray(_Sequence):
    """Items preceded by their count as a 32-bit integer."""

    def __init__(self, item: Codec) -> None:
        super().__init__(item)

    def parse(self, reader, scope=None):
        count = U32.parse(reader)
        return self._parse_items(reader, scope, count)

    def write(self, value, out):
        U32.write(len(value), out)
        self._write_items(value, out)


class CountedVec(_Sequence):
    """Items whose count comes from a field parsed earlier."""

    def __init__(self, item: Codec, count: CountSpec) -> None:
        super().__init__(item)
        self.count = count

    def parse(self, reader, scope=None):
        return self._parse_items(reader, scope, _resolve_count(self.count, scope or {}))

    def write(self, value, out):
        self._write_items(value, out)


class Blob(Codec):
    """Raw bytes; ``size`` is fixed, computed from the scope, or the rest of the input."""

    def __init__(self, size: CountSpec | None = None) -> None:
        self.size = size

    def parse(self, reader, scope=None):
        if self.size is None:
            return reader.read(reader.remaining())
        return reader.read(_resolve_count(self.size, scope or {}))

    def write(self, value, out):
        out.extend(value)

    def to_json(self, value):
        return list(value)

    def from_json(self, data):
        try:
            return bytes(_json_list(data))
        except (TypeError, ValueError) as exc:
            raise FormatError("expected a list of bytes") from exc


def _expect_str(data: Any) -> str:
    if not isinstance(data, str):
        raise FormatError(f"expected a string, got {data!r}")
    return data


class PascalString(Codec):
    """UTF-8 text preceded by its byte length."""

    def parse(self, reader, scope=None):
        size = U32.parse(reader)
        return reader.read(size).decode("utf-8", errors="replace")

    def write(self, value, out):
        encoded = value.encode("utf-8")
        U32.write(len(encoded), out)
        out.extend(encoded)

    def from_json(self, data):
        return _expect_str(data)


class PascalStringNull(Codec):
    """UTF-8 text with a trailing NUL, preceded by the length including it."""

    def parse(self, reader, scope=None):
        size = U32.parse(reader)
        if size == 0:
            raise FormatError("NUL-terminated string has length zero")
        return reader.read(size)[:-1].decode("utf-8", errors="replace")

    def write(self, value, out):
        encoded = value.encode("utf-8")
        U32.write(len(encoded) + 1, out)
        out.extend(encoded)
        out.append(0)

    def from_json(self, data):
        return _expect_str(data)


class FixedStringNull(Codec):
    """UTF-8 text padded with NUL bytes to a fixed size."""

    def __init__(self, size: int) -> None:
        self.size = size

    def parse(self, reader, scope=None):
        raw = reader.read(self.size)
        end = raw.find(0)
        if end < 0:
            raise FormatError("fixed string has no NUL terminator")
        return raw[:end].decode("utf-8", errors="replace")

    def write(self, value, out):
        encoded = value.encode("utf-8")
        if len(encoded) > self.size:
            raise FormatError(f"string longer than {self.size} bytes")
        out.extend(encoded)
        out.extend(bytes(self.size - len(encoded)))

    def from_json(self, data):
        return _expect_str(data)


class NumeratorFloat(Codec):
    """An integer stored as a fraction of ``denominator``; JSON holds the fraction."""

    def __init__(self, item: Scalar, denominator: int) -> None:
        self.item = item
        self.denominator = denominator

    def parse(self, reader, scope=None):
        return self.item.parse(reader, scope)

    def write(self, value, out):
        self.item.write(value, out)

    def to_json(self, value):
        return _f32_json(_to_f32(_to_f32(float(value)) / _to_f32(float(self.denominator))))

    def from_json(self, data):
        scaled = _to_f32(_to_f32(_json_number(data)) * self.denominator)
        if not math.isfinite(scaled):
            raise FormatError(f"{data!r} cannot be stored as an integer")
        return self.item.from_json(int(scaled))


class VertexVectorComponent(Codec):
    """A byte mapping 0..255 onto the range -1.0..1.0."""

    def parse(self, reader, scope=None):
        return U8.parse(reader)

    def write(self, value, out):
        U8.write(value, out)

    def to_json(self, value):
        return _f32_json(_to_f32(_to_f32(_to_f32(value / 255.0) * 2.0) - 1.0))

    def from_json(self, data):
        converted = _to_f32(_json_number(data))
        scaled = _to_f32(_to_f32(_to_f32(converted + 1.0) / 2.0) * 255.0)
        if math.isnan(scaled):
            return 0
        rounded = math.copysign(math.floor(abs(scaled) + 0.5), scaled)
        return int(min(max(rounded, 0.0), 255.0))


@dataclass(frozen=True)
class Field:
    """One named member of a :class:`Struct`.

    ``condition`` makes the field optional: it is parsed only when the callable,
    given the fields parsed so far and the reader, returns true, and written only
    when present. ``derive`` computes the written value from the whole structure.
    """

    name: str
    codec: Codec
    condition: Callable[[Mapping[str, Any], ByteReader], bool] | None = None
    in_json: bool = True
    derive: Callable[[Mapping[str, Any]], Any] | None = None
    verify: Callable[[Any], bool] | None = None
    default: Any = 0


LinkFunc = Callable[[Mapping[str, Any]], Sequence[int]]


class Struct(Codec):
    """An ordered sequence of fields, parsed into and written from a dict."""

    def __init__(
        self,
        name: str,
        fields: Sequence[Field],
        exact: bool = False,
        hard_links: LinkFunc | None = None,
        soft_links: LinkFunc | None = None,
    ) -> None:
        self.name = name
        self.fields = tuple(fields)
        self.exact = exact
        self._hard_links = hard_links
        self._soft_links = soft_links

    def parse(self, reader, scope=None):
        local = _child_scope(scope)
        for member in self.fields:
            if member.condition is not None and not member.condition(local, reader):
                local[member.name] = None
                continue
            value = member.codec.parse(reader, local)
            if member.verify is not None and not member.verify(value):
                raise FormatError(f"{self.name}.{member.name} has unexpected value {value!r}")
            local[member.name] = value
        if self.exact and reader.remaining():
            raise FormatError(f"{self.name}: {reader.remaining()} trailing bytes")
        return dict(local.maps[0])

    def write(self, value, out):
        for member in self.fields:
            if member.derive is not None:
                item = member.derive(value)
            elif member.condition is not None:
                item = value.get(member.name)
            else:
                try:
                    item = value[member.name]
                except KeyError as exc:
                    raise FormatError(f"{self.name}: missing field {member.name!r}") from exc
            if member.condition is not None and item is None:
                continue
            member.codec.write(item, out)

    def to_json(self, value):
        result = {}
        for member in self.fields:
            if not member.in_json:
                continue
            item = value.get(member.name)
            if member.condition is not None and item is None:
                continue
            result[member.name] = member.codec.to_json(item)
        return result

    def from_json(self, data):
        if not isinstance(data, Mapping):
            raise FormatError(f"{self.name}: expected an object, got {data!r}")
        value: dict[str, Any] = {}
        for member in self.fields:
            if not member.in_json:
                value[member.name] = None if member.condition is not None else member.default
            elif member.condition is not None:
                item = data.get(member.name)
                value[member.name] = None if item is None else member.codec.from_json(item)
            elif member.name in data:
                value[member.name] = member.codec.from_json(data[member.name])
            else:
                raise FormatError(f"{self.name}: missing field {member.name!r}")
        for member in self.fields:
            if member.derive is not None and not member.in_json:
                value[member.name] = member.derive(value)
        return value

    def parse_bytes(self, data: bytes) -> dict:
        """Parse a whole byte string."""
        return self.parse(ByteReader(data))

    def to_bytes(self, value: Mapping[str, Any]) -> bytes:
        """Serialize ``value`` to bytes."""
        out = bytearray()
        self.write(value, out)
        return bytes(out)

    def hard_links(self, value: Mapping[str, Any]) -> list[int]:
        """Identifiers this structure embeds as hard links."""
        return list(self._hard_links(value)) if self._hard_links else []

    def soft_links(self, value: Mapping[str, Any]) -> list[int]:
        """Identifiers this structure refers to as soft links."""
        return list(self._soft_links(value)) if self._soft_links else []


class Links(NamedTuple):
    """Hard and soft references found in an object."""

    hard_links: list[int]
    soft_links: list[int]


@dataclass
class PackedObject:
    """Binary header and body built from an unpacked object directory."""

    header: bytes
    body: bytes
    hard_links: list[int] = field(default_factory=list)
    soft_links: list[int] = field(default_factory=list)


class ObjectFormat(ABC):
    """Converts one object type between binary form and a directory of files."""

    @abstractmethod
    def pack(self, input_path) -> PackedObject:
        """Build the binary header and body from the files in ``input_path``."""

    @abstractmethod
    def unpack(self, header: bytes, body: bytes, output_path) -> Links:
        """Write the files describing ``header`` and ``body`` into ``output_path``."""

    @staticmethod
    def _load_json(path: Path) -> Any:
        with open(path, encoding="utf-8") as handle:
            try:
                return json.load(handle)
            except json.JSONDecodeError as exc:
                raise FormatError(f"{path}: {exc}") from exc

    @staticmethod
    def _dump_json(path: Path, document: Any) -> None:
        Path(path).write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")

    @staticmethod
    def _member(document: Any, key: str) -> Any:
        if not isinstance(document, Mapping) or key not in document:
            raise FormatError(f"object.json has no {key!r} member")
        return document[key]


class StructObjectFormat(ObjectFormat):
    """An object whose header and body are both described by structures."""

    def __init__(self, header: Struct, body: Struct) -> None:
        self.header = header
        self.body = body

    def pack(self, input_path):
        document = self._load_json(Path(input_path) / "object.json")
        header = self.header.from_json(self._member(document, "header"))
        body = self.body.from_json(self._member(document, "body"))
        return PackedObject(
            header=self.header.to_bytes(header),
            body=self.body.to_bytes(body),
            hard_links=self.header.hard_links(header) + self.body.hard_links(body),
            soft_links=self.header.soft_links(header) + self.body.soft_links(body),
        )

    def unpack(self, header, body, output_path):
        header_value = self.header.parse_bytes(header)
        body_value = self.body.parse_bytes(body)
        self._dump_json(
            Path(output_path) / "object.json",
            {"header": self.header.to_json(header_value), "body": self.body.to_json(body_value)},
        )
        return Links(
            self.header.hard_links(header_value) + self.body.hard_links(body_value),
            self.header.soft_links(header_value) + self.body.soft_links(body_value),
        )


VEC2F = FixedVec(F32, 2)
VEC3F = FixedVec(F32, 3)
VEC3I32 = FixedVec(I32, 3)
VEC4F = FixedVec(F32, 4)
QUAT = FixedVec(F32, 4)
MAT4F = FixedVec(F32, 16)

RECT = Struct("Rect", [Field("x1", I32), Field("y1", I32), Field("x2", I32), Field("y2", I32)])
COLOR = Struct("Color", [Field("r", F32), Field("g", F32), Field("b", F32), Field("a", F32)])
SPHERE = Struct("SphereZ", [Field("center", VEC3F), Field("radius", F32)])
RANGE_BEGIN_END = Struct("RangeBeginEnd", [Field("begin", U16), Field("end", U16)])
RANGE_BEGIN_SIZE = Struct("RangeBeginSize", [Field("begin", U16), Field("size", U16)])
RANGE_BEGIN_SIZE_U32 = Struct("RangeBeginSize", [Field("begin", U32), Field("size", U32)])
FADE_DISTANCES = Struct(
    "FadeDistances", [Field("x", F32), Field("y", F32), Field("fade_close", F32)]
)
DYN_SPHERE = Struct(
    "DynSphere", [Field("sphere", SPHERE), Field("flags", U32), Field("dyn_sphere_name", U32)]
)
DYN_BOX = Struct("DynBox", [Field("mat", MAT4F), Field("flags", U32), Field("dyn_box_name", U32)])

RESOURCE_OBJECT = Struct(
    "ResourceObjectZ",
    [
        Field("friendly_name_crc32", U32),
        Field(
            "crc32s",
            PascalArray(U32),
            condition=lambda scope, reader: reader.remaining() != 0,
        ),
    ],
    exact=True,
    soft_links=lambda value: value.get("crc32s") or [],
)


def _object_soft_links(value: Mapping[str, Any]) -> list[int]:
    if value.get("crc32s") is not None:
        return list(value["crc32s"])
    if value["data_crc32"] != 0:
        return [value["data_crc32"]]
    return []


OBJECT = Struct(
    "ObjectZ",
    [
        Field("link_crc32", U32),
        Field("data_crc32", U32),
        Field(
            "crc32s",
            CountedVec(U32, lambda scope: scope["data_crc32"] + 1),
            condition=lambda scope, reader: reader.remaining() != 90,
        ),
        Field("rot", QUAT),
        Field("transform", MAT4F),
        Field("radius", F32),
        Field("flags", U32),
        Field("object_type", U16),
    ],
    exact=True,
    soft_links=_object_soft_links,
)