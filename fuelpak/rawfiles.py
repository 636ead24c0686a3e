"""Object formats whose payload is kept as a plain file next to object.json."""

from __future__ import annotations

import struct
import wave
from pathlib import Path

from fuelpak.common import (
    RESOURCE_OBJECT,
    U16,
    U32,
    Field,
    FormatError,
    Links,
    ObjectFormat,
    PackedObject,
    Struct,
)

DEFAULT_SAMPLE_RATE = 44100


class BinaryObjectFormat(ObjectFormat):
    """Resource header plus an opaque body stored as data.bin."""

    def pack(self, input_path):
        directory = Path(input_path)
        document = self._load_json(directory / "object.json")
        resource = RESOURCE_OBJECT.from_json(self._member(document, "resource_object"))
        body = (directory / "data.bin").read_bytes()
        return PackedObject(
            header=RESOURCE_OBJECT.to_bytes(resource),
            body=body,
            hard_links=RESOURCE_OBJECT.hard_links(resource),
            soft_links=RESOURCE_OBJECT.soft_links(resource),
        )

    def unpack(self, header, body, output_path):
        directory = Path(output_path)
        resource = RESOURCE_OBJECT.parse_bytes(header)
        self._dump_json(
            directory / "object.json", {"resource_object": RESOURCE_OBJECT.to_json(resource)}
        )
        (directory / "data.bin").write_bytes(body)
        return Links(RESOURCE_OBJECT.hard_links(resource), RESOURCE_OBJECT.soft_links(resource))


class UserDefineObjectFormat(ObjectFormat):
    """Resource header plus a length-prefixed text body stored as data.txt."""

    def pack(self, input_path):
        directory = Path(input_path)
        document = self._load_json(directory / "object.json")
        resource = RESOURCE_OBJECT.from_json(self._member(document, "resource_object"))
        text = (directory / "data.txt").read_bytes()
        return PackedObject(
            header=RESOURCE_OBJECT.to_bytes(resource),
            body=struct.pack("<I", len(text)) + text,
            hard_links=RESOURCE_OBJECT.hard_links(resource),
            soft_links=RESOURCE_OBJECT.soft_links(resource),
        )

    def unpack(self, header, body, output_path):
        directory = Path(output_path)
        resource = RESOURCE_OBJECT.parse_bytes(header)
        if len(body) < 4:
            raise FormatError("user define body is shorter than its length prefix")
        (size,) = struct.unpack_from("<I", body)
        text = body[4:4 + size]
        text += bytes(size - len(text))
        self._dump_json(
            directory / "object.json", {"resource_object": RESOURCE_OBJECT.to_json(resource)}
        )
        (directory / "data.txt").write_bytes(text)
        return Links(RESOURCE_OBJECT.hard_links(resource), RESOURCE_OBJECT.soft_links(resource))


def _has_sample_rate(scope, reader) -> bool:
    return scope["sample_rate"] != 0


SOUND_HEADER = Struct(
    "SoundZHeader",
    [
        Field("friendly_name_crc32", U32),
        Field("sample_rate", U32),
        Field("data_size", U32, condition=_has_sample_rate),
        Field(
            "sound_type",
            U16,
            condition=_has_sample_rate,
            verify=lambda kind: kind in (1, 3, 5, 7),
        ),
        Field(
            "zero",
            U16,
            condition=lambda scope, reader: scope["sample_rate"] != 0
            and reader.remaining() == 2,
        ),
    ],
    exact=True,
)


def _read_wav_samples(path: Path) -> bytes:
    """Return every sample of a WAV file as little-endian 16-bit integers."""
    try:
        with wave.open(str(path), "rb") as wav:
            width = wav.getsampwidth()
            frames = wav.readframes(wav.getnframes())
    except wave.Error as exc:
        raise FormatError(f"{path}: {exc}") from exc
    if width == 2:
        return frames
    if width == 1:
        return struct.pack(f"<{len(frames)}h", *(sample - 128 for sample in frames))
    raise FormatError(f"{path}: {width * 8}-bit samples do not fit in 16 bits")


class SoundObjectFormat(ObjectFormat):
    """Sound header plus 16-bit PCM samples stored as data.wav."""

    def pack(self, input_path):
        directory = Path(input_path)
        document = self._load_json(directory / "object.json")
        sound_header = SOUND_HEADER.from_json(self._member(document, "sound_header"))
        samples = _read_wav_samples(directory / "data.wav")
        return PackedObject(
            header=SOUND_HEADER.to_bytes(sound_header),
            body=samples,
            hard_links=SOUND_HEADER.hard_links(sound_header),
            soft_links=SOUND_HEADER.soft_links(sound_header),
        )

    def unpack(self, header, body, output_path):
        directory = Path(output_path)
        sound_header = SOUND_HEADER.parse_bytes(header)
        sample_count = len(body) // 2
        with wave.open(str(directory / "data.wav"), "wb") as wav:
            wav.setnchannels(1)
            wav.setsampwidth(2)
            wav.setframerate(sound_header["sample_rate"] or DEFAULT_SAMPLE_RATE)
            wav.writeframes(body[:sample_count * 2])
        self._dump_json(
            directory / "object.json", {"sound_header": SOUND_HEADER.to_json(sound_header)}
        )
        return Links(SOUND_HEADER.hard_links(sound_header), SOUND_HEADER.soft_links(sound_header))