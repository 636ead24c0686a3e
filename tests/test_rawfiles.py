import json
import struct
import wave

import pytest

from fuelpak.common import FormatError, Links
from fuelpak.rawfiles import (
    SOUND_HEADER,
    BinaryObjectFormat,
    SoundObjectFormat,
    UserDefineObjectFormat,
)


def test_binary_round_trip(tmp_path):
    fmt = BinaryObjectFormat()
    header = struct.pack("<III", 12, 1, 77)
    body = b"\x00\x01payload\xff"
    links = fmt.unpack(header, body, tmp_path)
    assert links == Links([], [77])
    assert (tmp_path / "data.bin").read_bytes() == body
    document = json.loads((tmp_path / "object.json").read_text())
    assert document == {"resource_object": {"friendly_name_crc32": 12, "crc32s": [77]}}
    packed = fmt.pack(tmp_path)
    assert packed.header == header
    assert packed.body == body
    assert packed.soft_links == [77]


def test_binary_bad_header(tmp_path):
    with pytest.raises(FormatError):
        BinaryObjectFormat().unpack(b"\x01\x02", b"", tmp_path)


def test_user_define_round_trip(tmp_path):
    fmt = UserDefineObjectFormat()
    header = struct.pack("<I", 3)
    body = struct.pack("<I", 5) + b"hello"
    fmt.unpack(header, body, tmp_path)
    assert (tmp_path / "data.txt").read_bytes() == b"hello"
    packed = fmt.pack(tmp_path)
    assert packed.header == header
    assert packed.body == body
    assert packed.soft_links == []


def test_user_define_short_text_is_zero_padded(tmp_path):
    body = struct.pack("<I", 5) + b"ab"
    UserDefineObjectFormat().unpack(struct.pack("<I", 3), body, tmp_path)
    assert (tmp_path / "data.txt").read_bytes() == b"ab\x00\x00\x00"


def test_user_define_body_without_length(tmp_path):
    with pytest.raises(FormatError):
        UserDefineObjectFormat().unpack(struct.pack("<I", 3), b"\x01", tmp_path)


def test_sound_round_trip(tmp_path):
    fmt = SoundObjectFormat()
    header = struct.pack("<IIIHH", 9, 22050, 8, 1, 0)
    body = struct.pack("<4h", 0, 1000, -1000, 32767)
    links = fmt.unpack(header, body, tmp_path)
    assert links == Links([], [])
    with wave.open(str(tmp_path / "data.wav"), "rb") as wav:
        assert wav.getframerate() == 22050
        assert wav.getnchannels() == 1
        assert wav.readframes(wav.getnframes()) == body
    document = json.loads((tmp_path / "object.json").read_text())
    assert document["sound_header"]["zero"] == 0
    packed = fmt.pack(tmp_path)
    assert packed.header == header
    assert packed.body == body


def test_sound_without_sample_rate_uses_default(tmp_path):
    header = struct.pack("<II", 9, 0)
    SoundObjectFormat().unpack(header, struct.pack("<2h", 5, -5), tmp_path)
    with wave.open(str(tmp_path / "data.wav"), "rb") as wav:
        assert wav.getframerate() == 44100
    document = json.loads((tmp_path / "object.json").read_text())
    assert document == {"sound_header": {"friendly_name_crc32": 9, "sample_rate": 0}}
    assert SoundObjectFormat().pack(tmp_path).header == header


def test_sound_header_without_zero_field():
    header = struct.pack("<IIIH", 9, 22050, 8, 3)
    value = SOUND_HEADER.parse_bytes(header)
    assert value["zero"] is None
    assert value["sound_type"] == 3
    assert SOUND_HEADER.to_bytes(value) == header


def test_sound_header_rejects_unknown_type():
    with pytest.raises(FormatError):
        SOUND_HEADER.parse_bytes(struct.pack("<IIIH", 9, 22050, 8, 2))


def test_sound_pack_8bit_wav(tmp_path):
    (tmp_path / "object.json").write_text(
        json.dumps({"sound_header": {"friendly_name_crc32": 1, "sample_rate": 0}})
    )
    with wave.open(str(tmp_path / "data.wav"), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(1)
        wav.setframerate(8000)
        wav.writeframes(bytes([128, 129, 127]))
    packed = SoundObjectFormat().pack(tmp_path)
    assert struct.unpack("<3h", packed.body) == (0, 1, -1)


def test_sound_pack_missing_header(tmp_path):
    (tmp_path / "object.json").write_text(json.dumps({}))
    with pytest.raises(FormatError):
        SoundObjectFormat().pack(tmp_path)