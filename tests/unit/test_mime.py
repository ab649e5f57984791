from pathlib import Path

import pytest

from stream_video.storage import sniff_bytes
from stream_video.storage import sniff_mime_type


def _ftyp(brand: bytes) -> bytes:
    return b"\x00\x00\x00\x18ftyp" + brand + b"\x00\x00\x00\x00" + brand + b"isom"


@pytest.mark.parametrize(
    "head,expected",
    [
        (_ftyp(b"isom"), "video/mp4"),
        (_ftyp(b"mp42"), "video/mp4"),
        (_ftyp(b"qt  "), "video/quicktime"),
        (_ftyp(b"M4V "), "video/x-m4v"),
        (_ftyp(b"3gp4"), "video/3gpp"),
        (b"\x00\x00\x00\x08wide\x00\x00\x00\x00mdat", "video/quicktime"),
        (b"\x00\x00\x01\x00moov", "video/quicktime"),
        (b"\x1a\x45\xdf\xa3\x9f\x42\x86\x81\x01\x42\x82\x84webm", "video/webm"),
        (b"\x1a\x45\xdf\xa3\xa3\x42\x86\x81\x01\x42\x82\x88matroska", "video/x-matroska"),
        (b"RIFF\x00\x00\x00\x00AVI LIST", "video/x-msvideo"),
        (b"\x00\x00\x01\xba\x44\x00\x04\x00", "video/mpeg"),
        (b"\x47" + b"\x00" * 187 + b"\x47" + b"\x00" * 10, "video/mp2t"),
        (b"FLV\x01\x05\x00\x00\x00\x09", "video/x-flv"),
        (b"OggS\x00\x02" + b"\x00" * 22 + b"\x80theora", "video/ogg"),
        (b"ID3\x04\x00\x00", "audio/mpeg"),
        (b"fLaC\x00\x00\x00\x22", "audio/flac"),
        (b"", "application/x-empty"),
        (b"hello world\n", "text/plain"),
        (b"Great scott", "text/plain"),
        (b"\x00\x01\x02\x03binary", "application/octet-stream"),
    ],
)
def test_sniff_bytes(head: bytes, expected: str) -> None:
    assert sniff_bytes(head) == expected


def test_sniff_ignores_extension(tmp_path: Path) -> None:
    path = tmp_path / "clip.txt"
    path.write_bytes(_ftyp(b"qt  ") + b"\x00" * 1000)

    assert sniff_mime_type(path) == "video/quicktime"


def test_sniff_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.mp4"
    path.write_bytes(b"")

    assert sniff_mime_type(path) == "application/x-empty"
