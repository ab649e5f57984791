"""Content-based MIME detection for media files.

Only the leading bytes are inspected; file extensions are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


SNIFF_BYTES = 512

EMPTY_MIME = "application/x-empty"
BINARY_MIME = "application/octet-stream"
TEXT_MIME = "text/plain"

# ISO base media file format major brands
_FTYP_BRANDS: dict[bytes, str] = {
    b"qt  ": "video/quicktime",
    b"M4V ": "video/x-m4v",
    b"M4VH": "video/x-m4v",
    b"M4VP": "video/x-m4v",
    b"M4A ": "audio/x-m4a",
    b"M4B ": "audio/x-m4a",
    b"3gp4": "video/3gpp",
    b"3gp5": "video/3gpp",
    b"3gp6": "video/3gpp",
    b"3g2a": "video/3gpp2",
    b"avif": "image/avif",
    b"heic": "image/heic",
}

# Atoms that can open a QuickTime movie written without an ftyp box
_QUICKTIME_ATOMS = (b"moov", b"mdat", b"wide", b"free", b"skip", b"pnot")

_MPEG_TS_PACKET = 188


def _sniff_ftyp(head: bytes) -> Optional[str]:
    if len(head) < 12 or head[4:8] != b"ftyp":
        return None
    brand = head[8:12]
    if brand in _FTYP_BRANDS:
        return _FTYP_BRANDS[brand]
    if brand.startswith(b"3gp"):
        return "video/3gpp"
    return "video/mp4"


def _sniff_ebml(head: bytes) -> Optional[str]:
    if not head.startswith(b"\x1a\x45\xdf\xa3"):
        return None
    if b"webm" in head[:64]:
        return "video/webm"
    return "video/x-matroska"


def _sniff_riff(head: bytes) -> Optional[str]:
    if len(head) < 12 or not head.startswith(b"RIFF"):
        return None
    form = head[8:12]
    if form == b"AVI ":
        return "video/x-msvideo"
    if form == b"WAVE":
        return "audio/x-wav"
    if form == b"WEBP":
        return "image/webp"
    return None


def _sniff_mpeg(head: bytes) -> Optional[str]:
    if head.startswith(b"\x00\x00\x01\xba") or head.startswith(b"\x00\x00\x01\xb3"):
        return "video/mpeg"
    # Transport stream: sync byte repeated at the packet boundary
    if head[:1] == b"\x47" and head[_MPEG_TS_PACKET : _MPEG_TS_PACKET + 1] == b"\x47":
        return "video/mp2t"
    return None


def _sniff_audio(head: bytes) -> Optional[str]:
    if head.startswith(b"ID3") or (len(head) >= 2 and head[0] == 0xFF and (head[1] & 0xE0) == 0xE0):
        return "audio/mpeg"
    if head.startswith(b"fLaC"):
        return "audio/flac"
    return None


def _sniff_text(head: bytes) -> str:
    if b"\x00" in head:
        return BINARY_MIME
    try:
        head.decode("utf-8")
    except UnicodeDecodeError as e:
        # A multi-byte sequence cut off by the sniff window still counts as text
        if e.start < len(head) - 3:
            return BINARY_MIME
    return TEXT_MIME


def sniff_bytes(head: bytes) -> str:
    """Return the MIME type suggested by the leading bytes of a file."""
    if not head:
        return EMPTY_MIME

    mime = _sniff_ftyp(head)
    if mime:
        return mime
    if len(head) >= 8 and head[4:8] in _QUICKTIME_ATOMS:
        return "video/quicktime"

    for sniffer in (_sniff_ebml, _sniff_riff, _sniff_mpeg):
        mime = sniffer(head)
        if mime:
            return mime

    if head.startswith(b"OggS"):
        return "video/ogg" if b"theora" in head[:SNIFF_BYTES] else "audio/ogg"
    if head.startswith(b"FLV\x01"):
        return "video/x-flv"

    mime = _sniff_audio(head)
    if mime:
        return mime

    return _sniff_text(head)


def sniff_mime_type(path: str | Path) -> str:
    """Read the first bytes of ``path`` and sniff its MIME type (blocking)."""
    with Path(path).open("rb") as f:
        head = f.read(SNIFF_BYTES)
    return sniff_bytes(head)
