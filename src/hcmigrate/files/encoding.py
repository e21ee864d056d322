"""Encoding-preserving text I/O for HTML sources."""

from __future__ import annotations

import codecs
from pathlib import Path

from charset_normalizer import from_bytes

_ASCII_NAMES = {"ascii", "us-ascii", "us_ascii"}
# UTF-32 first: its little-endian BOM starts with the UTF-16 one.
_UNICODE_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def bom_encoding(raw: bytes) -> str | None:
    """Codec named by a leading UTF-16/32 byte-order mark, if any."""

    for bom, encoding in _UNICODE_BOMS:
        if raw.startswith(bom):
            return encoding
    return None


def has_unicode_bom(raw: bytes) -> bool:
    return bom_encoding(raw) is not None


def detect_encoding(raw: bytes) -> str:
    """Return the codec name that decodes *raw*, preferring UTF-8."""

    if not raw:
        return "utf-8"
    marked = bom_encoding(raw)
    if marked is not None:
        return marked
    try:
        raw.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        name = best.encoding.lower()
        if name in _ASCII_NAMES:
            return "utf-8"
        return best.encoding

    for fallback in ("cp1252", "latin-1"):
        try:
            raw.decode(fallback)
            return fallback
        except UnicodeDecodeError:
            continue
    raise ValueError("Could not detect HTML encoding")


def read_text(path: Path) -> tuple[str, str]:
    """Read *path* and return ``(text, encoding)``."""

    raw = path.read_bytes()
    encoding = detect_encoding(raw)
    return raw.decode(encoding), encoding


def write_text(path: Path, text: str, encoding: str) -> None:
    """Write *text* back using the encoding it was read with."""

    path.write_bytes(text.encode(encoding))
