"""Byte order mark detection and transcoding for authentication files.

Files written by PowerShell or Windows tooling are frequently UTF-16, with or
without a BOM. Everything is normalised to ``str`` before parsing.
"""
from __future__ import annotations

import codecs
from typing import Tuple

from ..exceptions import DecodeError

_BOMS: Tuple[Tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

# Number of leading bytes inspected when no BOM is present.
_SNIFF_LENGTH = 64


def _sniff_utf16(data: bytes) -> str | None:
    sample = data[:_SNIFF_LENGTH]
    pairs = len(sample) // 2
    if pairs == 0:
        return None

    even_nuls = sum(1 for i in range(0, pairs * 2, 2) if sample[i] == 0)
    odd_nuls = sum(1 for i in range(1, pairs * 2, 2) if sample[i] == 0)

    # ASCII-range text in UTF-16 leaves the high byte of most code units zero;
    # the occasional non-Latin code unit puts a NUL on the other side.
    if odd_nuls * 2 >= pairs and odd_nuls > 3 * even_nuls:
        return "utf-16-le"
    if even_nuls * 2 >= pairs and even_nuls > 3 * odd_nuls:
        return "utf-16-be"
    return None


def detect_encoding(data: bytes) -> Tuple[str, int]:
    """Return ``(codec, bom_length)`` for ``data``.

    A BOM wins when present. Otherwise the position of NUL bytes in the first
    few code units decides between UTF-16 LE/BE, falling back to UTF-8.
    """

    for bom, codec in _BOMS:
        if data.startswith(bom):
            return codec, len(bom)
    sniffed = _sniff_utf16(data)
    if sniffed is not None:
        return sniffed, 0
    return "utf-8", 0


def decode_bytes(data: bytes) -> str:
    """Transcode UTF-8 or UTF-16 (LE/BE, BOM optional) bytes to text.

    Raises
    ------
    DecodeError
        If the payload is truncated (odd-length UTF-16), contains unpaired
        surrogates, or is not valid UTF-8.
    """

    codec, skip = detect_encoding(data)
    payload = data[skip:]
    if codec.startswith("utf-16") and len(payload) % 2:
        raise DecodeError(f"truncated {codec} input: {len(payload)} bytes is not a whole number of code units")
    try:
        return payload.decode(codec)
    except UnicodeDecodeError as exc:
        raise DecodeError(f"invalid {codec} input: {exc.reason}") from exc


__all__ = ["decode_bytes", "detect_encoding"]
