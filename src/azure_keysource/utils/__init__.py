from __future__ import annotations

from .b64d import b64d
from .b64e import b64e
from .encoding import decode_bytes, detect_encoding

__all__ = [
    "b64e",
    "b64d",
    "decode_bytes",
    "detect_encoding",
]
