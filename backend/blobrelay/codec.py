"""Base64 transport encoding for blobs.

Encoding walks the buffer in fixed-size slices instead of handing a
multi-megabyte buffer to a single call. The slice size is a multiple of 3, so
every slice encodes to whole base64 quads without padding and the
concatenation equals the encoding of the whole buffer.
"""
from __future__ import annotations

import base64
import binascii
import re

from blobrelay.errors import InvalidEncoding

CHUNK_SIZE = 0x8000 // 3 * 3

_B64_CHARS_RE = re.compile(r"[A-Za-z0-9+/=\s]*")
_WS_RE = re.compile(r"\s+")


def encode(data: bytes | bytearray | memoryview) -> str:
    view = memoryview(data)
    parts = [
        base64.b64encode(view[i : i + CHUNK_SIZE]).decode("ascii")
        for i in range(0, len(view), CHUNK_SIZE)
    ]
    return "".join(parts)


def decode(text: str) -> bytes:
    if not isinstance(text, str) or _B64_CHARS_RE.fullmatch(text) is None:
        raise InvalidEncoding()
    compact = _WS_RE.sub("", text)
    # atob() accepts unpadded input; b64decode does not
    if "=" not in compact and len(compact) % 4:
        compact += "=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncoding() from e
