from __future__ import annotations

import logging
from collections.abc import AsyncIterable

from blobrelay.errors import TooLarge

logger = logging.getLogger(__name__)


def check_declared_length(declared: str | int | None, max_bytes: int) -> int | None:
    """Parse a Content-Length style value and fail early if it is over the ceiling.

    Unparseable values are ignored; the streaming count still applies.
    """
    if declared is None or declared == "":
        return None
    try:
        n = int(declared)
    except (TypeError, ValueError):
        logger.debug("ignoring malformed declared length %r", declared)
        return None
    if n > max_bytes:
        raise TooLarge()
    return n


async def read_bounded(
    chunks: AsyncIterable[bytes],
    max_bytes: int,
    declared_length: str | int | None = None,
) -> bytes:
    """Drain ``chunks`` into one buffer, failing with TooLarge past ``max_bytes``.

    Iteration stops on the chunk that crosses the limit; whatever was read
    so far is dropped, never returned.
    """
    check_declared_length(declared_length, max_bytes)

    parts: list[bytes] = []
    received = 0
    async for chunk in chunks:
        if not chunk:
            continue
        received += len(chunk)
        if received > max_bytes:
            parts.clear()
            raise TooLarge()
        parts.append(chunk)
    return b"".join(parts)
