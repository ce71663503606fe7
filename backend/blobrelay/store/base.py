from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass
class BlobStream:
    """An open blob read; the consumer must call ``aclose`` when done."""

    chunks: AsyncIterator[bytes]
    aclose: Callable[[], Awaitable[None]]
    size: int | None = None


class BlobStore(Protocol):
    """Write-once key/value blob storage.

    ``exists`` answers True/False only when the store gave a definite answer
    and raises StoreCheckError otherwise. ``create`` must be atomic per key:
    when the key is already taken it raises BlobExistsError.
    """

    async def exists(self, key: str) -> bool: ...

    async def create(self, key: str, data: bytes) -> None: ...

    async def open(self, key: str) -> BlobStream | None: ...
