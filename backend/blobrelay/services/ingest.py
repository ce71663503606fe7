from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from blobrelay.errors import BlobExistsError, TooLarge, UnsupportedType
from blobrelay.store.base import BlobStore
from blobrelay.validators import FINGERPRINT_LEN, is_allowed_extension

logger = logging.getLogger(__name__)

PUBLIC_PATH = "/public"


def fingerprint(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()[:FINGERPRINT_LEN]


def blob_key(data: bytes, extension: str) -> str:
    return f"{fingerprint(data)}{extension}"


@dataclass(frozen=True)
class PutResult:
    key: str
    url: str
    created: bool


class ContentAddressedStore:
    """Write-once, content-addressed ingestion on top of a BlobStore.

    Identical bytes with the same extension always map to the same key, so
    a second upload is answered from the existing object. Concurrent
    uploads of the same content both succeed: the store lets exactly one
    create through and the loser sees BlobExistsError, which is treated as
    "already stored".
    """

    def __init__(self, store: BlobStore, public_base_url: str, max_bytes: int):
        self.store = store
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}{PUBLIC_PATH}/{key}"

    async def put_if_absent(self, data: bytes, extension: str) -> PutResult:
        if not is_allowed_extension(extension):
            raise UnsupportedType()
        if len(data) > self.max_bytes:
            raise TooLarge()

        key = blob_key(data, extension)
        url = self.public_url(key)

        # StoreCheckError propagates: never create on an inconclusive check
        if await self.store.exists(key):
            logger.info("ingest: %s already stored (%d bytes)", key, len(data))
            return PutResult(key=key, url=url, created=False)

        try:
            await self.store.create(key, data)
        except BlobExistsError:
            logger.info("ingest: %s created concurrently by another writer", key)
            return PutResult(key=key, url=url, created=False)

        logger.info("ingest: stored %s (%d bytes)", key, len(data))
        return PutResult(key=key, url=url, created=True)
