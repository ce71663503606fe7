from __future__ import annotations

import logging
from typing import Any

import httpx

from blobrelay import codec
from blobrelay.config import StoreConfig
from blobrelay.errors import BlobExistsError, StoreCheckError, StoreError
from blobrelay.store.base import BlobStream

logger = logging.getLogger(__name__)

CONFLICT_STATUSES = (409, 422)
RAW_MEDIA_TYPE = "application/vnd.github.raw"


def _error_message(res: httpx.Response) -> str | None:
    try:
        data: Any = res.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        return data["message"]
    return None


class GitHubContentsStore:
    """Blob store on top of the GitHub repository contents API.

    Every blob lives at ``<prefix>/<key>`` in ``config.repo``; a create is a
    commit that fails when the path already exists.
    """

    def __init__(self, config: StoreConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout_sec,
            headers={
                "Authorization": f"Bearer {self.config.token}",
                "User-Agent": self.config.user_agent,
                "Accept": "application/vnd.github+json",
            },
            transport=self._transport,
        )

    def path(self, key: str) -> str:
        return f"{self.config.prefix}/{key}" if self.config.prefix else key

    def url(self, key: str) -> str:
        return f"{self.config.api_url}/repos/{self.config.repo}/contents/{self.path(key)}"

    async def exists(self, key: str) -> bool:
        try:
            async with self._client() as client:
                res = await client.get(self.url(key))
        except httpx.HTTPError as e:
            logger.warning("store check transport error for %s: %s", key, type(e).__name__)
            raise StoreCheckError() from e

        if res.is_success:
            return True
        if res.status_code == 404:
            return False
        msg = _error_message(res) or f"Store check failed ({res.status_code})"
        logger.warning("store check for %s returned %d: %s", key, res.status_code, msg)
        raise StoreCheckError(msg)

    async def create(self, key: str, data: bytes) -> None:
        body = {"message": f"Upload {key}", "content": codec.encode(data)}
        try:
            async with self._client() as client:
                res = await client.put(self.url(key), json=body)
        except httpx.HTTPError as e:
            logger.warning("store create transport error for %s: %s", key, type(e).__name__)
            raise StoreError() from e

        if res.is_success:
            return
        msg = _error_message(res)
        if res.status_code in CONFLICT_STATUSES and msg and "already exists" in msg.lower():
            raise BlobExistsError(msg)
        logger.warning("store create for %s returned %d: %s", key, res.status_code, msg)
        raise StoreError(msg)

    async def open(self, key: str) -> BlobStream | None:
        client = self._client()
        try:
            req = client.build_request("GET", self.url(key), headers={"Accept": RAW_MEDIA_TYPE})
            res = await client.send(req, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            logger.warning("store read transport error for %s: %s", key, type(e).__name__)
            return None

        if not res.is_success:
            await res.aclose()
            await client.aclose()
            if res.status_code != 404:
                logger.warning("store read for %s returned %d", key, res.status_code)
            return None

        async def _close() -> None:
            await res.aclose()
            await client.aclose()

        length = res.headers.get("content-length")
        if res.headers.get("content-encoding"):
            # aiter_bytes decodes, so the declared length would not match
            length = None
        return BlobStream(
            chunks=res.aiter_bytes(),
            aclose=_close,
            size=int(length) if length and length.isdigit() else None,
        )
