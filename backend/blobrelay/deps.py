from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from blobrelay.config import Settings
from blobrelay.errors import BlobNotFound
from blobrelay.services.ingest import ContentAddressedStore
from blobrelay.services.remote_fetch import SecureFetcher
from blobrelay.store.base import BlobStore
from blobrelay.store.github import GitHubContentsStore
from blobrelay.validators import is_blob_key


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_fetcher(settings: Annotated[Settings, Depends(get_settings)]) -> SecureFetcher:
    return SecureFetcher(settings.fetch_config())


def get_blob_store(settings: Annotated[Settings, Depends(get_settings)]) -> BlobStore:
    # raises ConfigError (500) when the token or repository is missing
    return GitHubContentsStore(settings.store_config())


def get_ingest(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> ContentAddressedStore:
    base_url = settings.base_url or str(request.base_url)
    return ContentAddressedStore(store, public_base_url=base_url, max_bytes=settings.max_bytes)


def require_blob_key(filename: str) -> str:
    """Path guard for the public read route; any mismatch is a plain 404."""
    if not is_blob_key(filename):
        raise BlobNotFound()
    return filename
