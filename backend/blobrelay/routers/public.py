from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from blobrelay.deps import get_blob_store, require_blob_key
from blobrelay.errors import BlobNotFound
from blobrelay.mime import mime_for
from blobrelay.store.base import BlobStore
from blobrelay.telemetry.metrics import relay_public_total

router = APIRouter(tags=["public"])

IMMUTABLE_CACHE = "public, max-age=31536000, immutable"


@router.api_route("/public/{filename}", methods=["GET", "HEAD"], response_model=None)
async def serve_public(
    filename: Annotated[str, Depends(require_blob_key)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> StreamingResponse:
    blob = await store.open(filename)
    if blob is None:
        relay_public_total.labels(result="miss").inc()
        raise BlobNotFound()

    relay_public_total.labels(result="hit").inc()
    headers = {
        "Content-Disposition": f'inline; filename="{filename}"',
        "Cache-Control": IMMUTABLE_CACHE,
        "Access-Control-Allow-Origin": "*",
        "X-Content-Type-Options": "nosniff",
    }
    if blob.size is not None:
        headers["Content-Length"] = str(blob.size)
    return StreamingResponse(
        blob.chunks,
        media_type=mime_for(filename),
        headers=headers,
        background=BackgroundTask(blob.aclose),
    )
