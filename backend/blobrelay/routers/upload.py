from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from blobrelay import codec
from blobrelay.deps import get_ingest
from blobrelay.errors import RelayError, TooLarge, UnsupportedType, ValidationError
from blobrelay.schemas.relay import ErrorOut, UploadIn, UploadOut
from blobrelay.services.ingest import ContentAddressedStore
from blobrelay.telemetry.metrics import relay_upload_total
from blobrelay.validators import extension_of, is_allowed_extension

router = APIRouter(prefix="/api", tags=["upload"])
log = logging.getLogger(__name__)


@router.post(
    "/upload",
    response_model=UploadOut,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}, 502: {"model": ErrorOut}},
)
async def upload(
    body: UploadIn,
    ingest: Annotated[ContentAddressedStore, Depends(get_ingest)],
) -> UploadOut:
    try:
        if not isinstance(body.filename, str) or not body.filename.strip():
            raise ValidationError("Missing filename")
        if not isinstance(body.content, str) or not body.content.strip():
            raise ValidationError("Missing content")

        ext = extension_of(body.filename)
        if not is_allowed_extension(ext):
            raise UnsupportedType()

        data = codec.decode(body.content)
        if len(data) > ingest.max_bytes:
            raise TooLarge()

        result = await ingest.put_if_absent(data, ext)
    except RelayError as e:
        relay_upload_total.labels(result="error").inc()
        log.info("upload rejected: kind=%s msg=%s", e.kind.value, e.message)
        raise

    relay_upload_total.labels(result="created" if result.created else "cached").inc()
    log.info(
        "upload: key=%s size=%d created=%s",
        result.key,
        len(data),
        result.created,
    )
    return UploadOut(url=result.url, cached=None if result.created else True)
