from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from blobrelay import codec
from blobrelay.deps import get_fetcher
from blobrelay.errors import ValidationError
from blobrelay.schemas.relay import ErrorOut, FetchUrlIn, FetchUrlOut
from blobrelay.services.remote_fetch import SecureFetcher

router = APIRouter(prefix="/api", tags=["fetch"])
log = logging.getLogger(__name__)


@router.post("/fetch-url", response_model=FetchUrlOut, responses={400: {"model": ErrorOut}})
async def fetch_url(
    body: FetchUrlIn,
    fetcher: Annotated[SecureFetcher, Depends(get_fetcher)],
) -> FetchUrlOut:
    if not isinstance(body.url, str) or not body.url.strip():
        raise ValidationError("Missing url")

    result = await fetcher.fetch(body.url)
    log.info("fetch_url: %d bytes type=%s", result.size, result.content_type)
    return FetchUrlOut(base64=codec.encode(result.data), type=result.content_type)
