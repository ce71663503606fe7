from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import (  # type: ignore[reportMissingImports]
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)

# In-process API metrics
api_requests_total = Counter(
    "api_requests_total", "Total API requests", ["method", "endpoint", "status"]
)
api_request_duration_seconds = Histogram(
    "api_request_duration_seconds", "API request duration seconds", ["endpoint"]
)

# Relay outcomes
relay_fetch_total = Counter("relay_fetch_total", "Remote fetches by outcome", ["result"])
relay_fetch_bytes = Histogram(
    "relay_fetch_bytes",
    "Size of successfully fetched bodies",
    buckets=(1 << 10, 1 << 14, 1 << 17, 1 << 20, 1 << 22, 1 << 24, 24 * (1 << 20)),
)
relay_upload_total = Counter("relay_upload_total", "Uploads by outcome", ["result"])
relay_public_total = Counter("relay_public_total", "Public blob reads by outcome", ["result"])

router = APIRouter()


@router.get("/metrics")
def metrics() -> PlainTextResponse:
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)
