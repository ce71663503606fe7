from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from blobrelay.services.ingest import PUBLIC_PATH

API_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
# Stored HTML/SVG is untrusted: no scripts, no forms, no same-origin access
ACTIVE_BLOB_CSP = "sandbox; default-src 'none'; img-src data:; style-src 'unsafe-inline'"
ACTIVE_BLOB_TYPES = ("text/html", "image/svg+xml", "application/xml", "text/xml")
HSTS = "max-age=63072000; includeSubDomains; preload"


def _is_blob(request: Request, response: Response) -> bool:
    return request.url.path.startswith(PUBLIC_PATH + "/") and response.status_code < 400


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers per response kind; headers a route set are kept.

    API responses get a deny-all CSP, DENY framing and no-store for JSON.
    Blobs under /public are meant to be embedded and opened inline: images,
    PDFs and media go out without CSP or framing limits, while markup types
    are sandboxed.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        headers = response.headers
        headers.setdefault("X-Content-Type-Options", "nosniff")
        headers.setdefault("Referrer-Policy", "no-referrer")

        content_type = headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
        if _is_blob(request, response):
            if content_type in ACTIVE_BLOB_TYPES:
                headers.setdefault("Content-Security-Policy", ACTIVE_BLOB_CSP)
        else:
            headers.setdefault("X-Frame-Options", "DENY")
            headers.setdefault("Content-Security-Policy", API_CSP)
            # JSON bodies carry fetched content
            if content_type == "application/json":
                headers.setdefault("Cache-Control", "no-store")

        if request.headers.get("X-Forwarded-Proto", "").lower() == "https":
            headers.setdefault("Strict-Transport-Security", HSTS)
        return response
