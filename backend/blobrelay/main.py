from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from blobrelay import __version__
from blobrelay.config import Settings
from blobrelay.errors import BlobNotFound, RelayError
from blobrelay.middleware import ObservabilityMiddleware, SecurityHeadersMiddleware
from blobrelay.routers.fetch_url import router as fetch_url_router
from blobrelay.routers.health import router as health_router
from blobrelay.routers.public import router as public_router
from blobrelay.routers.upload import router as upload_router
from blobrelay.schemas.relay import ErrorOut
from blobrelay.telemetry.logging import init_logging
from blobrelay.telemetry.metrics import router as metrics_router

log = logging.getLogger("blobrelay")


async def relay_error_handler(request: Request, exc: RelayError) -> Response:
    if isinstance(exc, BlobNotFound):
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorOut(error=exc.message).model_dump(),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    # Malformed JSON or wrong field types: report like any other client error
    log.debug("request validation failed: %s", [e.get("type") for e in exc.errors()])
    return JSONResponse(status_code=400, content=ErrorOut(error="Invalid request body").model_dump())


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    log.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=ErrorOut(error="Internal error").model_dump())


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    init_logging(settings.log_level)
    log.info("Loaded settings: %s", settings.debug_dump())

    app = FastAPI(title="blobrelay", version=__version__)
    app.state.settings = settings

    # Trust X-Forwarded-For/Proto from the reverse proxy
    app.add_middleware(ProxyHeadersMiddleware)
    app.add_middleware(ObservabilityMiddleware)

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=(["*"] if origins == ["*"] else origins),
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_exception_handler(RelayError, relay_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(metrics_router)  # /metrics
    app.include_router(fetch_url_router)
    app.include_router(upload_router)
    app.include_router(public_router)
    return app


app = create_app()
