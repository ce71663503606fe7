from __future__ import annotations

import os
import time
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response, status

from blobrelay import __version__
from blobrelay.config import Settings
from blobrelay.deps import get_settings

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _ok(v: object) -> bool:
    return (isinstance(v, dict) and bool(v.get("ok"))) or v == "ok"


def get_health_checks(settings: Settings) -> dict[str, Any]:
    checks: dict[str, Any] = {}
    if settings.store_configured:
        checks["store"] = {"ok": True, "repo": settings.store_repo}
    else:
        checks["store"] = {"error": "GITHUB_TOKEN / GITHUB_REPO not set"}
    return checks


@router.get("/health", status_code=status.HTTP_200_OK)
def health(settings: Annotated[Settings, Depends(get_settings)]) -> dict[str, Any]:
    checks = get_health_checks(settings)
    is_healthy = all(_ok(v) for v in checks.values())
    return {
        "status": "healthy" if is_healthy else "degraded",
        "version": os.getenv("GIT_SHA") or __version__,
        "uptime": time.time() - START_TIME,
        "checks": checks,
    }


@router.get("/live", status_code=status.HTTP_200_OK)
def live() -> dict[str, str]:
    return {"status": "alive"}


@router.get("/ready")
def ready(settings: Annotated[Settings, Depends(get_settings)], response: Response) -> dict[str, Any]:
    checks = get_health_checks(settings)
    if all(_ok(v) for v in checks.values()):
        return {"status": "ready"}
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "not_ready", "checks": checks}
