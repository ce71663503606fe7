from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from blobrelay.config import Settings
from blobrelay.deps import get_blob_store, get_fetcher
from blobrelay.main import create_app
from blobrelay.services.remote_fetch import SecureFetcher
from blobrelay.store.github import GitHubContentsStore

from .fakes import FakeGitHub

Handler = Callable[[httpx.Request], httpx.Response]


def make_settings(**overrides) -> Settings:
    values = {
        "store_token": "test-token",
        "store_repo": "acme/blobs",
        "base_url": None,
        "cors_origins_raw": "*",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class RemoteSite:
    """Routes outbound fetches to a handler the test can swap."""

    def __init__(self) -> None:
        self.handler: Handler = lambda request: httpx.Response(404)
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        res = self.handler(request)
        if not isinstance(res, httpx.Response):
            res = await res
        return res


def build_app(settings: Settings, github: FakeGitHub, site: RemoteSite, *, override_store: bool = True) -> FastAPI:
    app = create_app(settings)
    app.dependency_overrides[get_fetcher] = lambda: SecureFetcher(
        settings.fetch_config(), transport=httpx.MockTransport(site)
    )
    if override_store:
        app.dependency_overrides[get_blob_store] = lambda: GitHubContentsStore(
            settings.store_config(), transport=github.transport
        )
    return app


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def site() -> RemoteSite:
    return RemoteSite()


@pytest.fixture
def app(settings: Settings, github: FakeGitHub, site: RemoteSite) -> FastAPI:
    return build_app(settings, github, site)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
