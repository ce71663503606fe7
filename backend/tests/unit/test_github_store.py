import base64
import json

import httpx
import pytest

from blobrelay.config import StoreConfig
from blobrelay.errors import BlobExistsError, StoreCheckError, StoreError
from blobrelay.store.github import GitHubContentsStore

from ..fakes import FakeGitHub

KEY = "0123456789ab.png"


def _store(github: FakeGitHub) -> GitHubContentsStore:
    cfg = StoreConfig(repo="acme/blobs", token="tok", api_url="https://api.github.test", user_agent="relay-test")
    return GitHubContentsStore(cfg, transport=github.transport)


@pytest.mark.asyncio
async def test_exists_and_create():
    gh = FakeGitHub()
    store = _store(gh)
    assert await store.exists(KEY) is False
    await store.create(KEY, b"\x00\x01payload")
    assert gh.files == {f"public/{KEY}": b"\x00\x01payload"}
    assert await store.exists(KEY) is True

    put = gh.requests[1]
    assert put.method == "PUT"
    assert str(put.url) == f"https://api.github.test/repos/acme/blobs/contents/public/{KEY}"
    assert put.headers["authorization"] == "Bearer tok"
    assert put.headers["user-agent"] == "relay-test"
    body = json.loads(put.content)
    assert body["message"] == f"Upload {KEY}"
    assert base64.b64decode(body["content"]) == b"\x00\x01payload"


@pytest.mark.asyncio
async def test_create_conflict_is_reported_as_exists():
    gh = FakeGitHub()
    gh.files[f"public/{KEY}"] = b"old"
    with pytest.raises(BlobExistsError):
        await _store(gh).create(KEY, b"new")
    assert gh.files[f"public/{KEY}"] == b"old"


@pytest.mark.asyncio
async def test_create_422_without_exists_message_is_a_store_error():
    gh = FakeGitHub()
    gh.put_response = httpx.Response(422, json={"message": "Invalid request. content is not valid Base64"})
    with pytest.raises(StoreError) as exc:
        await _store(gh).create(KEY, b"x")
    assert not isinstance(exc.value, BlobExistsError)
    assert exc.value.message == "Invalid request. content is not valid Base64"


@pytest.mark.asyncio
async def test_create_failure_without_message_uses_generic_text():
    gh = FakeGitHub()
    gh.put_response = httpx.Response(500, text="<html>oops</html>")
    with pytest.raises(StoreError) as exc:
        await _store(gh).create(KEY, b"x")
    assert exc.value.message == "Upload failed"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_check_failure_carries_upstream_message():
    gh = FakeGitHub()
    gh.check_response = httpx.Response(401, json={"message": "Bad credentials"})
    with pytest.raises(StoreCheckError) as exc:
        await _store(gh).exists(KEY)
    assert exc.value.message == "Bad credentials"
    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_check_failure_without_body():
    gh = FakeGitHub()
    gh.check_response = httpx.Response(503, text="unavailable")
    with pytest.raises(StoreCheckError) as exc:
        await _store(gh).exists(KEY)
    assert exc.value.message == "Store check failed (503)"


@pytest.mark.asyncio
async def test_open_streams_raw_content():
    gh = FakeGitHub()
    gh.files[f"public/{KEY}"] = b"raw-bytes"
    blob = await _store(gh).open(KEY)
    assert blob is not None
    try:
        data = b"".join([c async for c in blob.chunks])
    finally:
        await blob.aclose()
    assert data == b"raw-bytes"
    assert gh.requests[-1].headers["accept"] == "application/vnd.github.raw"


@pytest.mark.asyncio
async def test_open_missing_returns_none():
    assert await _store(FakeGitHub()).open(KEY) is None
