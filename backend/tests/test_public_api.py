import base64
import hashlib

from fastapi.testclient import TestClient

from .conftest import build_app, make_settings
from .fakes import FakeGitHub

DATA = b"<svg xmlns='http://www.w3.org/2000/svg'/>"
KEY = hashlib.sha256(DATA).hexdigest()[:12] + ".svg"


def test_serves_stored_blob_with_headers(client, github):
    github.files[f"public/{KEY}"] = DATA
    r = client.get(f"/public/{KEY}")
    assert r.status_code == 200
    assert r.content == DATA
    assert r.headers["Content-Type"] == "image/svg+xml"
    assert r.headers["Content-Disposition"] == f'inline; filename="{KEY}"'
    assert r.headers["Cache-Control"] == "public, max-age=31536000, immutable"
    assert r.headers["Access-Control-Allow-Origin"] == "*"
    assert r.headers["X-Content-Type-Options"] == "nosniff"


def test_upload_then_read_back(client):
    up = client.post("/api/upload", json={"filename": "x.svg", "content": base64.b64encode(DATA).decode()})
    url = up.json()["url"]
    assert url.endswith(f"/public/{KEY}")
    r = client.get(url.replace("http://testserver", ""))
    assert r.status_code == 200
    assert r.content == DATA


def test_disallowed_extension_is_not_found(client, github):
    r = client.get("/public/deadbeef0123.exe")
    assert r.status_code == 404
    assert r.text == "Not found"
    assert github.requests == []


def test_malformed_names_are_not_found(client, github):
    for name in ("DEADBEEF0123.png", "deadbeef012.png", "deadbeef0123.png.bak", "anything"):
        r = client.get(f"/public/{name}")
        assert r.status_code == 404
        assert r.text == "Not found"
    assert github.requests == []


def test_store_miss_is_not_found(client, github):
    r = client.get("/public/0123456789ab.png")
    assert r.status_code == 404
    assert r.text == "Not found"
    assert len(github.requests) == 1


def test_invalid_key_is_404_even_without_configuration(site):
    app = build_app(make_settings(store_repo=None), FakeGitHub(), site, override_store=False)
    r = TestClient(app).get("/public/deadbeef0123.exe")
    assert r.status_code == 404
