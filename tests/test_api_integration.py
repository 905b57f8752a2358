# tests/test_api_integration.py
"""
Integration Tests for the blogstore HTTP API.

Focus
-----
These tests drive the FastAPI app through `TestClient` against temporary
collection files, checking the HTTP contract and the status-code mapping of
store errors (InvalidRecord -> 400, WriteFailed -> 500 with diagnostics).
"""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blogstore import __version__ as PKG_VERSION
from blogstore.api.app import create_app
from blogstore.core.errors import WriteFailed
from blogstore.core.settings import Settings
from blogstore.identity import derive_identity
from blogstore.storage.cache import SnapshotCache


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="test",
        posts_file=tmp_path / "posts.json",
        talk_file=tmp_path / "talk.json",
        avatar_base_url="https://avatars.test/?seed=",
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Fresh app per test; entering the client runs the startup preload."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


def test_health_check(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "environment": "test", "version": PKG_VERSION}


def test_startup_preload_creates_posts_file(client: TestClient, settings: Settings) -> None:
    assert json.loads(settings.posts_file.read_text(encoding="utf-8")) == []
    assert not settings.talk_file.exists()


def test_posts_roundtrip(client: TestClient) -> None:
    resp = client.post("/api/posts", json={"slug": "hello", "title": "Hello"})
    assert resp.status_code == 200
    assert resp.json() == {"data": {"slug": "hello", "title": "Hello"}}

    client.post("/api/posts", json={"slug": "world", "title": "World"})
    client.post("/api/posts", json={"slug": "hello", "title": "Hello v2"})

    listing = client.get("/api/posts").json()
    assert [p["title"] for p in listing["data"]] == ["World", "Hello v2"]
    assert listing["timestamp"].endswith("Z")

    single = client.get("/api/posts/hello")
    assert single.status_code == 200
    assert single.json()["data"]["title"] == "Hello v2"


def test_unknown_post_is_404(client: TestClient) -> None:
    resp = client.get("/api/posts/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Post not found"}


@pytest.mark.parametrize("body", [{"title": "no slug"}, {"slug": ""}, ["slug"]])
def test_post_without_slug_is_400(client: TestClient, body: object) -> None:
    resp = client.post("/api/posts", json=body)
    assert resp.status_code == 400
    assert "missing slug" in resp.json()["error"]


def test_post_write_failure_is_500_with_debug(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = client.app.state.stores.posts  # type: ignore[attr-defined]

    def fail(*args: object) -> None:
        raise WriteFailed("Failed to save post to disk", store.backend.diagnostics())

    monkeypatch.setattr(store, "_commit_upsert", fail)

    resp = client.post("/api/posts", json={"slug": "x"})
    assert resp.status_code == 500
    payload = resp.json()
    assert payload["error"] == "Failed to save post to disk"
    assert set(payload["debug"]) == {"path", "exists", "writable"}


def test_talk_flow(client: TestClient) -> None:
    headers = {"X-Forwarded-For": "203.0.113.9, 10.0.0.1"}
    resp = client.post("/api/talk", json={"content": "  hi all  "}, headers=headers)
    assert resp.status_code == 200
    message = resp.json()["data"]
    assert message["content"] == "hi all"
    assert message["user"] == derive_identity("203.0.113.9")
    assert message["avatar"].startswith("https://avatars.test/?seed=user_")

    listing = client.get("/api/talk").json()
    assert listing["data"] == [message]

    me = client.get("/api/talk/current-user", headers=headers).json()
    assert me == {"user": message["user"]}


@pytest.mark.parametrize("body", [{"content": "   "}, {}, {"content": 5}, "text"])
def test_talk_blank_content_is_400(client: TestClient, body: object) -> None:
    resp = client.post("/api/talk", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid message: content is required"
    assert client.get("/api/talk").json()["data"] == []


def test_talk_uses_memory_when_unwritable(
    client: TestClient, settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    talk = client.app.state.stores.talk  # type: ignore[attr-defined]
    monkeypatch.setattr(talk.disk, "can_write", lambda: False)
    monkeypatch.setattr(talk, "cache", SnapshotCache(ttl_ms=0))

    resp = client.post("/api/talk", json={"content": "hello"}, headers={"X-Real-IP": "1.2.3.4"})
    assert resp.status_code == 200
    assert resp.json()["data"]["user"] == derive_identity("1.2.3.4")
    assert not settings.talk_file.exists()

    assert [m["content"] for m in client.get("/api/talk").json()["data"]] == ["hello"]
