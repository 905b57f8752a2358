"""Tests for environment-driven configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from blogstore.core.settings import Settings, get_logger, load_settings


def test_defaults_match_service_contract(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("BLOGSTORE_POSTS_FILE", "BLOGSTORE_TALK_FILE", "BLOGSTORE_PORT"):
        monkeypatch.delenv(var, raising=False)
    cfg = Settings(_env_file=None)  # type: ignore[call-arg]
    assert cfg.posts_file == Path("posts.json")
    assert cfg.talk_file == Path("talk.json")
    assert cfg.port == 7894
    assert cfg.cache_ttl_ms == 1000
    assert cfg.talk_capacity == 50


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BLOGSTORE_ENV", "prod")
    monkeypatch.setenv("BLOGSTORE_TALK_FILE", str(tmp_path / "t.json"))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    load_settings.cache_clear()
    try:
        cfg = load_settings()
        assert cfg.environment == "prod"
        assert cfg.talk_file == tmp_path / "t.json"
        assert cfg.log_level_numeric() == logging.DEBUG
    finally:
        load_settings.cache_clear()


def test_get_logger_is_idempotent() -> None:
    a = get_logger("blogstore.test")
    b = get_logger("blogstore.test")
    assert a is b
    assert len(a.handlers) == 1
