"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

Collection files default to paths relative to the working directory, i.e.
`posts.json` and `talk.json` beside the running process.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_AVATAR_BASE_URL = (
    "https://www.weavefox.cn/api/bolt/unsplash_image"
    "?keyword=avatar&width=100&height=100&random="
)


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `BLOGSTORE_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    posts_file : Path
        JSON array file backing the Posts collection.
    talk_file : Path
        JSON array file backing the Talk collection.
    host, port :
        Bind address for the uvicorn entry point.
    cache_ttl_ms : int
        Freshness window of each collection's read cache, in milliseconds.
    talk_capacity : int
        Maximum number of Talk messages kept; older ones are evicted first.
    avatar_base_url : str
        Prefix onto which the derived user id is appended to build avatar URLs.
    """

    environment: EnvName = Field(default="dev", alias="BLOGSTORE_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    posts_file: Path = Field(default=Path("posts.json"), alias="BLOGSTORE_POSTS_FILE")
    talk_file: Path = Field(default=Path("talk.json"), alias="BLOGSTORE_TALK_FILE")

    host: str = Field(default="0.0.0.0", alias="BLOGSTORE_HOST")
    port: int = Field(default=7894, alias="BLOGSTORE_PORT")

    cache_ttl_ms: int = Field(default=1000, ge=0, alias="BLOGSTORE_CACHE_TTL_MS")
    talk_capacity: int = Field(default=50, ge=1, alias="BLOGSTORE_TALK_CAPACITY")
    avatar_base_url: str = Field(
        default=DEFAULT_AVATAR_BASE_URL, alias="BLOGSTORE_AVATAR_BASE_URL"
    )

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("BLOGSTORE_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "blogstore") -> logging.Logger:
    """Return a process-global logger configured to `settings.log_level`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(settings.log_level_numeric())
    logger.propagate = False
    return logger
