"""
Request and response shapes for the HTTP API.

Posts travel as free-form JSON objects, so their envelopes type ``data`` as a
plain dict. Talk messages are validated against :class:`TalkMessage`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from blogstore.core.records import TalkMessage


class TalkRequest(BaseModel):
    """Body of ``POST /api/talk``; only ``content`` is read."""

    content: str | None = None


class PostListResponse(BaseModel):
    data: list[dict[str, Any]] = Field(default_factory=list)
    timestamp: str


class PostResponse(BaseModel):
    data: dict[str, Any]


class TalkListResponse(BaseModel):
    data: list[dict[str, Any]] = Field(default_factory=list)
    timestamp: str


class TalkMessageResponse(BaseModel):
    data: TalkMessage


class CurrentUserResponse(BaseModel):
    user: str


class ErrorResponse(BaseModel):
    """Error envelope; ``debug`` carries backend diagnostics on write failures."""

    error: str
    debug: dict[str, Any] | None = None


__all__ = [
    "CurrentUserResponse",
    "ErrorResponse",
    "PostListResponse",
    "PostResponse",
    "TalkListResponse",
    "TalkMessageResponse",
    "TalkRequest",
]
