"""Record contracts for the two collections.

Posts are opaque JSON objects: only ``slug`` is interpreted, everything else
passes through untouched, so there is no model for them beyond
:func:`post_slug`.

Talk messages are built by the server and never edited afterwards, which is
why :class:`TalkMessage` is frozen.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def iso_timestamp(moment: datetime | None = None) -> str:
    """Return a UTC ISO-8601 string with millisecond precision and a ``Z`` suffix."""
    moment = (moment or datetime.now(UTC)).astimezone(UTC)
    millis = moment.microsecond // 1000
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}Z"


def post_slug(record: Any) -> str | None:
    """Return the record's ``slug`` if it is a non-empty string, else ``None``."""
    if not isinstance(record, dict):
        return None
    slug = record.get("slug")
    if isinstance(slug, str) and slug:
        return slug
    return None


class TalkMessage(BaseModel):
    """One immutable chat-style message."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Creation time in epoch milliseconds; unique per process")
    time: str = Field(description="UTC ISO-8601 creation timestamp")
    user: str = Field(description="Pseudonym derived from the sender's address")
    avatar: str = Field(description="Avatar URL derived from `user`")
    content: str = Field(min_length=1, description="Trimmed message text")

    @field_validator("content")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


__all__ = ["TalkMessage", "iso_timestamp", "post_slug"]
