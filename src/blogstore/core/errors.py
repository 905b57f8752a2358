"""Error taxonomy shared by the storage layer, the stores and the API.

Only two of these ever leave a collection store:

- :class:`InvalidRecord` - client data failed the required-field check (HTTP 400).
- :class:`WriteFailed` - a write had no viable fallback (HTTP 500 + diagnostics).

:class:`NotFound` and :class:`Corrupt` are returned by backends inside an
``Err`` and are always recovered locally by the store that receives them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class StoreError(Exception):
    """Base class for all blogstore storage errors."""


class InvalidRecord(StoreError, ValueError):
    """A client-supplied record is missing its identifying field."""


class LoadError(StoreError):
    """A snapshot could not be loaded from a backend."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class NotFound(LoadError):
    """The backing file does not exist yet."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "file not found")


class Corrupt(LoadError):
    """The backing file exists but is not a JSON array."""


class WriteFailed(StoreError):
    """A write raised an I/O fault and no fallback could absorb it.

    Attributes
    ----------
    diagnostics : dict[str, Any]
        Backend state at failure time: ``path``, ``exists``, ``writable``.
    """

    def __init__(self, message: str, diagnostics: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.diagnostics: dict[str, Any] = dict(diagnostics or {})


__all__ = ["StoreError", "InvalidRecord", "LoadError", "NotFound", "Corrupt", "WriteFailed"]
