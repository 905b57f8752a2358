"""
Persistence backends for collection snapshots.

A backend is the durable (or fallback) home of a collection. Two
implementations share the :class:`Backend` protocol:

- :class:`DiskBackend`: one pretty-printed UTF-8 JSON array per collection file.
- :class:`MemoryBackend`: a process-local list, used by the Talk store when its
  file cannot be written. Its content is lost on restart.

Contract
--------
- ``load()`` returns ``Ok(snapshot)`` or ``Err(LoadError)``; ``NotFound`` and
  ``Corrupt`` are the two expected error kinds.
- ``store(snapshot)`` returns ``Ok(None)`` or ``Err(OSError)``.
- ``can_write()`` is evaluated on every call and never cached, so a backend
  that becomes writable again is picked up on the next write.

Backends do not log and do not decide policy; the collection stores do.
"""

from __future__ import annotations

import copy
import json
import os
import threading
from pathlib import Path
from typing import Any, Protocol

from blogstore.core.errors import Corrupt, LoadError, NotFound
from blogstore.core.result import Result, err, ok

from .cache import Record, Snapshot


class Backend(Protocol):
    """Storage target a snapshot is loaded from and written to."""

    @property
    def label(self) -> str: ...

    def load(self) -> Result[Snapshot, LoadError]: ...

    def store(self, snapshot: Snapshot) -> Result[None, OSError]: ...

    def can_write(self) -> bool: ...


def can_write(path: Path) -> bool:
    """
    Check whether ``path`` can be written right now.

    An existing file must be writable by this process. For a missing file the
    nearest existing ancestor directory must be writable, since the file (and
    any missing parents) would be created there.
    """
    if path.exists():
        return path.is_file() and os.access(path, os.W_OK)

    parent = path.parent
    while not parent.exists():
        if parent.parent == parent:
            return False
        parent = parent.parent
    return parent.is_dir() and os.access(parent, os.W_OK | os.X_OK)


def encode_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot the way it is kept on disk (human-diffable)."""
    return json.dumps(snapshot, ensure_ascii=False, indent=2)


def decode_snapshot(raw: str, path: Path) -> Snapshot:
    """Parse file content into a snapshot; blank content counts as empty."""
    if not raw.strip():
        return []
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise Corrupt(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(payload, list):
        raise Corrupt(path, f"expected a JSON array, got {type(payload).__name__}")
    return payload


class DiskBackend:
    """
    JSON array file backend.

    Parameters
    ----------
    path:
        Location of the collection file.
    create_parents:
        When ``True``, missing parent directories are created before each write.
        Enabled for collections that also have a memory fallback.
    """

    def __init__(self, path: Path | str, *, create_parents: bool = False) -> None:
        self.path = Path(path)
        self.create_parents = create_parents

    @property
    def label(self) -> str:
        return str(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def can_write(self) -> bool:
        return can_write(self.path)

    def diagnostics(self) -> dict[str, Any]:
        """Describe the file state for error reports."""
        return {
            "path": str(self.path.resolve()),
            "exists": self.exists(),
            "writable": self.can_write(),
        }

    def load(self) -> Result[Snapshot, LoadError]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return err(NotFound(self.path))
        except UnicodeDecodeError as exc:
            return err(Corrupt(self.path, f"not UTF-8 ({exc.reason})"))
        except OSError as exc:
            return err(LoadError(self.path, f"unreadable ({exc.strerror or exc})"))

        try:
            return ok(decode_snapshot(raw, self.path))
        except Corrupt as exc:
            return err(exc)

    def store(self, snapshot: Snapshot) -> Result[None, OSError]:
        payload = encode_snapshot(snapshot)
        try:
            if self.create_parents:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            return err(exc)
        return ok(None)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"DiskBackend({str(self.path)!r})"


class MemoryBackend:
    """In-process fallback backend; always writable, never persisted."""

    def __init__(self, initial: Snapshot | None = None) -> None:
        self._records: list[Record] = copy.deepcopy(initial) if initial else []
        self._lock = threading.Lock()

    @property
    def label(self) -> str:
        return "memory"

    def can_write(self) -> bool:
        return True

    def load(self) -> Result[Snapshot, LoadError]:
        with self._lock:
            return ok(copy.deepcopy(self._records))

    def store(self, snapshot: Snapshot) -> Result[None, OSError]:
        records = copy.deepcopy(snapshot)
        with self._lock:
            self._records = records
        return ok(None)


__all__ = [
    "Backend",
    "DiskBackend",
    "MemoryBackend",
    "can_write",
    "encode_snapshot",
    "decode_snapshot",
]
