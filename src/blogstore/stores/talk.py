"""
Talk collection store: bounded, append-only chat messages.

Talk keeps at most ``capacity`` messages (50 by default) and evicts the oldest
first. It is the only collection with a degraded mode: when its file cannot
be written, snapshots are committed to an in-process :class:`MemoryBackend`
instead and the write still counts as a success.

Backend Selection
-----------------
The choice between disk and memory is re-made on every read and every write
from a fresh writability check, so the store returns to disk on its own once
the filesystem recovers.

- ``read()``: disk when the file exists and is writable, memory otherwise.
  A corrupt file also degrades to memory.
- ``append()``: disk when writable; on a refused check or an ``OSError`` the
  snapshot goes to memory. Only a fault that neither backend can absorb
  raises :class:`WriteFailed`.

Lost Data
---------
Snapshots committed to memory do not survive a restart, and once the disk
becomes writable again its (older) content wins. Both are accepted trade-offs
of the fallback, not errors.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from typing import Any

from blogstore.core.errors import InvalidRecord, WriteFailed
from blogstore.core.records import TalkMessage, iso_timestamp
from blogstore.core.settings import DEFAULT_AVATAR_BASE_URL, get_logger
from blogstore.identity import avatar_url, derive_identity
from blogstore.storage.backend import Backend, DiskBackend, MemoryBackend
from blogstore.storage.cache import Record, Snapshot, SnapshotCache
from blogstore.storage.serializer import WriteSerializer

logger = get_logger("blogstore.talk")

DEFAULT_CAPACITY = 50


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


def bounded_append(snapshot: Snapshot, record: Record, capacity: int) -> Snapshot:
    """Append ``record`` and drop from the front until ``len <= capacity``."""
    window: deque[Record] = deque(snapshot, maxlen=capacity)
    window.append(record)
    return list(window)


class TalkStore:
    """Append-with-eviction store with a disk-to-memory fallback."""

    def __init__(
        self,
        disk: DiskBackend,
        serializer: WriteSerializer,
        cache: SnapshotCache | None = None,
        memory: Backend | None = None,
        *,
        capacity: int = DEFAULT_CAPACITY,
        avatar_base_url: str = DEFAULT_AVATAR_BASE_URL,
        clock_ms: Callable[[], int] = _epoch_ms,
    ) -> None:
        self.disk = disk
        self.serializer = serializer
        self.cache = cache or SnapshotCache()
        self.memory: Backend = memory or MemoryBackend()
        self.capacity = capacity
        self.avatar_base_url = avatar_base_url
        self._clock_ms = clock_ms

    # ------------------------------- Read -----------------------------------

    def read(self, force: bool = False) -> Snapshot:
        """Return the current Talk snapshot from cache, disk or memory."""
        snapshot, fresh = self.cache.get()
        if snapshot is not None and fresh and not force:
            return snapshot

        if self.disk.exists() and self.disk.can_write():
            result = self.disk.load()
            if result.is_ok():
                loaded = result.unwrap()
                self.cache.put(loaded)
                return loaded
            logger.error(
                "Error reading talk file %s: %s", self.disk.label, result.unwrap_err().reason
            )
            return self.memory.load().unwrap()

        logger.info("[INFO] Using memory storage for talk data")
        return self.memory.load().unwrap()

    def current_user(self, network_address: str | None) -> str:
        return derive_identity(network_address)

    # ------------------------------- Write ----------------------------------

    def append(self, content: Any, network_address: str | None) -> Record:
        """
        Create a message from ``content`` and append it to the collection.

        Raises
        ------
        InvalidRecord
            ``content`` is missing or blank after trimming.
        WriteFailed
            Neither disk nor memory could take the new snapshot.
        """
        text = content.strip() if isinstance(content, str) else ""
        if not text:
            raise InvalidRecord("Invalid message: content is required")

        user = derive_identity(network_address)
        return self.serializer.run(self._commit_append, text, user)

    def _commit_append(self, text: str, user: str) -> Record:
        try:
            talks = self.read()
            message = TalkMessage(
                id=self._next_id(talks),
                time=iso_timestamp(),
                user=user,
                avatar=avatar_url(user, self.avatar_base_url),
                content=text,
            ).to_record()
            talks = bounded_append(talks, message, self.capacity)
            self._commit(talks)
        except Exception as exc:
            logger.error("[ERROR] Process talk message failed: %s", exc)
            raise WriteFailed("Failed to save message", self.disk.diagnostics()) from exc
        return message

    def _next_id(self, talks: Snapshot) -> int:
        """Epoch milliseconds, bumped past the newest id so ids never repeat."""
        newest = max((t["id"] for t in talks if isinstance(t.get("id"), int)), default=0)
        return max(self._clock_ms(), newest + 1)

    def _commit(self, talks: Snapshot) -> None:
        if self.disk.can_write():
            result = self.disk.store(talks)
            if result.is_ok():
                logger.info("[SUCCESS] Talk data written to %s", self.disk.label)
            else:
                logger.error(
                    "[ERROR] Failed to write talk file %s: %s",
                    self.disk.label,
                    result.unwrap_err(),
                )
                logger.info("[INFO] Falling back to memory storage for talk data")
                self.memory.store(talks)
        else:
            logger.info("[INFO] Using memory storage (filesystem not writable)")
            self.memory.store(talks)
        self.cache.put(talks)


__all__ = ["TalkStore", "bounded_append", "DEFAULT_CAPACITY"]
