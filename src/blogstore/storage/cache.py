"""
Snapshot cache with a bounded freshness window.

Each collection store owns exactly one :class:`SnapshotCache`. It holds the
most recently loaded (or written) snapshot of that collection together with
the monotonic time it was stored. It is not a general-purpose cache: there is
a single entry, and the only expiry is the TTL.

Design Notes
------------
- **Whole-entry replacement**: ``put`` swaps in a new frozen :class:`CacheEntry`;
  entries are never mutated in place.
- **Deep copies out**: ``get`` and ``last`` hand out deep copies so callers can
  mutate the list or its records without touching the cached snapshot.
- **Injectable clock**: defaults to :func:`time.monotonic`; tests pass a fake.
"""

from __future__ import annotations

import copy
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

Record = dict[str, Any]
Snapshot = list[Record]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Immutable (snapshot, loaded_at) pair.

    Attributes
    ----------
    records : tuple[Record, ...]
        The cached snapshot, in collection order.
    loaded_at : float
        Clock reading (seconds) when the entry was stored.
    """

    records: tuple[Record, ...]
    loaded_at: float

    def age_ms(self, now: float) -> float:
        return (now - self.loaded_at) * 1000.0


class SnapshotCache:
    """Single-entry snapshot cache for one collection."""

    __slots__ = ("_ttl_ms", "_clock", "_entry", "_lock")

    def __init__(self, ttl_ms: int = 1000, clock: Callable[[], float] | None = None) -> None:
        self._ttl_ms = ttl_ms
        self._clock: Callable[[], float] = clock or time.monotonic
        self._entry: CacheEntry | None = None
        self._lock = threading.Lock()

    def get(self) -> tuple[Snapshot | None, bool]:
        """
        Return ``(snapshot, is_fresh)``.

        ``snapshot`` is ``None`` before the first ``put``. An entry is fresh
        while its age is strictly below the TTL.
        """
        with self._lock:
            entry = self._entry
        if entry is None:
            return None, False
        fresh = entry.age_ms(self._clock()) < self._ttl_ms
        return copy.deepcopy(list(entry.records)), fresh

    def last(self) -> Snapshot | None:
        """Return the last stored snapshot regardless of age."""
        with self._lock:
            entry = self._entry
        return None if entry is None else copy.deepcopy(list(entry.records))

    def put(self, snapshot: Sequence[Record]) -> None:
        """Replace the entry with ``snapshot`` and restamp it to now."""
        entry = CacheEntry(records=tuple(copy.deepcopy(list(snapshot))), loaded_at=self._clock())
        with self._lock:
            self._entry = entry


__all__ = ["CacheEntry", "SnapshotCache", "Record", "Snapshot"]
