"""Storage primitives shared by the collection stores."""

from __future__ import annotations

from .backend import Backend, DiskBackend, MemoryBackend, can_write
from .cache import CacheEntry, Record, Snapshot, SnapshotCache
from .serializer import WriteSerializer

__all__ = [
    "Backend",
    "CacheEntry",
    "DiskBackend",
    "MemoryBackend",
    "Record",
    "Snapshot",
    "SnapshotCache",
    "WriteSerializer",
    "can_write",
]
