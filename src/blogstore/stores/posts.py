"""
Posts collection store.

Composes a :class:`SnapshotCache`, a :class:`DiskBackend` and the shared
:class:`WriteSerializer` into the two operations the HTTP layer uses:

- ``read()``: cached snapshot while fresh, otherwise reload from disk.
- ``upsert(record)``: replace the post with the same ``slug`` in place, or
  insert a new one at the front (most recent first).

Posts has no memory fallback. A failed disk write raises
:class:`WriteFailed` and the cache keeps the last durably written snapshot.

Recovery Rules (read)
---------------------
- Missing file: write an empty array through the write queue and cache it.
- Corrupt or unreadable file: keep serving the last good snapshot (or ``[]``).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from blogstore.core.errors import InvalidRecord, NotFound, WriteFailed
from blogstore.core.records import post_slug
from blogstore.core.settings import get_logger
from blogstore.storage.backend import DiskBackend
from blogstore.storage.cache import Record, Snapshot, SnapshotCache
from blogstore.storage.serializer import WriteSerializer

logger = get_logger("blogstore.posts")


class PostsStore:
    """Upsert-by-slug store over a single JSON file."""

    def __init__(
        self,
        backend: DiskBackend,
        serializer: WriteSerializer,
        cache: SnapshotCache | None = None,
    ) -> None:
        self.backend = backend
        self.serializer = serializer
        self.cache = cache or SnapshotCache()

    # ------------------------------- Read -----------------------------------

    def read(self, force: bool = False) -> Snapshot:
        """
        Return the current snapshot of the Posts collection.

        A missing file is created through the write queue, so it can never
        overwrite a post that a queued upsert has already saved.

        Parameters
        ----------
        force : bool
            Skip the freshness check and always reload from disk.
        """
        snapshot, fresh = self.cache.get()
        if snapshot is not None and fresh and not force:
            return snapshot
        return self._load(on_missing=lambda: self.serializer.run(self._initialize))

    def get(self, slug: str) -> Record | None:
        """Return the post with ``slug`` or ``None``."""
        for post in self.read():
            if post.get("slug") == slug:
                return post
        return None

    def _read_on_writer(self) -> Snapshot:
        """``read()`` for code already running on the writer thread."""
        snapshot, fresh = self.cache.get()
        if snapshot is not None and fresh:
            return snapshot
        return self._load(on_missing=self._initialize)

    def _load(self, on_missing: Callable[[], Snapshot]) -> Snapshot:
        result = self.backend.load()
        if result.is_ok():
            loaded = result.unwrap()
            self.cache.put(loaded)
            return loaded

        error = result.unwrap_err()
        if isinstance(error, NotFound):
            return on_missing()

        logger.warning("Failed to load posts from %s: %s", self.backend.label, error.reason)
        return self.cache.last() or []

    # ------------------------------- Write ----------------------------------

    def upsert(self, record: Any) -> Record:
        """
        Insert or replace a post keyed by its ``slug``.

        Raises
        ------
        InvalidRecord
            ``record`` is not an object or has no non-empty string ``slug``.
        WriteFailed
            The file could not be written; nothing was cached.
        """
        slug = post_slug(record)
        if slug is None:
            raise InvalidRecord("Invalid post data: missing slug")
        return self.serializer.run(self._commit_upsert, slug, dict(record))

    def _commit_upsert(self, slug: str, record: Record) -> Record:
        posts = self._read_on_writer()
        index = next((i for i, post in enumerate(posts) if post.get("slug") == slug), None)

        if index is None:
            logger.info("[CREATE] Post: %s", record.get("title", slug))
            posts.insert(0, record)
        else:
            logger.info("[UPDATE] Post: %s", record.get("title", slug))
            posts[index] = record

        self._store(posts)
        return record

    def _store(self, posts: Snapshot) -> None:
        try:
            result = self.backend.store(posts)
        except (TypeError, ValueError) as exc:
            raise WriteFailed(
                f"Failed to encode posts: {exc}", self.backend.diagnostics()
            ) from exc

        if result.is_err():
            exc = result.unwrap_err()
            logger.error("[ERROR] Failed to write posts file %s: %s", self.backend.label, exc)
            raise WriteFailed("Failed to save post to disk", self.backend.diagnostics()) from exc

        self.cache.put(posts)
        logger.info("[SUCCESS] Posts written to %s", self.backend.label)

    def _initialize(self) -> Snapshot:
        """
        Materialize a missing Posts file as an empty array.

        Runs on the writer thread. A write queued ahead of this one may have
        created the file already, in which case its content is loaded instead.
        """
        if self.backend.exists():
            return self._load(on_missing=list)

        result = self.backend.store([])
        if result.is_err():
            logger.error(
                "Could not create posts file %s: %s", self.backend.label, result.unwrap_err()
            )
            return self.cache.last() or []
        logger.info("Created empty posts file at %s", self.backend.label)
        self.cache.put([])
        return []


__all__ = ["PostsStore"]
