"""
Construction of the two collection stores.

Both stores share one :class:`WriteSerializer`, so writes to Posts and Talk
are ordered against each other. A :class:`StoreRegistry` owns that serializer
and is the only thing the API layer holds on to; there are no module-level
store globals.
"""

from __future__ import annotations

from dataclasses import dataclass

from blogstore.core.settings import Settings
from blogstore.storage.backend import DiskBackend, MemoryBackend
from blogstore.storage.cache import SnapshotCache
from blogstore.storage.serializer import WriteSerializer

from .posts import PostsStore
from .talk import TalkStore


@dataclass(slots=True)
class StoreRegistry:
    """The Posts and Talk stores plus the serializer they share."""

    posts: PostsStore
    talk: TalkStore
    serializer: WriteSerializer

    @classmethod
    def from_settings(cls, settings: Settings) -> StoreRegistry:
        """Build both stores from configured paths, TTL and capacity."""
        serializer = WriteSerializer()
        posts = PostsStore(
            backend=DiskBackend(settings.posts_file),
            serializer=serializer,
            cache=SnapshotCache(settings.cache_ttl_ms),
        )
        talk = TalkStore(
            disk=DiskBackend(settings.talk_file, create_parents=True),
            serializer=serializer,
            cache=SnapshotCache(settings.cache_ttl_ms),
            memory=MemoryBackend(),
            capacity=settings.talk_capacity,
            avatar_base_url=settings.avatar_base_url,
        )
        return cls(posts=posts, talk=talk, serializer=serializer)

    def preload(self) -> None:
        """Warm both caches so the first request never sees an empty collection."""
        self.posts.read(force=True)
        self.talk.read(force=True)

    def close(self) -> None:
        """Drain queued writes and stop the writer thread."""
        self.serializer.shutdown(wait=True)


__all__ = ["StoreRegistry"]
