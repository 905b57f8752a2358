"""Collection stores exposed to the HTTP layer."""

from __future__ import annotations

from .posts import PostsStore
from .registry import StoreRegistry
from .talk import TalkStore

__all__ = ["PostsStore", "StoreRegistry", "TalkStore"]
