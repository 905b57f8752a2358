"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from blogstore.stores.posts import PostsStore
from blogstore.stores.registry import StoreRegistry
from blogstore.stores.talk import TalkStore


def get_stores(request: Request) -> StoreRegistry:
    """Return the registry created by the application factory."""
    stores: StoreRegistry = request.app.state.stores
    return stores


def get_posts_store(request: Request) -> PostsStore:
    return get_stores(request).posts


def get_talk_store(request: Request) -> TalkStore:
    return get_stores(request).talk


__all__ = ["get_stores", "get_posts_store", "get_talk_store"]
