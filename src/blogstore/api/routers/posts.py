"""
API Routes for the Posts collection.

Endpoints
---------
- `GET /api/posts`: The full snapshot, most recent first.
- `GET /api/posts/{slug}`: One post by slug.
- `POST /api/posts`: Create or replace a post keyed by `slug`.

Route functions are plain `def`; FastAPI runs them on its threadpool, which
lets them block on the shared write queue without stalling the event loop.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from blogstore.api.deps import get_posts_store
from blogstore.api.schemas import ErrorResponse, PostListResponse, PostResponse
from blogstore.core.records import iso_timestamp
from blogstore.core.settings import get_logger
from blogstore.stores.posts import PostsStore

router = APIRouter(prefix="/api/posts", tags=["Posts"])
logger = get_logger("blogstore.api.posts")

PostsDep = Annotated[PostsStore, Depends(get_posts_store)]


@router.get("", response_model=PostListResponse, summary="List all posts")
def list_posts(store: PostsDep) -> PostListResponse:
    timestamp = iso_timestamp()
    logger.info("[GET] /api/posts - %s", timestamp)
    return PostListResponse(data=store.read(), timestamp=timestamp)


@router.get(
    "/{slug}",
    response_model=PostResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
    summary="Fetch a single post",
)
def get_post(slug: str, store: PostsDep) -> PostResponse | JSONResponse:
    logger.info("[GET] /api/posts/%s", slug)
    post = store.get(slug)
    if post is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(error="Post not found").model_dump(exclude_none=True),
        )
    return PostResponse(data=post)


@router.post(
    "",
    response_model=PostResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    summary="Create or update a post",
)
def upsert_post(store: PostsDep, payload: Annotated[Any, Body()] = None) -> PostResponse:
    """
    Insert a new post at the front, or replace the one sharing its `slug`.

    `InvalidRecord` (400) and `WriteFailed` (500) are mapped by the
    application-level exception handlers.
    """
    return PostResponse(data=store.upsert(payload))


__all__ = ["router"]
