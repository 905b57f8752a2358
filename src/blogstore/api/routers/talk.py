"""
API Routes for the Talk collection.

Endpoints
---------
- `GET /api/talk`: The latest messages, oldest first.
- `POST /api/talk`: Post a message; the sender is derived from the client address.
- `GET /api/talk/current-user`: The pseudonym this client posts under.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import ValidationError

from blogstore.api.deps import get_talk_store
from blogstore.api.schemas import (
    CurrentUserResponse,
    ErrorResponse,
    TalkListResponse,
    TalkMessageResponse,
    TalkRequest,
)
from blogstore.core.errors import InvalidRecord
from blogstore.core.records import TalkMessage, iso_timestamp
from blogstore.core.settings import get_logger
from blogstore.identity import client_address
from blogstore.stores.talk import TalkStore

router = APIRouter(prefix="/api/talk", tags=["Talk"])
logger = get_logger("blogstore.api.talk")

TalkDep = Annotated[TalkStore, Depends(get_talk_store)]


def _parse_request(payload: Any) -> TalkRequest:
    if not isinstance(payload, dict):
        return TalkRequest()
    try:
        return TalkRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRecord("Invalid message: content is required") from exc


@router.get("/current-user", response_model=CurrentUserResponse, summary="Current pseudonym")
def current_user(request: Request, store: TalkDep) -> CurrentUserResponse:
    return CurrentUserResponse(user=store.current_user(client_address(request)))


@router.get("", response_model=TalkListResponse, summary="List talk messages")
def list_messages(store: TalkDep) -> TalkListResponse:
    timestamp = iso_timestamp()
    logger.info("[GET] /api/talk - %s", timestamp)
    return TalkListResponse(data=store.read(), timestamp=timestamp)


@router.post(
    "",
    response_model=TalkMessageResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    summary="Post a talk message",
)
def post_message(
    request: Request,
    store: TalkDep,
    payload: Annotated[Any, Body()] = None,
) -> TalkMessageResponse:
    body = _parse_request(payload)
    record = store.append(body.content, client_address(request))
    return TalkMessageResponse(data=TalkMessage.model_validate(record))


__all__ = ["router"]
