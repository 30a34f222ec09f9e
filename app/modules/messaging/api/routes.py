"""HTTP endpoints for sending messages and describing channel types."""

import structlog
from fastapi import APIRouter, HTTPException, Query, Request

from infrastructure.logging import bind_request_context
from modules.messaging.api.dependencies import MessageServiceDep
from modules.messaging.api.schemas import (
    ChannelTypeResponse,
    MessageResponse,
    SendMessageRequest,
)
from modules.messaging.core.service import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from modules.messaging.domain.errors import (
    InvalidRequestError,
    MessageNotFoundError,
    PersistenceError,
)

logger = structlog.get_logger()

router = APIRouter(tags=["Messages"])


@router.post("/messages", status_code=201, response_model=MessageResponse)
def send_message(
    request: Request,
    body: SendMessageRequest,
    service: MessageServiceDep,
) -> MessageResponse:
    """Dispatch a message to the requested channels.

    A 201 response does not mean every channel succeeded: inspect ``status``
    and the per-channel ``results``.
    """
    with bind_request_context(
        correlation_id=request.headers.get("x-correlation-id"),
        request_path=request.url.path,
        request_method=request.method,
    ):
        try:
            message = service.send_message(
                body.channel_ids,
                body.variables,
                body.overrides(),
                timeout_ms=body.timeout_ms,
            )
        except InvalidRequestError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except PersistenceError as exc:
            logger.error("send_message_persistence_failed", error=str(exc))
            raise HTTPException(
                status_code=503, detail="Message could not be stored"
            ) from exc
    return MessageResponse.from_domain(message)


@router.get("/messages", response_model=list[MessageResponse])
def list_messages(
    service: MessageServiceDep,
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
) -> list[MessageResponse]:
    """Most recently created messages first."""
    return [MessageResponse.from_domain(message) for message in service.list_messages(limit)]


@router.get("/messages/{message_id}", response_model=MessageResponse)
def get_message(message_id: str, service: MessageServiceDep) -> MessageResponse:
    try:
        message = service.get_message(message_id)
    except MessageNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MessageResponse.from_domain(message)


@router.get("/channel-types", response_model=list[ChannelTypeResponse])
def list_channel_types(service: MessageServiceDep) -> list[ChannelTypeResponse]:
    return [
        ChannelTypeResponse.model_validate(description)
        for description in service.list_channel_types()
    ]
