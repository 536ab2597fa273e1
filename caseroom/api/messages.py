"""Message and mention API endpoints."""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from caseroom.api.deps import (
    get_chat_service,
    get_reconciler,
    get_room_service,
    participant_key,
    to_http_error,
)
from caseroom.chat.service import ChatService
from caseroom.errors import CaseRoomError
from caseroom.mentions.reconciler import MentionReconciler
from caseroom.mentions.schemas import AnnotatedMessage, MentionRecord, UnansweredSummary
from caseroom.models.message import Message
from caseroom.rooms.service import RoomService

router = APIRouter(prefix="/rooms/{room_id}", tags=["messages"])


class MessageCreate(BaseModel):
    """Message or reply body."""

    text: str = Field(description="Message text; @name mentions a participant")


class UnansweredResponse(BaseModel):
    """Unanswered mentions in a room."""

    mentions: list[MentionRecord]
    summary: UnansweredSummary


@router.get("/messages", response_model=list[AnnotatedMessage])
async def list_messages(
    room_id: str,
    rooms: RoomService = Depends(get_room_service),
    chat: ChatService = Depends(get_chat_service),
) -> list[AnnotatedMessage]:
    """Room messages, oldest first, with mention and reply state."""
    try:
        await rooms.get_room(room_id)
        return await chat.annotated_messages(room_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.post("/messages", response_model=Message, status_code=201)
async def send_message(
    room_id: str,
    request: MessageCreate,
    current_user: str | None = Depends(participant_key),
    rooms: RoomService = Depends(get_room_service),
    chat: ChatService = Depends(get_chat_service),
) -> Message:
    """Post a message as the calling participant."""
    try:
        context = await rooms.context_for(room_id, current_user)
        return await chat.send_message(context, request.text)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.post("/messages/{message_id}/reply", response_model=Message, status_code=201)
async def reply_to_mention(
    room_id: str,
    message_id: str,
    request: MessageCreate,
    current_user: str | None = Depends(participant_key),
    rooms: RoomService = Depends(get_room_service),
    chat: ChatService = Depends(get_chat_service),
) -> Message:
    """Answer a message that mentions the caller."""
    try:
        context = await rooms.context_for(room_id, current_user)
        return await chat.reply_to_mention(context, message_id, request.text)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.delete("/messages/{message_id}", status_code=204)
async def delete_message(
    room_id: str,
    message_id: str,
    current_user: str | None = Depends(participant_key),
    rooms: RoomService = Depends(get_room_service),
    chat: ChatService = Depends(get_chat_service),
) -> Response:
    """Delete one of the caller's messages."""
    try:
        context = await rooms.context_for(room_id, current_user)
        await chat.delete_message(context, message_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return Response(status_code=204)


@router.get("/mentions/unanswered", response_model=UnansweredResponse)
async def unanswered_mentions(
    room_id: str,
    rooms: RoomService = Depends(get_room_service),
    reconciler: MentionReconciler = Depends(get_reconciler),
) -> UnansweredResponse:
    """Messages still waiting on a reply, with per-name counts."""
    try:
        await rooms.get_room(room_id)
        mentions = await reconciler.refresh(room_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return UnansweredResponse(mentions=mentions, summary=reconciler.summary(room_id))


@router.get("/participants/{participant_name}/mentions", response_model=list[Message])
async def participant_mentions(
    room_id: str,
    participant_name: str,
    rooms: RoomService = Depends(get_room_service),
    chat: ChatService = Depends(get_chat_service),
) -> list[Message]:
    """Messages mentioning a participant."""
    try:
        await rooms.get_room(room_id)
        return await chat.mentions_for(room_id, participant_name)
    except CaseRoomError as e:
        raise to_http_error(e) from e
