"""
Chat API: event chats and messages (REST). WebSocket in same module.
"""
import json
import logging
import uuid
from typing import List, Optional

import redis
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.chat import membership
from app.chat.connection_manager import (
    ConnectionManager,
    connection_manager,
    topic_destination,
    user_destination,
)
from app.core.database import SessionLocal, get_db
from app.core.dependencies import get_current_user_id
from app.core.exceptions import AppException
from app.schema.chat import (
    ChatListResponse,
    ChatResponse,
    MessageCreateBody,
    MessageListResponse,
    MessageResponse,
    ParticipantProfile,
    UnreadCountResponse,
)
from app.service.chat_service import ChatService
from app.session import get_session

router = APIRouter()
logger = logging.getLogger(__name__)

WS_UNAUTHORIZED = 4001


def get_publisher() -> ConnectionManager:
    return connection_manager


def get_chat_service(
    db: Session = Depends(get_db),
    publisher: ConnectionManager = Depends(get_publisher),
) -> ChatService:
    return ChatService(db, publisher=publisher)


# --- REST: Chats ---

@router.get("/event/{event_id}/find", response_model=Optional[ChatResponse])
async def find_chat_by_event(
    event_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """The caller's chat for an event, or null if none was opened yet."""
    return service.find_chat_by_event(event_id, user_id)


@router.post(
    "/event/{event_id}/message",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_event_message(
    event_id: uuid.UUID,
    body: MessageCreateBody,
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """Open (or reuse) the caller's chat with the event staff and post a message to it."""
    chat = service.get_or_create_chat(event_id, user_id)
    return service.send_message(chat.id, user_id, body.content)


@router.get("/my", response_model=ChatListResponse)
async def list_my_chats(
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """Chats the caller is an active participant of, most recent activity first."""
    return service.list_chats(user_id, page=page, limit=limit)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_chats_count(
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return UnreadCountResponse(count=service.unread_chats_count(user_id))


@router.get("/{chat_id}/messages", response_model=MessageListResponse)
async def list_messages(
    chat_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """Paginated messages, newest first. Marks the chat as read for the caller."""
    return service.get_messages(chat_id, user_id, page=page, limit=limit)


@router.post("/{chat_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_chat_read(
    chat_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.mark_read(chat_id, user_id)


@router.get("/{chat_id}/participants", response_model=List[ParticipantProfile])
async def list_participants(
    chat_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.list_participant_profiles(chat_id, user_id)


@router.get("/{chat_id}/details", response_model=ChatResponse)
async def get_chat_details(
    chat_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.get_chat_details(chat_id, user_id)


# --- WebSocket ---

def _session_user_id(token: Optional[str]) -> Optional[uuid.UUID]:
    if not token:
        return None
    try:
        session = get_session(token)
    except (redis.RedisError, RuntimeError) as e:
        logger.error("Session lookup failed for WebSocket: %s", e)
        return None
    if not session or not session.get("user_id"):
        return None
    return uuid.UUID(session["user_id"])


@router.websocket("/ws")
async def websocket_chat(
    websocket: WebSocket,
    token: Optional[str] = None,
):
    """
    WebSocket for real-time chat. Auth via query ?token=.

    Frames are JSON objects {"action", "chat_id", ...}:
        subscribe        private channel of the caller for the chat
        subscribe_topic  shared chat topic
        unsubscribe      drop both subscriptions for the chat
        send             post {"content"} to the chat
    """
    await websocket.accept()
    user_id = _session_user_id(token)
    if not user_id:
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    async def send_error(code: str, message: str) -> None:
        try:
            await websocket.send_text(
                json.dumps({"event": "error", "code": code, "message": message})
            )
        except Exception as e:
            logger.debug("Could not send error frame: %s", e)

    subscribed: set = set()

    async def handle_frame(data: str) -> None:
        try:
            obj = json.loads(data)
        except json.JSONDecodeError:
            await send_error("INVALID_JSON", "Request body must be valid JSON.")
            return
        if not isinstance(obj, dict):
            await send_error("INVALID_JSON", "Request body must be a JSON object.")
            return
        action = obj.get("action")
        chat_id_str = obj.get("chat_id")
        if not chat_id_str:
            await send_error("MISSING_CHAT_ID", "Missing required field: chat_id.")
            return
        try:
            chat_id = uuid.UUID(str(chat_id_str))
        except (ValueError, TypeError):
            await send_error("INVALID_CHAT_ID", "chat_id must be a valid UUID.")
            return

        db = SessionLocal()
        try:
            if not membership.is_active_participant(db, chat_id, user_id):
                await send_error("FORBIDDEN", "You are not an active participant of this chat.")
                return
            if action == "subscribe":
                destination = user_destination(user_id, chat_id)
                await connection_manager.subscribe(websocket, destination)
                subscribed.add(destination)
            elif action == "subscribe_topic":
                destination = topic_destination(chat_id)
                await connection_manager.subscribe(websocket, destination)
                subscribed.add(destination)
            elif action == "unsubscribe":
                for destination in (user_destination(user_id, chat_id), topic_destination(chat_id)):
                    await connection_manager.unsubscribe(websocket, destination)
                    subscribed.discard(destination)
            elif action == "send":
                # Same limits as the REST body
                try:
                    body = MessageCreateBody.model_validate({"content": obj.get("content")})
                except ValidationError as e:
                    await send_error("INVALID_REQUEST", f"content: {e.errors()[0]['msg']}")
                    return
                try:
                    ChatService(db, publisher=connection_manager).send_message(chat_id, user_id, body.content)
                except AppException as e:
                    await send_error(e.detail["code"], e.detail["message"])
            else:
                await send_error(
                    "UNKNOWN_ACTION",
                    "Expected action: subscribe, subscribe_topic, unsubscribe, or send.",
                )
        finally:
            db.close()

    try:
        while True:
            data = await websocket.receive_text()
            try:
                await handle_frame(data)
            except WebSocketDisconnect:
                raise
            except Exception:
                # Only a disconnect ends the loop
                logger.exception("WebSocket frame failed for user %s", user_id)
                await send_error("INTERNAL_ERROR", "Could not process the request.")
    except WebSocketDisconnect:
        logger.info("WebSocket closed for user %s", user_id)
    except Exception as e:
        logger.warning("WebSocket closed: %s", e)
    finally:
        await connection_manager.unsubscribe_all(websocket, subscribed)
