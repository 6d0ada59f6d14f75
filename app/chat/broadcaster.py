"""
Message broadcaster: persists a chat message and pushes it to active participants.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.chat.connection_manager import (
    ConnectionManager,
    connection_manager,
    topic_destination,
    user_destination,
)
from app.core.exceptions import Forbidden, InvalidRequest
from app.crud import chat_participant_crud
from app.model.chat import Chat
from app.model.chat_message import ChatMessage
from app.utils import clock

logger = logging.getLogger(__name__)

MESSAGE_CREATED = "message_created"


def message_to_payload(msg: ChatMessage) -> Dict[str, Any]:
    """Serialize message for response and WebSocket push."""
    sender = msg.sender
    return {
        "id": str(msg.id),
        "chat_id": str(msg.chat_id),
        "sender_id": str(msg.sender_id),
        "sender_first_name": sender.first_name if sender else None,
        "sender_last_name": sender.last_name if sender else None,
        "content": msg.content,
        "created_at": msg.created_at.isoformat() if msg.created_at else None,
    }


def send(
    db: Session,
    chat: Chat,
    sender_id: uuid.UUID,
    content: str,
    publisher: Optional[ConnectionManager] = None,
) -> ChatMessage:
    """
    Persist a message and fan it out.

    Raises:
        Forbidden: sender is not an active participant (nothing is written)
        InvalidRequest: content is empty or whitespace only
    """
    if not chat_participant_crud.is_active_participant(db, chat_id=chat.id, user_id=sender_id):
        raise Forbidden(f"User {sender_id} is not an active participant in chat {chat.id}.")
    text = (content or "").strip()
    if not text:
        raise InvalidRequest("Message content cannot be empty or whitespace only.", code="EMPTY_CONTENT")

    now = clock.utcnow()
    msg = ChatMessage(chat_id=chat.id, sender_id=sender_id, content=text, created_at=now)
    db.add(msg)
    chat.last_message_at = now
    db.add(chat)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(msg)
    logger.info("[CHAT_SEND_MSG] Chat %s, sender %s, message %s. Broadcasting...", chat.id, sender_id, msg.id)

    publisher = publisher or connection_manager
    payload = message_to_payload(msg)
    for participant in chat_participant_crud.list_active_by_chat(db, chat_id=chat.id):
        publisher.publish(user_destination(participant.user_id, chat.id), MESSAGE_CREATED, payload)
    publisher.publish(topic_destination(chat.id), MESSAGE_CREATED, payload)
    return msg
