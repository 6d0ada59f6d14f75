"""
Read-state tracking: last-read checkpoints and unread counts per (chat, user).
"""
import logging
import uuid

from sqlalchemy.orm import Session

from app.crud import chat_message_crud, chat_participant_crud, chat_read_status_crud
from app.model.chat_read_status import ChatReadStatus
from app.utils import clock

logger = logging.getLogger(__name__)


def unread_count(db: Session, chat_id: uuid.UUID, user_id: uuid.UUID) -> int:
    """Messages from others newer than the user's checkpoint (epoch if never read)."""
    status = chat_read_status_crud.get_by_chat_and_user(db, chat_id=chat_id, user_id=user_id)
    last_read = status.last_read_at if status else clock.EPOCH
    return chat_message_crud.count_unread(
        db, chat_id=chat_id, after=last_read, exclude_sender_id=user_id
    )


def mark_read(db: Session, chat_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """
    Move the user's checkpoint to now.

    No-op for anyone who is not an active participant. Returns whether the
    checkpoint was written.
    """
    if not chat_participant_crud.is_active_participant(db, chat_id=chat_id, user_id=user_id):
        logger.debug("mark_read skipped: %s is not active in chat %s", user_id, chat_id)
        return False
    now = clock.utcnow()
    status = chat_read_status_crud.get_by_chat_and_user(db, chat_id=chat_id, user_id=user_id)
    if status is None:
        status = ChatReadStatus(chat_id=chat_id, user_id=user_id, last_read_at=now)
    else:
        status.last_read_at = now
    db.add(status)
    db.commit()
    return True


def unread_chat_count(db: Session, user_id: uuid.UUID) -> int:
    """Number of the user's active chats with at least one unread message."""
    memberships = chat_participant_crud.list_active_by_user(db, user_id=user_id)
    return sum(1 for m in memberships if unread_count(db, m.chat_id, user_id) > 0)
