"""
Chat membership: keeps a chat's participants aligned with its event's staff roster.

The initiator is always kept. Staff who leave the roster are deactivated, not
deleted, so their messages stay attributed. Staff who come back are reactivated.
"""
import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.crud import chat_crud, chat_participant_crud, event_crud
from app.core.exceptions import NotFound
from app.model.chat import Chat
from app.model.chat_participant import ChatParticipant
from app.model.user import User

logger = logging.getLogger(__name__)


def add_participant_if_missing(db: Session, chat: Chat, user_id: uuid.UUID) -> Optional[ChatParticipant]:
    """Stage an active participant row unless one (active or not) exists. Does not commit."""
    if chat_participant_crud.get_by_chat_and_user(db, chat_id=chat.id, user_id=user_id):
        return None
    participant = ChatParticipant(chat_id=chat.id, user_id=user_id, is_active=True)
    db.add(participant)
    db.flush()
    return participant


def synchronize(
    db: Session,
    chat: Chat,
    organizer: User,
    coowners: Iterable[User],
    reviewers: Iterable[User],
) -> bool:
    """
    Align chat participants with the current staff roster.

    expected = organizer + coowners + reviewers + chat initiator (by user id).
    Missing expected users are added, inactive expected users are reactivated,
    active participants outside the expected set (except the initiator) are
    deactivated. Commits once, only when something changed.

    Returns:
        True if any row was added or changed.
    """
    expected_ids = {organizer.id, chat.initiator_id}
    expected_ids.update(u.id for u in coowners)
    expected_ids.update(u.id for u in reviewers)

    current = {p.user_id: p for p in chat_participant_crud.list_by_chat(db, chat_id=chat.id)}

    added = []
    for user_id in expected_ids - set(current):
        db.add(ChatParticipant(chat_id=chat.id, user_id=user_id, is_active=True))
        added.append(user_id)

    reactivated = []
    deactivated = []
    for user_id, participant in current.items():
        if user_id in expected_ids:
            if not participant.is_active:
                participant.is_active = True
                reactivated.append(user_id)
        elif participant.is_active and user_id != chat.initiator_id:
            participant.is_active = False
            deactivated.append(user_id)

    if not (added or reactivated or deactivated):
        return False

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    for user_id in deactivated:
        logger.info("[CHAT_PARTICIPANT_UPDATE] Deactivated participant %s in chat %s", user_id, chat.id)
    logger.info(
        "[CHAT_PARTICIPANT_UPDATE] Chat %s: added=%d reactivated=%d deactivated=%d",
        chat.id, len(added), len(reactivated), len(deactivated),
    )
    return True


def synchronize_event(db: Session, event_id: uuid.UUID) -> int:
    """
    Synchronize every chat of an event with the event's staff.

    Raises NotFound when the event is missing. An event without chats is not
    an error. Returns the number of chats that changed.
    """
    event = event_crud.get_with_staff(db, event_id=event_id)
    if not event:
        raise NotFound("Event")
    chats = chat_crud.list_by_event(db, event_id=event_id)
    if not chats:
        return 0
    changed = 0
    for chat in chats:
        if synchronize(db, chat, event.organizer, event.coowners, event.reviewers):
            changed += 1
    return changed


def is_active_participant(db: Session, chat_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    return chat_participant_crud.is_active_participant(db, chat_id=chat_id, user_id=user_id)
