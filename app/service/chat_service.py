"""
Chat service: request-level chat operations for event chats.

Every method takes the acting user's id explicitly. Membership, read state and
delivery live in app.chat; this class resolves entities, enforces access and
shapes responses.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.aws.s3 import generate_presigned_url
from app.chat import broadcaster, membership, read_state
from app.chat.connection_manager import ConnectionManager
from app.core.exceptions import Forbidden, NotFound
from app.crud import (
    chat_crud,
    chat_message_crud,
    chat_participant_crud,
    chat_read_status_crud,
    event_crud,
    user_crud,
)
from app.model.chat import Chat
from app.model.chat_message import ChatMessage
from app.model.event import Event
from app.model.user import User
from app.schema.chat import (
    ChatListResponse,
    ChatResponse,
    MessageListResponse,
    MessageResponse,
    ParticipantProfile,
)
from app.service.user_service import UserService
from app.utils import clock

logger = logging.getLogger(__name__)


def _message_response(msg: ChatMessage) -> MessageResponse:
    return MessageResponse(**broadcaster.message_to_payload(msg))


def _total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit if total else 0


class ChatService:
    """Event chats: creation, messaging, history, read state, participants."""

    def __init__(self, db: Session, publisher: Optional[ConnectionManager] = None):
        self.db = db
        self.publisher = publisher

    # --- lookups ---

    def _get_user(self, user_id: uuid.UUID) -> User:
        user = user_crud.get(self.db, user_id)
        if not user:
            raise NotFound("User")
        return user

    def _get_event(self, event_id: uuid.UUID) -> Event:
        event = event_crud.get_with_staff(self.db, event_id=event_id)
        if not event:
            raise NotFound("Event")
        return event

    def _get_chat(self, chat_id: uuid.UUID) -> Chat:
        chat = chat_crud.get_by_id(self.db, chat_id=chat_id)
        if not chat:
            raise NotFound("Chat")
        return chat

    def _require_participant(self, chat: Chat, user_id: uuid.UUID) -> None:
        if not membership.is_active_participant(self.db, chat.id, user_id):
            raise Forbidden(f"User {user_id} is not an active participant in chat {chat.id}.")

    def _chat_response(self, chat: Chat, unread: int, only_active: bool = False) -> ChatResponse:
        if only_active:
            participants = chat_participant_crud.list_active_by_chat(self.db, chat_id=chat.id)
        else:
            participants = chat_participant_crud.list_by_chat(self.db, chat_id=chat.id)
        last = chat_message_crud.get_last(self.db, chat_id=chat.id)
        return ChatResponse(
            id=chat.id,
            event_id=chat.event_id,
            event_title=chat.event.title,
            initiator_id=chat.initiator_id,
            initiator_first_name=chat.initiator.first_name,
            initiator_last_name=chat.initiator.last_name,
            participant_ids=list(dict.fromkeys(p.user_id for p in participants)),
            last_message=_message_response(last) if last else None,
            last_message_at=chat.last_message_at,
            unread_count=unread,
        )

    # --- chats ---

    def get_or_create_chat(self, event_id: uuid.UUID, user_id: uuid.UUID) -> ChatResponse:
        """
        The caller's chat for an event, created on first access.

        A new chat gets the caller as initiator plus the event's current staff,
        and starts out read for the initiator.
        """
        self._get_user(user_id)
        event = self._get_event(event_id)

        chat = chat_crud.get_by_event_and_initiator(self.db, event_id=event_id, initiator_id=user_id)
        if chat:
            return self._chat_response(chat, read_state.unread_count(self.db, chat.id, user_id))

        chat = Chat(event_id=event_id, initiator_id=user_id, last_message_at=clock.utcnow())
        self.db.add(chat)
        try:
            self.db.flush()
        except IntegrityError:
            # Lost a creation race for the same (event, initiator)
            self.db.rollback()
            chat = chat_crud.get_by_event_and_initiator(self.db, event_id=event_id, initiator_id=user_id)
            return self._chat_response(chat, read_state.unread_count(self.db, chat.id, user_id))

        membership.add_participant_if_missing(self.db, chat, user_id)
        membership.synchronize(self.db, chat, event.organizer, event.coowners, event.reviewers)
        self.db.commit()
        read_state.mark_read(self.db, chat.id, user_id)
        logger.info("[CHAT_CREATED] Chat %s for event %s, initiator %s", chat.id, event_id, user_id)
        return self._chat_response(chat, 0)

    def find_chat_by_event(self, event_id: uuid.UUID, user_id: uuid.UUID) -> Optional[ChatResponse]:
        self._get_user(user_id)
        self._get_event(event_id)
        chat = chat_crud.get_by_event_and_initiator(self.db, event_id=event_id, initiator_id=user_id)
        if not chat:
            return None
        return self._chat_response(chat, read_state.unread_count(self.db, chat.id, user_id))

    def list_chats(self, user_id: uuid.UUID, page: int = 1, limit: int = 10) -> ChatListResponse:
        self._get_user(user_id)
        chats, total = chat_crud.list_for_active_participant(self.db, user_id=user_id, page=page, limit=limit)
        items = [
            self._chat_response(chat, read_state.unread_count(self.db, chat.id, user_id))
            for chat in chats
        ]
        return ChatListResponse(
            items=items, page=page, limit=limit, total=total, total_pages=_total_pages(total, limit)
        )

    def get_chat_details(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> ChatResponse:
        """Chat with active participant ids only. Forbidden for non-participants."""
        self._get_user(user_id)
        chat = self._get_chat(chat_id)
        self._require_participant(chat, user_id)
        return self._chat_response(
            chat, read_state.unread_count(self.db, chat.id, user_id), only_active=True
        )

    # --- messages ---

    def send_message(self, chat_id: uuid.UUID, user_id: uuid.UUID, content: str) -> MessageResponse:
        self._get_user(user_id)
        chat = self._get_chat(chat_id)
        msg = broadcaster.send(self.db, chat, user_id, content, publisher=self.publisher)
        return _message_response(msg)

    def get_messages(
        self, chat_id: uuid.UUID, user_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> MessageListResponse:
        """Newest-first history page. Reading history marks the chat read."""
        self._get_user(user_id)
        chat = self._get_chat(chat_id)
        self._require_participant(chat, user_id)
        read_state.mark_read(self.db, chat.id, user_id)
        items, total = chat_message_crud.list_by_chat_paginated(
            self.db, chat_id=chat.id, page=page, limit=limit
        )
        return MessageListResponse(
            items=[_message_response(m) for m in items],
            page=page,
            limit=limit,
            total=total,
            total_pages=_total_pages(total, limit),
        )

    # --- read state / membership ---

    def is_participant(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        chat = self._get_chat(chat_id)
        return membership.is_active_participant(self.db, chat.id, user_id)

    def mark_read(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> None:
        chat = self._get_chat(chat_id)
        read_state.mark_read(self.db, chat.id, user_id)

    def unread_chats_count(self, user_id: uuid.UUID) -> int:
        return read_state.unread_chat_count(self.db, user_id)

    def list_participant_profiles(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> List[ParticipantProfile]:
        """All participants, active and former, with their active flag."""
        self._get_user(user_id)
        chat = self._get_chat(chat_id)
        self._require_participant(chat, user_id)
        users = UserService(self.db)
        profiles = []
        for participant in chat_participant_crud.list_by_chat(self.db, chat_id=chat.id):
            summary = users.profile_summary(participant.user_id)
            profiles.append(
                ParticipantProfile(
                    user_id=participant.user_id,
                    email=summary["email"],
                    first_name=summary["first_name"],
                    last_name=summary["last_name"],
                    avatar_url=generate_presigned_url(summary["avatar_key"]),
                    is_active=participant.is_active,
                )
            )
        return profiles

    def synchronize_event(self, event_id: uuid.UUID) -> int:
        return membership.synchronize_event(self.db, event_id)

    # --- deletion ---

    def delete_chat(self, chat: Chat) -> None:
        """Delete messages, read statuses, participants, then the chat row. One commit."""
        chat_id = chat.id
        try:
            messages = chat_message_crud.delete_by_chat(self.db, chat_id=chat_id)
            logger.info("Deleted %d messages for chat %s", messages, chat_id)
            statuses = chat_read_status_crud.delete_by_chat(self.db, chat_id=chat_id)
            logger.info("Deleted %d read statuses for chat %s", statuses, chat_id)
            participants = chat_participant_crud.delete_by_chat(self.db, chat_id=chat_id)
            logger.info("Deleted %d participants for chat %s", participants, chat_id)
            self.db.query(Chat).filter(Chat.id == chat_id).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to delete chat %s", chat_id)
            raise
        logger.info("Chat %s deleted", chat_id)

    def delete_chats_for_event(self, event_id: uuid.UUID) -> int:
        chats = chat_crud.list_by_event(self.db, event_id=event_id)
        for chat in chats:
            self.delete_chat(chat)
        return len(chats)
