"""
Chat CRUD.
"""
from typing import List, Optional, Tuple
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from app.model.chat import Chat
from app.model.chat_participant import ChatParticipant
from app.crud.base import CRUDBase


class CRUDChat(CRUDBase[Chat, dict, dict]):
    def get_by_id(self, db: Session, *, chat_id: uuid.UUID) -> Optional[Chat]:
        return db.query(self.model).filter(self.model.id == chat_id).first()

    def get_by_event_and_initiator(
        self, db: Session, *, event_id: uuid.UUID, initiator_id: uuid.UUID
    ) -> Optional[Chat]:
        return (
            db.query(self.model)
            .filter(
                self.model.event_id == event_id,
                self.model.initiator_id == initiator_id,
            )
            .first()
        )

    def list_by_event(self, db: Session, *, event_id: uuid.UUID) -> List[Chat]:
        return db.query(self.model).filter(self.model.event_id == event_id).all()

    def list_for_active_participant(
        self,
        db: Session,
        *,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Chat], int]:
        """Chats the user actively participates in, newest activity first."""
        subq = (
            db.query(ChatParticipant.chat_id)
            .filter(
                ChatParticipant.user_id == user_id,
                ChatParticipant.is_active.is_(True),
            )
        )
        base = db.query(self.model).filter(self.model.id.in_(subq))
        total = base.with_entities(func.count(self.model.id)).scalar() or 0
        skip = (page - 1) * limit
        # Chats without messages (last_message_at NULL) sort last
        items = (
            base.order_by(
                self.model.last_message_at.is_(None),
                desc(self.model.last_message_at),
                desc(self.model.created_at),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total


chat_crud = CRUDChat(Chat)
