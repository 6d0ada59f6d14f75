"""
Chat message CRUD.
"""
from datetime import datetime
from typing import List, Optional, Tuple
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from app.model.chat_message import ChatMessage
from app.crud.base import CRUDBase


class CRUDChatMessage(CRUDBase[ChatMessage, dict, dict]):
    def list_by_chat_paginated(
        self,
        db: Session,
        *,
        chat_id: uuid.UUID,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ChatMessage], int]:
        """List messages in a chat, newest first."""
        base = db.query(self.model).filter(self.model.chat_id == chat_id)
        total = base.with_entities(func.count(self.model.id)).scalar() or 0
        skip = (page - 1) * limit
        items = (
            base.order_by(desc(self.model.created_at), desc(self.model.id))
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def get_last(self, db: Session, *, chat_id: uuid.UUID) -> Optional[ChatMessage]:
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id)
            .order_by(desc(self.model.created_at), desc(self.model.id))
            .first()
        )

    def count_unread(
        self,
        db: Session,
        *,
        chat_id: uuid.UUID,
        after: datetime,
        exclude_sender_id: uuid.UUID,
    ) -> int:
        """Messages strictly after `after` that someone other than the reader sent."""
        return (
            db.query(func.count(self.model.id))
            .filter(
                self.model.chat_id == chat_id,
                self.model.created_at > after,
                self.model.sender_id != exclude_sender_id,
            )
            .scalar()
            or 0
        )

    def delete_by_chat(self, db: Session, *, chat_id: uuid.UUID) -> int:
        """Bulk delete without commit; caller owns the transaction."""
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id)
            .delete(synchronize_session=False)
        )


chat_message_crud = CRUDChatMessage(ChatMessage)
