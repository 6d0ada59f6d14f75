"""
Chat participant CRUD.
"""
from typing import List, Optional
import uuid
from sqlalchemy.orm import Session

from app.model.chat_participant import ChatParticipant
from app.crud.base import CRUDBase


class CRUDChatParticipant(CRUDBase[ChatParticipant, dict, dict]):
    def get_by_chat_and_user(
        self, db: Session, *, chat_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[ChatParticipant]:
        return (
            db.query(self.model)
            .filter(
                self.model.chat_id == chat_id,
                self.model.user_id == user_id,
            )
            .first()
        )

    def is_active_participant(self, db: Session, *, chat_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return (
            db.query(self.model.id)
            .filter(
                self.model.chat_id == chat_id,
                self.model.user_id == user_id,
                self.model.is_active.is_(True),
            )
            .first()
            is not None
        )

    def list_by_chat(self, db: Session, *, chat_id: uuid.UUID) -> List[ChatParticipant]:
        return db.query(self.model).filter(self.model.chat_id == chat_id).all()

    def list_active_by_chat(self, db: Session, *, chat_id: uuid.UUID) -> List[ChatParticipant]:
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id, self.model.is_active.is_(True))
            .all()
        )

    def list_active_by_user(self, db: Session, *, user_id: uuid.UUID) -> List[ChatParticipant]:
        return (
            db.query(self.model)
            .filter(self.model.user_id == user_id, self.model.is_active.is_(True))
            .all()
        )

    def delete_by_chat(self, db: Session, *, chat_id: uuid.UUID) -> int:
        """Bulk delete without commit; caller owns the transaction."""
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id)
            .delete(synchronize_session=False)
        )


chat_participant_crud = CRUDChatParticipant(ChatParticipant)
