"""
Chat read status CRUD.
"""
from typing import Optional
import uuid
from sqlalchemy.orm import Session

from app.model.chat_read_status import ChatReadStatus
from app.crud.base import CRUDBase


class CRUDChatReadStatus(CRUDBase[ChatReadStatus, dict, dict]):
    def get_by_chat_and_user(
        self, db: Session, *, chat_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[ChatReadStatus]:
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id, self.model.user_id == user_id)
            .first()
        )

    def delete_by_chat(self, db: Session, *, chat_id: uuid.UUID) -> int:
        """Bulk delete without commit; caller owns the transaction."""
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id)
            .delete(synchronize_session=False)
        )


chat_read_status_crud = CRUDChatReadStatus(ChatReadStatus)
