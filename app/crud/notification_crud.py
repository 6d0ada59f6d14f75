"""
Notification CRUD.
"""
from typing import List, Tuple
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from app.model.notification import Notification
from app.crud.base import CRUDBase


class CRUDNotification(CRUDBase[Notification, dict, dict]):
    def list_by_user_paginated(
        self, db: Session, *, user_id: uuid.UUID, page: int = 1, limit: int = 10
    ) -> Tuple[List[Notification], int]:
        base = db.query(self.model).filter(self.model.user_id == user_id)
        total = base.with_entities(func.count(self.model.id)).scalar() or 0
        items = (
            base.order_by(desc(self.model.created_at))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def count_unread(self, db: Session, *, user_id: uuid.UUID) -> int:
        return (
            db.query(func.count(self.model.id))
            .filter(self.model.user_id == user_id, self.model.is_read.is_(False))
            .scalar()
            or 0
        )

    def mark_all_read(self, db: Session, *, user_id: uuid.UUID) -> int:
        updated = (
            db.query(self.model)
            .filter(self.model.user_id == user_id, self.model.is_read.is_(False))
            .update({self.model.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated

    def delete_by_id_and_user(self, db: Session, *, notification_id: uuid.UUID, user_id: uuid.UUID) -> int:
        deleted = (
            db.query(self.model)
            .filter(self.model.id == notification_id, self.model.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    def delete_by_user(self, db: Session, *, user_id: uuid.UUID) -> int:
        deleted = (
            db.query(self.model)
            .filter(self.model.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted


notification_crud = CRUDNotification(Notification)
