"""
Application CRUD.
"""
from typing import List
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.model.application import Application
from app.crud.base import CRUDBase


class CRUDApplication(CRUDBase[Application, dict, dict]):
    def list_by_event(self, db: Session, *, event_id: uuid.UUID) -> List[Application]:
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id)
            .order_by(desc(self.model.submitted_at))
            .all()
        )

    def list_by_applicant(self, db: Session, *, applicant_id: uuid.UUID) -> List[Application]:
        return (
            db.query(self.model)
            .filter(self.model.applicant_id == applicant_id)
            .order_by(desc(self.model.submitted_at))
            .all()
        )

    def delete_by_event(self, db: Session, *, event_id: uuid.UUID) -> int:
        """Bulk delete without commit; the caller owns the transaction."""
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id)
            .delete(synchronize_session=False)
        )


application_crud = CRUDApplication(Application)
