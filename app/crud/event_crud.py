"""
Event CRUD.
"""
from typing import Optional
import uuid
from sqlalchemy.orm import Session, selectinload

from app.model.event import Event
from app.crud.base import CRUDBase


class CRUDEvent(CRUDBase[Event, dict, dict]):
    def get_with_staff(self, db: Session, *, event_id: uuid.UUID) -> Optional[Event]:
        """Event with organizer, co-owners and reviewers loaded."""
        return (
            db.query(self.model)
            .options(
                selectinload(self.model.organizer),
                selectinload(self.model.coowners),
                selectinload(self.model.reviewers),
            )
            .filter(self.model.id == event_id)
            .first()
        )


event_crud = CRUDEvent(Event)
