"""
Event service: events and their staff roster.

Roster changes are the trigger for chat membership synchronization, and
deleting an event removes its chats and applications explicitly before the
event row.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, NotFound
from app.crud import application_crud, event_crud, user_crud
from app.model.event import Event
from app.model.user import User
from app.schema.event import EventCreate, EventUpdate
from app.service.chat_service import ChatService
from app.service.notification_service import NotificationService

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def _users_by_email(self, emails: List[str], exclude: uuid.UUID) -> List[User]:
        users = user_crud.list_by_emails(self.db, emails=list(emails))
        found = {u.email for u in users}
        for email in emails:
            if email not in found:
                logger.warning(f"No user with email {email}, skipping")
        return [u for u in users if u.id != exclude]

    def _get(self, event_id: uuid.UUID) -> Event:
        event = event_crud.get_with_staff(self.db, event_id=event_id)
        if not event:
            raise NotFound("Event")
        return event

    def create_event(self, user_id: uuid.UUID, data: EventCreate) -> Event:
        if not user_crud.get(self.db, user_id):
            raise NotFound("User")
        event = Event(
            title=data.title,
            description=data.description,
            location=data.location,
            date_start=data.date_start,
            date_end=data.date_end,
            organizer_id=user_id,
        )
        event.coowners = self._users_by_email(data.coowners, exclude=user_id)
        event.reviewers = self._users_by_email(data.reviewers, exclude=user_id)
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        logger.info(f"Event {event.id} created by {user_id}")
        return event

    def get_event(self, event_id: uuid.UUID) -> Event:
        return self._get(event_id)

    def update_event(self, event_id: uuid.UUID, user_id: uuid.UUID, data: EventUpdate) -> Event:
        """
        Update fields and roster, notify the rest of the staff, resync chats.

        Raises:
            NotFound: no such event
            Forbidden: caller is neither organizer nor co-owner
        """
        event = self._get(event_id)
        is_organizer = event.organizer_id == user_id
        if not is_organizer and user_id not in {u.id for u in event.coowners}:
            raise Forbidden("Only the organizer or a co-owner can edit this event.")

        event.title = data.title
        event.description = data.description
        event.location = data.location
        event.date_start = data.date_start
        event.date_end = data.date_end
        event.reviewers = self._users_by_email(data.reviewers, exclude=event.organizer_id)
        if is_organizer:
            event.coowners = self._users_by_email(data.coowners, exclude=event.organizer_id)
        self.db.commit()
        self.db.refresh(event)

        self.notifications.notify_event_staff(event, initiator_id=user_id, is_delete=False)
        changed = ChatService(self.db).synchronize_event(event.id)
        logger.info(f"Event {event.id} updated by {user_id}, {changed} chat(s) resynchronized")
        return self._get(event_id)

    def delete_event(self, event_id: uuid.UUID, user_id: uuid.UUID) -> None:
        event = self._get(event_id)
        if event.organizer_id != user_id:
            raise Forbidden("Only the organizer can delete this event.")

        self.notifications.notify_event_staff(event, initiator_id=user_id, is_delete=True)
        deleted = ChatService(self.db).delete_chats_for_event(event.id)
        logger.info(f"Deleted {deleted} chat(s) of event {event.id}")
        removed = application_crud.delete_by_event(self.db, event_id=event.id)
        logger.info(f"Deleted {removed} application(s) of event {event.id}")

        event = self._get(event_id)
        self.db.delete(event)
        self.db.commit()
        logger.info(f"Event {event_id} deleted by {user_id}")
