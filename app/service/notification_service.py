"""
Notification service: in-app notifications with an email copy sent by Celery.
"""
import logging
import uuid
from typing import List, Optional, Set, Tuple

from kombu.exceptions import OperationalError as BrokerError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFound
from app.crud import notification_crud, user_crud
from app.email.tasks import send_notification_email
from app.model.application import Application
from app.model.event import Event
from app.model.notification import ApplicationStatus, EntityType, Notification, NotificationType
from app.utils import clock

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    ApplicationStatus.APPROVED: "Your application to event '{title}' was approved.",
    ApplicationStatus.REJECTED: "Your application to event '{title}' was rejected.",
    ApplicationStatus.PENDING: "Your application to event '{title}' is pending again.",
}


class NotificationService:
    """Creates, lists and updates a user's notifications."""

    def __init__(self, db: Session, email_task=None):
        self.db = db
        self.email_task = email_task or send_notification_email

    def _queue_email(self, to: str, subject: str, body: str) -> bool:
        """Hand the email to the worker. Broker failures are logged, never raised."""
        if not settings.EMAIL_ENABLED or not to:
            return False
        try:
            self.email_task.delay(to, subject, body)
        except BrokerError as e:
            logger.error(f"Failed to queue email to {to}: {e}")
            return False
        logger.debug(f"Email to {to} queued")
        return True

    def create(
        self,
        user_id: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        entity_id: uuid.UUID,
        entity_type: EntityType,
        status: Optional[ApplicationStatus] = None,
    ) -> Notification:
        """
        Persist a notification, then queue the matching email.

        Raises:
            NotFound: the user does not exist
        """
        user = user_crud.get(self.db, user_id)
        if not user:
            logger.error(f"Profile not found for notification recipient: {user_id}")
            raise NotFound("User")
        notification = notification_crud.create_from_dict(
            self.db,
            obj_in={
                "user_id": user_id,
                "type": type,
                "title": title,
                "message": message,
                "entity_id": entity_id,
                "entity_type": entity_type,
                "status": status,
                "created_at": clock.utcnow(),
            },
        )
        # Only after the commit, so a rolled back notification never emails
        self._queue_email(user.email, title, message)
        return notification

    def list(self, user_id: uuid.UUID, page: int = 1, limit: int = 10) -> Tuple[List[Notification], int]:
        return notification_crud.list_by_user_paginated(self.db, user_id=user_id, page=page, limit=limit)

    def unread_count(self, user_id: uuid.UUID) -> int:
        return notification_crud.count_unread(self.db, user_id=user_id)

    def mark_read(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        notification = notification_crud.get(self.db, notification_id)
        if not notification:
            return False
        if notification.user_id != user_id:
            logger.error(
                f"User {user_id} tried to mark notification {notification_id} as read, "
                "but it belongs to another user"
            )
            return False
        notification_crud.update(self.db, db_obj=notification, obj_in={"is_read": True})
        return True

    def mark_all_read(self, user_id: uuid.UUID) -> int:
        return notification_crud.mark_all_read(self.db, user_id=user_id)

    def delete(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return notification_crud.delete_by_id_and_user(
            self.db, notification_id=notification_id, user_id=user_id
        ) > 0

    def delete_all(self, user_id: uuid.UUID) -> int:
        return notification_crud.delete_by_user(self.db, user_id=user_id)

    def _notify_staff(
        self,
        event: Event,
        skip: Set[uuid.UUID],
        type_: NotificationType,
        title: str,
        message: str,
        entity_id: uuid.UUID,
        entity_type: EntityType,
        status: Optional[ApplicationStatus] = None,
    ) -> int:
        sent = 0
        for staff in event.staff():
            if staff.id in skip:
                continue
            self.create(
                user_id=staff.id,
                type=type_,
                title=title,
                message=message,
                entity_id=entity_id,
                entity_type=entity_type,
                status=status,
            )
            sent += 1
        logger.info(f"Notified {sent} staff member(s) of event {event.id} ({type_.value})")
        return sent

    def notify_event_staff(self, event: Event, initiator_id: uuid.UUID, is_delete: bool) -> int:
        """Tell every staff member except the initiator that the event changed."""
        if is_delete:
            type_ = NotificationType.EVENT_DELETED
            title = "Event deleted"
            message = f"Event '{event.title}' was deleted by another member of its staff."
        else:
            type_ = NotificationType.EVENT_UPDATED
            title = "Event updated"
            message = f"Event '{event.title}' was updated by another member of its staff."
        return self._notify_staff(
            event, {initiator_id}, type_, title, message, entity_id=event.id, entity_type=EntityType.EVENT
        )

    # --- Applications ---

    def notify_new_application(self, application: Application, event: Event) -> int:
        return self._notify_staff(
            event,
            {application.applicant_id},
            NotificationType.NEW_APPLICATION,
            "New application",
            f"A new application was submitted for event '{event.title}'.",
            entity_id=application.id,
            entity_type=EntityType.APPLICATION,
            status=ApplicationStatus.PENDING,
        )

    def notify_application_updated(self, application: Application, event: Event) -> int:
        """Applicant edited the application: tell the staff."""
        return self._notify_staff(
            event,
            {application.applicant_id},
            NotificationType.APPLICATION_UPDATED,
            "Application updated",
            f"An application for event '{event.title}' was updated by its applicant.",
            entity_id=application.id,
            entity_type=EntityType.APPLICATION,
        )

    def notify_application_deleted(self, application: Application, event: Event) -> int:
        return self._notify_staff(
            event,
            {application.applicant_id},
            NotificationType.APPLICATION_DELETED,
            "Application withdrawn",
            f"An applicant withdrew their application to event '{event.title}'.",
            entity_id=application.id,
            entity_type=EntityType.APPLICATION,
        )

    def notify_applicant(self, application: Application, event: Event, status_changed: bool) -> Notification:
        """Staff reviewed the application: tell the applicant."""
        if not status_changed:
            return self.create(
                user_id=application.applicant_id,
                type=NotificationType.APPLICATION_UPDATED,
                title="Your application was updated",
                message=f"Your application to event '{event.title}' was updated by the event staff.",
                entity_id=application.id,
                entity_type=EntityType.APPLICATION,
            )
        return self.create(
            user_id=application.applicant_id,
            type=NotificationType.APPLICATION_STATUS_CHANGED,
            title="Application status changed",
            message=STATUS_MESSAGES[application.status].format(title=event.title),
            entity_id=application.id,
            entity_type=EntityType.APPLICATION,
            status=application.status,
        )
