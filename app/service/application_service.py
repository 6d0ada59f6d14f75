"""
Application service: users apply to events, event staff review the applications.

Every state change notifies the other side through NotificationService.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, NotFound
from app.crud import application_crud, event_crud, user_crud
from app.model.application import Application
from app.model.event import Event
from app.model.notification import ApplicationStatus
from app.schema.application import ApplicationCreate, ApplicationReview, ApplicationUpdate
from app.service.notification_service import NotificationService
from app.utils import clock

logger = logging.getLogger(__name__)


class ApplicationService:
    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def _get(self, application_id: uuid.UUID) -> Application:
        application = application_crud.get(self.db, application_id)
        if not application:
            raise NotFound("Application")
        return application

    def _event(self, event_id: uuid.UUID) -> Event:
        event = event_crud.get_with_staff(self.db, event_id=event_id)
        if not event:
            raise NotFound("Event")
        return event

    @staticmethod
    def _is_staff(event: Event, user_id: uuid.UUID) -> bool:
        return any(u.id == user_id for u in event.staff())

    def submit(self, user_id: uuid.UUID, data: ApplicationCreate) -> Application:
        """
        Apply to an event. The application starts PENDING and the event staff
        are notified.

        Raises:
            NotFound: unknown user or event
        """
        if not user_crud.get(self.db, user_id):
            raise NotFound("User")
        event = self._event(data.event_id)
        application = application_crud.create_from_dict(
            self.db,
            obj_in={
                "event_id": event.id,
                "applicant_id": user_id,
                "status": ApplicationStatus.PENDING,
                "message": data.message,
                "is_observer": data.is_observer,
                "submitted_at": clock.utcnow(),
            },
        )
        logger.info(f"Application {application.id} submitted by {user_id} for event {event.id}")
        self.notifications.notify_new_application(application, event)
        return application

    def get_application(self, application_id: uuid.UUID, user_id: uuid.UUID) -> Application:
        """Visible to the applicant and to the event staff."""
        application = self._get(application_id)
        if application.applicant_id != user_id and not self._is_staff(self._event(application.event_id), user_id):
            raise Forbidden("Only the applicant or the event staff can view this application.")
        return application

    def list_for_event(self, event_id: uuid.UUID, user_id: uuid.UUID) -> List[Application]:
        event = self._event(event_id)
        if not self._is_staff(event, user_id):
            raise Forbidden("Only the event staff can list its applications.")
        return application_crud.list_by_event(self.db, event_id=event_id)

    def list_mine(self, user_id: uuid.UUID) -> List[Application]:
        return application_crud.list_by_applicant(self.db, applicant_id=user_id)

    def update_application(self, application_id: uuid.UUID, user_id: uuid.UUID, data: ApplicationUpdate) -> Application:
        application = self._get(application_id)
        if application.applicant_id != user_id:
            raise Forbidden("Only the applicant can edit this application.")
        application = application_crud.update(
            self.db,
            db_obj=application,
            obj_in={"message": data.message, "is_observer": data.is_observer, "updated_at": clock.utcnow()},
        )
        self.notifications.notify_application_updated(application, self._event(application.event_id))
        return application

    def review(self, application_id: uuid.UUID, user_id: uuid.UUID, data: ApplicationReview) -> Application:
        """
        Set status and verdict (event staff). The applicant gets
        APPLICATION_STATUS_CHANGED when the status moved, APPLICATION_UPDATED
        otherwise.

        Raises:
            NotFound: no such application
            Forbidden: caller is not on the event staff
        """
        application = self._get(application_id)
        event = self._event(application.event_id)
        if not self._is_staff(event, user_id):
            raise Forbidden("Only the event staff can review applications.")
        previous = application.status
        application = application_crud.update(
            self.db,
            db_obj=application,
            obj_in={"status": data.status, "verdict": data.verdict, "updated_at": clock.utcnow()},
        )
        changed = previous != application.status
        if changed:
            logger.info(f"Application {application.id}: {previous.value} -> {application.status.value} by {user_id}")
        self.notifications.notify_applicant(application, event, status_changed=changed)
        return application

    def delete_application(self, application_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Withdraw an application (applicant only). The staff are notified."""
        application = self._get(application_id)
        if application.applicant_id != user_id:
            raise Forbidden("Only the applicant can withdraw this application.")
        self.notifications.notify_application_deleted(application, self._event(application.event_id))
        self.db.delete(application)
        self.db.commit()
        logger.info(f"Application {application_id} withdrawn by {user_id}")
