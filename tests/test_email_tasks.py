"""
Tests for the notification email task and how NotificationService queues it.
"""

import uuid
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from kombu.exceptions import OperationalError

from app.email import tasks
from app.model.notification import EntityType, NotificationType
from app.service.notification_service import NotificationService


@pytest.fixture
def ses(monkeypatch):
    """SES sender replaced by a mock; the task builds a fresh one per call."""
    sender = MagicMock()
    sender.send_email.return_value = "msg-0001"
    monkeypatch.setattr(tasks, "SesEmailSender", lambda: sender)
    return sender


class TestSendNotificationEmail:
    """Tests for the send_notification_email task body"""

    def test_sends_through_ses(self, ses):
        message_id = tasks.send_notification_email("olga@example.org", "Event updated", "Body")

        assert message_id == "msg-0001"
        ses.send_email.assert_called_once_with(to="olga@example.org", subject="Event updated", body="Body")

    def test_ses_rejection_propagates(self, ses):
        """Called in-process the retry machinery re-raises the SES error"""
        ses.send_email.side_effect = ClientError(
            {"Error": {"Code": "Throttling", "Message": "Rate exceeded"}}, "SendEmail"
        )

        with pytest.raises(ClientError):
            tasks.send_notification_email("olga@example.org", "s", "b")

    def test_registered_on_notifications_queue(self):
        assert tasks.send_notification_email.name == "notifications.send_email"
        assert tasks.celery_app.conf.task_routes["notifications.*"] == {"queue": "notifications"}


class TestQueueing:
    """Tests for NotificationService handing emails to the task"""

    def _notify(self, service, user):
        return service.create(
            user_id=user.id,
            type=NotificationType.EVENT_UPDATED,
            title="Event updated",
            message="Changed.",
            entity_id=uuid.uuid4(),
            entity_type=EntityType.EVENT,
        )

    def test_broker_down_keeps_notification(self, db, emails, make_user, fake_clock):
        task = MagicMock()
        task.delay.side_effect = OperationalError("Error 111 connecting to localhost:6379")
        user = make_user("Olga")

        notification = self._notify(NotificationService(db, email_task=task), user)

        assert notification.id is not None
        task.delay.assert_called_once_with(user.email, "Event updated", "Changed.")

    def test_disabled_email_is_not_queued(self, db, emails, make_user, fake_clock, monkeypatch):
        from app.core.config import settings

        monkeypatch.setattr(settings, "EMAIL_ENABLED", False)

        self._notify(NotificationService(db), make_user("Olga"))

        assert emails.jobs == []
