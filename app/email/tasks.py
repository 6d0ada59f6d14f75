"""
Celery app and the notification email task.

Workers consume the "notifications" queue:
    celery -A app.email.tasks worker -Q notifications --loglevel=info
"""
import logging

from botocore.exceptions import BotoCoreError, ClientError
from celery import Celery

from app.aws.ses import SesEmailSender
from app.core.config import settings

logger = logging.getLogger(__name__)


celery_app = Celery("getscience_tasks", broker=settings.CELERY_BROKER_URL)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_ignore_result=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_routes={
        "notifications.*": {"queue": "notifications"},
    },
)


@celery_app.task(
    name="notifications.send_email",
    autoretry_for=(ClientError, BotoCoreError),
    retry_backoff=True,
    max_retries=3,
)
def send_notification_email(to: str, subject: str, body: str) -> str:
    """Send one notification email through SES. Returns the SES MessageId."""
    message_id = SesEmailSender().send_email(to=to, subject=subject, body=body)
    logger.info(f"Notification email sent to {to} ({message_id})")
    return message_id
