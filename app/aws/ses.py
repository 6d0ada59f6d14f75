"""
Amazon SES wrapper for plain-text notification emails.
"""
import logging
from typing import Optional

from app.aws.client import get_aws_client
from app.core.config import settings

logger = logging.getLogger(__name__)


class SesEmailSender:
    """Encapsulates SES send_email."""

    def __init__(self, ses_client=None, sender: Optional[str] = None):
        self.client = ses_client or get_aws_client("ses", region_name=settings.ses_region)
        self.sender = sender or settings.EMAIL_FROM

    def send_email(self, to: str, subject: str, body: str) -> str:
        """
        Send a plain-text email.

        Returns:
            SES MessageId

        Raises:
            ValueError: no sender address configured
            ClientError: SES rejected the message
        """
        if not self.sender:
            raise ValueError("EMAIL_FROM not configured")
        logger.debug(f"Sending email to: {to} with subject: {subject}")
        response = self.client.send_email(
            Source=self.sender,
            Destination={"ToAddresses": [to]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": {"Text": {"Data": body, "Charset": "UTF-8"}},
            },
        )
        return response["MessageId"]
