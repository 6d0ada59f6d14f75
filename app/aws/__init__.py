"""
AWS integrations layer.
"""
from app.aws.client import get_aws_client
from app.aws.secrets import get_secret
from app.aws.ses import SesEmailSender

__all__ = [
    "get_aws_client",
    "get_secret",
    "SesEmailSender",
]
