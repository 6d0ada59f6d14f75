"""
boto3 client factory shared by the S3 avatar helpers and the SES sender.
"""
from functools import lru_cache
from typing import Optional

import boto3

from app.core.config import settings


@lru_cache(maxsize=None)
def _client(service_name: str, region: str):
    return boto3.client(service_name, region_name=region)


def get_aws_client(service_name: str, region_name: Optional[str] = None):
    """
    boto3 client for `service_name`, one per (service, region).

    Presigning avatar URLs happens on every chat participant listing, so
    clients are built once and reused.

    Examples:
        >>> s3 = get_aws_client("s3", region_name=settings.s3_region)
        >>> ses = get_aws_client("ses")
    """
    return _client(service_name, region_name or settings.AWS_REGION)
