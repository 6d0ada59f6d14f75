"""
S3 helpers – store avatar files and hand out time-limited links to them.
"""
import logging
from typing import Optional

from botocore.exceptions import ClientError

from app.aws.client import get_aws_client
from app.core.config import settings

logger = logging.getLogger(__name__)


def get_s3_client():
    """S3 client for the configured region."""
    return get_aws_client("s3", region_name=settings.s3_region)


def upload_to_s3(
    key: str,
    body: bytes,
    content_type: str,
    bucket: Optional[str] = None,
) -> str:
    """
    Upload bytes to S3 and return the object key.

    Objects stay private; readers get presigned URLs from generate_presigned_url.

    Args:
        key: S3 object key (e.g. users/<id>/avatar.jpg)
        body: File bytes
        content_type: MIME type (e.g. image/jpeg)
        bucket: Override bucket; defaults to settings.S3_BUCKET_NAME

    Returns:
        The stored object key.
    """
    b = bucket or settings.S3_BUCKET_NAME
    if not b:
        raise ValueError("S3_BUCKET_NAME not configured")

    client = get_s3_client()
    client.put_object(
        Bucket=b,
        Key=key,
        Body=body,
        ContentType=content_type,
    )
    logger.info(f"Uploaded S3 key={key} to bucket={b}")
    return key


def generate_presigned_url(key: str, expires_in: Optional[int] = None) -> Optional[str]:
    """
    Presigned GET URL for an object, or None when S3 is off or signing fails.
    """
    if not settings.use_s3 or not key:
        return None
    try:
        return get_s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.S3_BUCKET_NAME, "Key": key},
            ExpiresIn=expires_in or settings.S3_PRESIGN_EXPIRY,
        )
    except ClientError as e:
        logger.warning(f"Could not presign S3 key={key}: {e}")
        return None
