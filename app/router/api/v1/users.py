"""
User router - profile endpoints (protected).
"""
import logging
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_current_user_id
from app.schema.user import UserProfile, UserProfileUpdate
from app.service.user_service import UserService

router = APIRouter()
logger = logging.getLogger(__name__)

ALLOWED_AVATAR_TYPES = {"image/jpeg", "image/png", "image/webp", "image/jpg"}


@router.get("/me", response_model=UserProfile)
async def get_me(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Current user profile, served from the profile cache when warm."""
    return UserService(db).get_profile(user_id)


@router.patch("/me", response_model=UserProfile)
async def update_me(
    body: UserProfileUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return UserService(db).update_profile(user_id, body)


@router.patch("/me/avatar", response_model=UserProfile)
async def update_avatar(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    file: UploadFile = File(...),
):
    """Upload avatar to S3 and store its object key. Requires S3_BUCKET_NAME."""
    if not settings.use_s3:
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Avatar upload requires S3. Set S3_BUCKET_NAME.",
        )
    if file.content_type not in ALLOWED_AVATAR_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be an image (JPEG, PNG, WebP).",
        )
    content = await file.read()
    logger.info(f"Avatar upload for user {user_id} ({len(content)} bytes)")
    return UserService(db).update_avatar(
        user_id, content, file.content_type or "image/jpeg", file.filename
    )
