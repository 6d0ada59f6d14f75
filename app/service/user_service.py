"""
User profile service.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.aws.s3 import generate_presigned_url, upload_to_s3
from app.core.exceptions import NotFound
from app.crud import user_crud
from app.model.user import User
from app.schema.user import UserProfile, UserProfileUpdate
from app.session import cache_profile, evict_profile, get_cached_profile

logger = logging.getLogger(__name__)

ALLOWED_AVATAR_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


def _summary(user: User) -> Dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "avatar_key": user.avatar_key,
        "is_active": bool(user.is_active),
    }


class UserService:
    """Profile reads (through the Redis cache) and profile updates."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: uuid.UUID) -> User:
        user = user_crud.get(self.db, user_id)
        if not user:
            raise NotFound("User")
        return user

    def profile_summary(self, user_id: uuid.UUID) -> Dict[str, Any]:
        """Cached profile dict; falls back to the database on a miss."""
        cached = get_cached_profile(user_id)
        if cached is not None:
            return cached
        summary = _summary(self.get_user(user_id))
        cache_profile(user_id, summary)
        return summary

    def get_profile(self, user_id: uuid.UUID) -> UserProfile:
        summary = self.profile_summary(user_id)
        return UserProfile(
            id=summary["id"],
            email=summary["email"],
            first_name=summary["first_name"],
            last_name=summary["last_name"],
            avatar_url=generate_presigned_url(summary["avatar_key"]),
            is_active=summary["is_active"],
        )

    def update_profile(self, user_id: uuid.UUID, data: UserProfileUpdate) -> UserProfile:
        user = self.get_user(user_id)
        user_crud.update(self.db, db_obj=user, obj_in=data.model_dump(exclude_unset=True, exclude_none=True))
        evict_profile(user_id)
        logger.info(f"Profile updated for user: {user.email}")
        return self.get_profile(user_id)

    def update_avatar(
        self, user_id: uuid.UUID, content: bytes, content_type: str, filename: Optional[str]
    ) -> UserProfile:
        user = self.get_user(user_id)
        ext = ".jpg"
        if filename and "." in filename:
            ext = "." + filename.rsplit(".", 1)[-1].lower()
        if ext not in ALLOWED_AVATAR_EXTENSIONS:
            ext = ".jpg"
        key = upload_to_s3(key=f"users/{user_id}/avatar{ext}", body=content, content_type=content_type)
        user_crud.update(self.db, db_obj=user, obj_in={"avatar_key": key})
        evict_profile(user_id)
        return self.get_profile(user_id)
