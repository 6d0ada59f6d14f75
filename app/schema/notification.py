"""
Notification schemas.
"""
from datetime import datetime
from typing import List, Optional
import uuid
from pydantic import BaseModel, Field

from app.model.notification import ApplicationStatus, EntityType, NotificationType


class NotificationResponse(BaseModel):
    id: uuid.UUID
    type: NotificationType
    title: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None
    entity_id: uuid.UUID
    entity_type: EntityType
    status: Optional[ApplicationStatus] = None

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    page: int = Field(..., description="Current page (1-based).")
    limit: int = Field(..., description="Items per page.")
    total: int = Field(..., description="Total notifications for this user.")
    total_pages: int = Field(..., description="Total pages.")
