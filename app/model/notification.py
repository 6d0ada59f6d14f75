"""
Notification model and its enums.
"""
import enum
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.core.database import Base


class NotificationType(str, enum.Enum):
    NEW_APPLICATION = "NEW_APPLICATION"
    APPLICATION_STATUS_CHANGED = "APPLICATION_STATUS_CHANGED"
    APPLICATION_UPDATED = "APPLICATION_UPDATED"
    EVENT_UPDATED = "EVENT_UPDATED"
    EVENT_DELETED = "EVENT_DELETED"
    APPLICATION_DELETED = "APPLICATION_DELETED"


class EntityType(str, enum.Enum):
    EVENT = "EVENT"
    APPLICATION = "APPLICATION"


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(NotificationType, name="notification_type"), nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    # Not a foreign key: may point at an event or an application
    entity_id = Column(UUID(as_uuid=True), nullable=False)
    entity_type = Column(Enum(EntityType, name="notification_entity_type"), nullable=False)
    status = Column(Enum(ApplicationStatus, name="application_status"), nullable=True)
