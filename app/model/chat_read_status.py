"""
Read checkpoint per (chat, user). A missing row means nothing was read yet.
"""
from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.core.database import Base


class ChatReadStatus(Base):
    __tablename__ = "chat_read_statuses"
    __table_args__ = (UniqueConstraint("chat_id", "user_id", name="uq_chat_read_statuses_chat_user"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    chat_id = Column(UUID(as_uuid=True), ForeignKey("chats.id"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    last_read_at = Column(DateTime(timezone=True), nullable=False)
