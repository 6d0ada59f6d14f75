"""
Chat model. One thread per (event, initiator).
"""
from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base


class Chat(Base):
    __tablename__ = "chats"
    __table_args__ = (UniqueConstraint("event_id", "initiator_id", name="uq_chats_event_initiator"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id"), nullable=False, index=True)
    initiator_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    last_message_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event")
    initiator = relationship("User", foreign_keys=[initiator_id])
    # No cascade: chat deletion removes participants explicitly.
    participants = relationship("ChatParticipant", back_populates="chat")
