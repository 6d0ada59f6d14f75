"""
Event model with its staff roster (organizer, co-owners, reviewers).
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Table
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base


event_coowners = Table(
    "event_coowners",
    Base.metadata,
    Column("event_id", UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

event_reviewers = Table(
    "event_reviewers",
    Base.metadata,
    Column("event_id", UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Event(Base):
    __tablename__ = "events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String, nullable=True)
    date_start = Column(DateTime(timezone=True), nullable=True)
    date_end = Column(DateTime(timezone=True), nullable=True)
    organizer_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    organizer = relationship("User", foreign_keys=[organizer_id])
    coowners = relationship("User", secondary=event_coowners)
    reviewers = relationship("User", secondary=event_reviewers)

    def staff(self):
        """Organizer, co-owners and reviewers, de-duplicated by id."""
        seen = {}
        for user in [self.organizer, *self.coowners, *self.reviewers]:
            if user is not None and user.id not in seen:
                seen[user.id] = user
        return list(seen.values())
