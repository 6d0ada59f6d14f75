"""
Application schemas.
"""
from datetime import datetime
from typing import Optional
import uuid
from pydantic import BaseModel, Field

from app.model.notification import ApplicationStatus


class ApplicationCreate(BaseModel):
    """Body for POST /applications."""
    event_id: uuid.UUID
    message: Optional[str] = Field(None, max_length=10_000)
    is_observer: bool = False


class ApplicationUpdate(BaseModel):
    """Body for PUT /applications/{application_id} (applicant)."""
    message: Optional[str] = Field(None, max_length=10_000)
    is_observer: bool = False


class ApplicationReview(BaseModel):
    """Body for PUT /applications/{application_id}/status (event staff)."""
    status: ApplicationStatus
    verdict: Optional[str] = Field(None, max_length=10_000)


class ApplicationResponse(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    applicant_id: uuid.UUID
    status: ApplicationStatus
    message: Optional[str] = None
    is_observer: bool
    verdict: Optional[str] = None
    submitted_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
