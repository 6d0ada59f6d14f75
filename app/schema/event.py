"""
Event schemas.
"""
from datetime import datetime
from typing import List, Optional
import uuid
from pydantic import BaseModel, EmailStr, Field


class EventCreate(BaseModel):
    """Body for POST /events. Staff are given by email; unknown emails are skipped."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    location: Optional[str] = None
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    coowners: List[EmailStr] = []
    reviewers: List[EmailStr] = []


class EventUpdate(EventCreate):
    """Body for PUT /events/{event_id}. Co-owners change only when the organizer edits."""


class StaffMember(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class EventResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    location: Optional[str] = None
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    organizer: StaffMember
    coowners: List[StaffMember] = []
    reviewers: List[StaffMember] = []

    class Config:
        from_attributes = True
