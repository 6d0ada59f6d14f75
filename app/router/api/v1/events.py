"""
Events API: create, read, update and delete events with their staff roster.
"""
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user_id
from app.schema.event import EventCreate, EventResponse, EventUpdate
from app.service.event_service import EventService

router = APIRouter()


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    body: EventCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create an event organized by the caller. Unknown staff emails are skipped."""
    return EventService(db).create_event(user_id, body)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return EventService(db).get_event(event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: uuid.UUID,
    body: EventUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Update an event (organizer or co-owner).

    Staff other than the caller are notified and the event's chats are
    resynchronized with the new roster.
    """
    return EventService(db).update_event(event_id, user_id, body)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete an event and all of its chats (organizer only)."""
    EventService(db).delete_event(event_id, user_id)
