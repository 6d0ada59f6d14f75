"""
Applications API: apply to events and review applications.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user_id
from app.schema.application import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationReview,
    ApplicationUpdate,
)
from app.service.application_service import ApplicationService

router = APIRouter()


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    body: ApplicationCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Apply to an event. The event staff are notified."""
    return ApplicationService(db).submit(user_id, body)


@router.get("/my", response_model=List[ApplicationResponse])
async def my_applications(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ApplicationService(db).list_mine(user_id)


@router.get("/event/{event_id}", response_model=List[ApplicationResponse])
async def event_applications(
    event_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Applications for an event (event staff only)."""
    return ApplicationService(db).list_for_event(event_id, user_id)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ApplicationService(db).get_application(application_id, user_id)


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: uuid.UUID,
    body: ApplicationUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ApplicationService(db).update_application(application_id, user_id, body)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def review_application(
    application_id: uuid.UUID,
    body: ApplicationReview,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Set status and verdict (event staff). The applicant is notified."""
    return ApplicationService(db).review(application_id, user_id, body)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Withdraw an application (applicant only)."""
    ApplicationService(db).delete_application(application_id, user_id)
