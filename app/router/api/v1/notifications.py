"""
Notifications API: the caller's in-app notifications.
"""
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user_id
from app.core.exceptions import NotFound
from app.schema.chat import UnreadCountResponse
from app.schema.notification import NotificationListResponse, NotificationResponse
from app.service.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """Newest first."""
    items, total = NotificationService(db).list(user_id, page=page, limit=limit)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in items],
        page=page,
        limit=limit,
        total=total,
        total_pages=(total + limit - 1) // limit if total else 0,
    )


@router.get("/unread/count", response_model=UnreadCountResponse)
async def unread_notifications_count(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return UnreadCountResponse(count=NotificationService(db).unread_count(user_id))


@router.put("/read-all")
async def mark_all_read(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return {"updated": NotificationService(db).mark_all_read(user_id)}


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not NotificationService(db).mark_read(notification_id, user_id):
        raise NotFound("Notification")


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not NotificationService(db).delete(notification_id, user_id):
        raise NotFound("Notification")


@router.delete("")
async def delete_all_notifications(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return {"deleted": NotificationService(db).delete_all(user_id)}
