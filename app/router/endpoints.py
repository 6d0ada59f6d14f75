"""
API Router - all endpoints.
"""
from fastapi import APIRouter
from app.router.api.v1 import applications, chat, events, notifications, users

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"],
)

api_router.include_router(
    events.router,
    prefix="/events",
    tags=["Events"],
)

api_router.include_router(
    chat.router,
    prefix="/chats",
    tags=["Chats"],
)

api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["Notifications"],
)

api_router.include_router(
    applications.router,
    prefix="/applications",
    tags=["Applications"],
)
