"""
Application exceptions. Raised by services and routers, rendered by FastAPI
as {"detail": {"code": ..., "message": ...}}.
"""
from typing import Optional

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base for errors surfaced to API clients."""

    code: str = "ERROR"
    status_code_default: int = status.HTTP_400_BAD_REQUEST
    message_default: str = "Request failed."

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.message_default
        super().__init__(
            status_code=self.status_code_default,
            detail={"code": code or self.code, "message": self.message},
        )


class NotFound(AppException):
    code = "NOT_FOUND"
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource", message: Optional[str] = None):
        self.resource = resource
        super().__init__(message=message or f"{resource} not found.")


class Forbidden(AppException):
    """Acting user lacks the membership or role the operation requires."""
    code = "FORBIDDEN"
    status_code_default = status.HTTP_403_FORBIDDEN
    message_default = "You are not allowed to perform this action."


class InvalidRequest(AppException):
    code = "INVALID_REQUEST"
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Invalid request."


class NotAuthenticated(AppException):
    code = "NOT_AUTHENTICATED"
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "Authentication token is missing."


class SessionExpired(AppException):
    code = "SESSION_EXPIRED"
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "Session expired or invalid. Please log in again."
