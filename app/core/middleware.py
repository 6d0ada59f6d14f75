"""
Middlewares: Redis session loading and per-request logging.
"""
import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable
from app.session import extract_token, get_session

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class SessionMiddleware(BaseHTTPMiddleware):
    """Loads session from Redis based on Authorization header."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Initialize empty session
        request.state.session = {}
        request.state.token = None

        # Try to load session from Redis if token present
        auth_header = request.headers.get("authorization")
        token = extract_token(auth_header)

        if token:
            user_data = get_session(token)
            if user_data:
                request.state.session = user_data
                request.state.token = token

        response = await call_next(request)
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs method, path, status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(
                "[%s] %s %s failed after %.1fms",
                request_id, request.method, request.url.path, elapsed_ms,
            )
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "[%s] %s %s -> %s (%.1fms)",
            request_id, request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response
