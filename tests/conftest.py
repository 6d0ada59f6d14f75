"""
Shared pytest fixtures.

Provides:
- In-memory SQLite database with the full schema, recreated per test
- A controllable server clock
- Recording fakes for the push channel and the email task
- User/event factories
- A TestClient with session and identity dependencies overridden
"""

import os

# Settings are read at import time; keep tests off Postgres and Secrets Manager
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("EMAIL_ENABLED", "false")

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, List, Tuple

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.database import Base, SessionLocal, engine, get_db
from app.core.dependencies import get_current_user_id
from app.model.event import Event
from app.model.user import User
from app.session import set_redis_client
from app.utils import clock


# ============================================================================
# Fakes
# ============================================================================

class FakeClock:
    """Pinned UTC clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class RecordingPublisher:
    """Stands in for the connection manager; records every publish call."""

    def __init__(self):
        self.published: List[Tuple[str, str, Any]] = []

    def publish(self, destination: str, event: str, payload: Any) -> None:
        self.published.append((destination, event, payload))

    @property
    def destinations(self) -> List[str]:
        return [d for d, _, _ in self.published]


class RecordingEmailTask:
    """Stands in for the send_notification_email Celery task."""

    def __init__(self):
        self.jobs: List[dict] = []

    def delay(self, to: str, subject: str, body: str) -> None:
        self.jobs.append({"to": to, "subject": subject, "body": body})


# ============================================================================
# Database / clock
# ============================================================================

@pytest.fixture
def db():
    """Fresh schema and session for each test."""
    import app.model  # noqa: F401

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_clock(monkeypatch) -> FakeClock:
    fake = FakeClock(datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(clock, "utcnow", fake)
    return fake


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def emails(monkeypatch) -> RecordingEmailTask:
    """Email copies are on and land in a recording fake instead of the broker."""
    fake = RecordingEmailTask()
    monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
    monkeypatch.setattr("app.service.notification_service.send_notification_email", fake)
    return fake


@pytest.fixture(autouse=True)
def no_redis():
    """Profile cache and sessions start without Redis (cache misses)."""
    set_redis_client(None)
    yield
    set_redis_client(None)


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_user(db):
    def _make(first_name: str = "Test", last_name: str = "User", email: str = None) -> User:
        user = User(
            id=uuid.uuid4(),
            email=email or f"{first_name.lower()}.{uuid.uuid4().hex[:8]}@example.org",
            first_name=first_name,
            last_name=last_name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_event(db):
    def _make(organizer: User, coowners=(), reviewers=(), title: str = "Protein Folding Workshop") -> Event:
        event = Event(title=title, description="", organizer_id=organizer.id)
        event.coowners = list(coowners)
        event.reviewers = list(reviewers)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make


@pytest.fixture
def roster(make_user, make_event):
    """Organizer O, co-owner C, reviewer R, outside user U and their event."""
    organizer = make_user("Olga", "Organizer")
    coowner = make_user("Carl", "Coowner")
    reviewer = make_user("Rita", "Reviewer")
    outsider = make_user("Uma", "User")
    event = make_event(organizer, coowners=[coowner], reviewers=[reviewer])
    return {"O": organizer, "C": coowner, "R": reviewer, "U": outsider, "event": event}


# ============================================================================
# API client
# ============================================================================

class Identity:
    """Mutable holder for the user the TestClient acts as."""

    def __init__(self):
        self.user_id = None

    def as_user(self, user: User) -> None:
        self.user_id = user.id


@pytest.fixture
def identity() -> Identity:
    return Identity()


@pytest.fixture
def client(db, identity, publisher, emails):
    from main import app
    from app.router.api.v1.chat import get_publisher

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user_id] = lambda: identity.user_id
    app.dependency_overrides[get_publisher] = lambda: publisher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
