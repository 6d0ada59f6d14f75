"""
Tests for NotificationService.
"""

import uuid

import pytest

from app.core.exceptions import NotFound
from app.model.notification import EntityType, NotificationType
from app.service.notification_service import NotificationService


@pytest.fixture
def notifications(db, emails, fake_clock):
    return NotificationService(db)


def _notify(service, user, title="Event updated"):
    return service.create(
        user_id=user.id,
        type=NotificationType.EVENT_UPDATED,
        title=title,
        message="Something changed.",
        entity_id=uuid.uuid4(),
        entity_type=EntityType.EVENT,
    )


class TestCreate:
    """Tests for NotificationService.create"""

    def test_persists_and_queues_email(self, notifications, make_user, emails):
        user = make_user("Olga")

        notification = _notify(notifications, user)

        assert notification.is_read is False
        assert emails.jobs == [
            {"to": user.email, "subject": "Event updated", "body": "Something changed."}
        ]

    def test_unknown_user(self, notifications, emails):
        with pytest.raises(NotFound):
            notifications.create(
                user_id=uuid.uuid4(),
                type=NotificationType.EVENT_DELETED,
                title="Event deleted",
                message="Gone.",
                entity_id=uuid.uuid4(),
                entity_type=EntityType.EVENT,
            )
        assert emails.jobs == []


class TestReadState:
    """Tests for listing, counting and marking notifications"""

    def test_list_newest_first(self, notifications, make_user, fake_clock):
        user = make_user("Olga")
        _notify(notifications, user, title="first")
        fake_clock.advance(1)
        _notify(notifications, user, title="second")

        items, total = notifications.list(user.id)

        assert total == 2
        assert [n.title for n in items] == ["second", "first"]

    def test_mark_read_and_count(self, notifications, make_user):
        user = make_user("Olga")
        first = _notify(notifications, user)
        _notify(notifications, user)

        assert notifications.unread_count(user.id) == 2
        assert notifications.mark_read(first.id, user.id) is True
        assert notifications.unread_count(user.id) == 1
        assert notifications.mark_all_read(user.id) == 1
        assert notifications.unread_count(user.id) == 0

    def test_cannot_mark_someone_elses(self, notifications, make_user):
        owner = make_user("Olga")
        other = make_user("Uma")
        notification = _notify(notifications, owner)

        assert notifications.mark_read(notification.id, other.id) is False
        assert notifications.unread_count(owner.id) == 1

    def test_delete(self, notifications, make_user):
        user = make_user("Olga")
        first = _notify(notifications, user)
        _notify(notifications, user)
        _notify(notifications, user)

        assert notifications.delete(first.id, user.id) is True
        assert notifications.delete(first.id, user.id) is False
        assert notifications.delete_all(user.id) == 2


class TestNotifyEventStaff:
    """Tests for NotificationService.notify_event_staff"""

    def test_skips_initiator(self, notifications, roster, emails):
        sent = notifications.notify_event_staff(roster["event"], initiator_id=roster["O"].id, is_delete=True)

        assert sent == 2
        assert {job["to"] for job in emails.jobs} == {roster["C"].email, roster["R"].email}
        assert all(job["subject"] == "Event deleted" for job in emails.jobs)
