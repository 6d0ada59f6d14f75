"""
Tests for EventService: roster edits drive chat membership and notifications.
"""

import pytest

from app.core.exceptions import Forbidden, NotFound
from app.crud import chat_participant_crud
from app.model.chat import Chat
from app.model.event import Event
from app.model.notification import Notification, NotificationType
from app.schema.event import EventCreate, EventUpdate
from app.service.chat_service import ChatService
from app.service.event_service import EventService


@pytest.fixture
def events(db, emails, fake_clock):
    return EventService(db)


def _update(roster, **overrides):
    data = {
        "title": "Protein Folding Workshop",
        "coowners": [roster["C"].email],
        "reviewers": [roster["R"].email],
    }
    data.update(overrides)
    return EventUpdate(**data)


class TestCreateEvent:
    """Tests for EventService.create_event"""

    def test_staff_resolved_by_email(self, events, make_user):
        organizer = make_user("Olga")
        reviewer = make_user("Rita", email="rita@example.org")

        event = events.create_event(
            organizer.id,
            EventCreate(title="Cryo-EM Day", reviewers=["rita@example.org", "ghost@example.org"]),
        )

        assert event.organizer_id == organizer.id
        assert [u.id for u in event.reviewers] == [reviewer.id]
        assert event.coowners == []


class TestUpdateEvent:
    """Tests for EventService.update_event"""

    def test_removed_reviewer_deactivated_in_chats(self, db, events, roster, publisher):
        chat = ChatService(db, publisher=publisher).get_or_create_chat(roster["event"].id, roster["U"].id)

        events.update_event(roster["event"].id, roster["O"].id, _update(roster, reviewers=[]))

        db.expire_all()
        participant = chat_participant_crud.get_by_chat_and_user(db, chat_id=chat.id, user_id=roster["R"].id)
        assert participant.is_active is False

    def test_new_reviewer_joins_existing_chats(self, db, events, roster, publisher, make_user):
        newcomer = make_user("Nina")
        chat = ChatService(db, publisher=publisher).get_or_create_chat(roster["event"].id, roster["U"].id)

        events.update_event(
            roster["event"].id,
            roster["O"].id,
            _update(roster, reviewers=[roster["R"].email, newcomer.email]),
        )

        assert chat_participant_crud.is_active_participant(db, chat_id=chat.id, user_id=newcomer.id)

    def test_staff_except_editor_notified(self, db, events, roster, emails):
        events.update_event(roster["event"].id, roster["C"].id, _update(roster, title="Renamed"))

        notified = {n.user_id for n in db.query(Notification).all()}
        assert notified == {roster["O"].id, roster["R"].id}
        assert all(n.type == NotificationType.EVENT_UPDATED for n in db.query(Notification).all())
        assert sorted(job["to"] for job in emails.jobs) == sorted([roster["O"].email, roster["R"].email])

    def test_coowner_cannot_change_coowners(self, db, events, roster):
        event = events.update_event(roster["event"].id, roster["C"].id, _update(roster, coowners=[]))

        assert [u.id for u in event.coowners] == [roster["C"].id]

    def test_reviewer_cannot_edit(self, events, roster):
        with pytest.raises(Forbidden):
            events.update_event(roster["event"].id, roster["R"].id, _update(roster))

    def test_missing_event(self, events, roster):
        import uuid

        with pytest.raises(NotFound):
            events.update_event(uuid.uuid4(), roster["O"].id, _update(roster))


class TestDeleteEvent:
    """Tests for EventService.delete_event"""

    def test_deletes_chats_then_event(self, db, events, roster, publisher, fake_clock):
        chats = ChatService(db, publisher=publisher)
        chat = chats.get_or_create_chat(roster["event"].id, roster["U"].id)
        fake_clock.advance(1)
        chats.send_message(chat.id, roster["U"].id, "hello")

        events.delete_event(roster["event"].id, roster["O"].id)

        assert db.query(Event).count() == 0
        assert db.query(Chat).count() == 0
        types = {n.type for n in db.query(Notification).all()}
        assert types == {NotificationType.EVENT_DELETED}

    def test_only_organizer_may_delete(self, db, events, roster):
        with pytest.raises(Forbidden):
            events.delete_event(roster["event"].id, roster["C"].id)
        assert db.query(Event).count() == 1
