"""
Tests for chat membership synchronization

Participants follow the event staff roster; the initiator is never dropped.
"""

import pytest

from app.chat import membership
from app.core.exceptions import NotFound
from app.crud import chat_participant_crud
from app.model.chat import Chat


def _participants(db, chat):
    db.expire_all()
    return {p.user_id: p.is_active for p in chat_participant_crud.list_by_chat(db, chat_id=chat.id)}


@pytest.fixture
def chat_for(db, fake_clock):
    def _make(event, initiator):
        chat = Chat(event_id=event.id, initiator_id=initiator.id, last_message_at=fake_clock())
        db.add(chat)
        db.commit()
        db.refresh(chat)
        return chat

    return _make


class TestSynchronize:
    """Tests for membership.synchronize"""

    def test_staff_and_initiator_become_active(self, db, make_user, make_event, chat_for):
        """O, R1 and initiator I are all active after the first sync"""
        organizer = make_user("Olga")
        reviewer = make_user("Rolf")
        initiator = make_user("Ian")
        event = make_event(organizer, reviewers=[reviewer])
        chat = chat_for(event, initiator)

        changed = membership.synchronize(db, chat, organizer, [], [reviewer])

        assert changed is True
        assert _participants(db, chat) == {
            initiator.id: True,
            organizer.id: True,
            reviewer.id: True,
        }

    def test_removed_reviewer_is_deactivated_not_deleted(self, db, make_user, make_event, chat_for):
        """Dropping R1 from the roster leaves an inactive row behind"""
        organizer = make_user("Olga")
        reviewer = make_user("Rolf")
        initiator = make_user("Ian")
        event = make_event(organizer, reviewers=[reviewer])
        chat = chat_for(event, initiator)
        membership.synchronize(db, chat, organizer, [], [reviewer])

        membership.synchronize(db, chat, organizer, [], [])

        assert _participants(db, chat) == {
            initiator.id: True,
            organizer.id: True,
            reviewer.id: False,
        }

    def test_second_call_is_a_no_op(self, db, roster, chat_for):
        """Same roster twice: no writes the second time, same participant set"""
        chat = chat_for(roster["event"], roster["U"])
        args = (roster["O"], [roster["C"]], [roster["R"]])
        assert membership.synchronize(db, chat, *args) is True
        before = _participants(db, chat)

        assert membership.synchronize(db, chat, *args) is False
        assert _participants(db, chat) == before

    def test_initiator_survives_roster_without_them(self, db, roster, chat_for):
        """Initiator stays active however the roster changes"""
        chat = chat_for(roster["event"], roster["U"])
        membership.synchronize(db, chat, roster["O"], [roster["C"]], [roster["R"]])

        membership.synchronize(db, chat, roster["O"], [], [])

        assert _participants(db, chat)[roster["U"].id] is True

    def test_staff_initiator_stays_when_leaving_staff(self, db, roster, chat_for):
        """A reviewer who opened the chat keeps access after losing the role"""
        chat = chat_for(roster["event"], roster["R"])
        membership.synchronize(db, chat, roster["O"], [], [roster["R"]])

        membership.synchronize(db, chat, roster["O"], [], [])

        assert _participants(db, chat)[roster["R"].id] is True

    def test_returning_staff_is_reactivated(self, db, roster, chat_for):
        """A deactivated reviewer added back becomes active again, without a duplicate row"""
        chat = chat_for(roster["event"], roster["U"])
        membership.synchronize(db, chat, roster["O"], [], [roster["R"]])
        membership.synchronize(db, chat, roster["O"], [], [])
        assert _participants(db, chat)[roster["R"].id] is False

        assert membership.synchronize(db, chat, roster["O"], [], [roster["R"]]) is True

        participants = chat_participant_crud.list_by_chat(db, chat_id=chat.id)
        assert len([p for p in participants if p.user_id == roster["R"].id]) == 1
        assert _participants(db, chat)[roster["R"].id] is True

    def test_user_in_two_roles_gets_one_row(self, db, make_user, make_event, chat_for):
        """Co-owner who is also a reviewer is one participant"""
        organizer = make_user("Olga")
        both = make_user("Bea")
        initiator = make_user("Ian")
        event = make_event(organizer, coowners=[both], reviewers=[both])
        chat = chat_for(event, initiator)

        membership.synchronize(db, chat, organizer, [both], [both])

        assert len(chat_participant_crud.list_by_chat(db, chat_id=chat.id)) == 3


class TestAddParticipant:
    """Tests for membership.add_participant_if_missing"""

    def test_adds_once(self, db, roster, chat_for):
        chat = chat_for(roster["event"], roster["U"])

        first = membership.add_participant_if_missing(db, chat, roster["U"].id)
        second = membership.add_participant_if_missing(db, chat, roster["U"].id)
        db.commit()

        assert first is not None
        assert second is None
        assert membership.is_active_participant(db, chat.id, roster["U"].id)

    def test_does_not_reactivate(self, db, roster, chat_for):
        """Existing inactive rows are left alone"""
        chat = chat_for(roster["event"], roster["U"])
        membership.synchronize(db, chat, roster["O"], [], [roster["R"]])
        membership.synchronize(db, chat, roster["O"], [], [])

        assert membership.add_participant_if_missing(db, chat, roster["R"].id) is None
        assert not membership.is_active_participant(db, chat.id, roster["R"].id)


class TestSynchronizeEvent:
    """Tests for membership.synchronize_event"""

    def test_missing_event(self, db):
        import uuid

        with pytest.raises(NotFound):
            membership.synchronize_event(db, uuid.uuid4())

    def test_event_without_chats(self, db, roster):
        assert membership.synchronize_event(db, roster["event"].id) == 0

    def test_every_chat_of_event_synchronized(self, db, roster, make_user, chat_for):
        other = make_user("Otto")
        first = chat_for(roster["event"], roster["U"])
        second = chat_for(roster["event"], other)

        assert membership.synchronize_event(db, roster["event"].id) == 2

        for chat in (first, second):
            active = {uid for uid, is_active in _participants(db, chat).items() if is_active}
            assert {roster["O"].id, roster["C"].id, roster["R"].id, chat.initiator_id} == active
