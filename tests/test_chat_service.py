"""
Tests for ChatService: chat lifecycle, history, participants, deletion.
"""

import uuid

import pytest

from app.core.exceptions import Forbidden, NotFound
from app.crud import chat_crud
from app.model.chat import Chat
from app.model.chat_message import ChatMessage
from app.model.chat_participant import ChatParticipant
from app.model.chat_read_status import ChatReadStatus
from app.service.chat_service import ChatService


@pytest.fixture
def service(db, publisher, fake_clock):
    return ChatService(db, publisher=publisher)


class TestGetOrCreateChat:
    """Tests for ChatService.get_or_create_chat"""

    def test_creates_chat_with_staff(self, service, roster):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)

        assert chat.initiator_id == roster["U"].id
        assert chat.event_title == "Protein Folding Workshop"
        assert set(chat.participant_ids) == {roster[k].id for k in ("O", "C", "R", "U")}
        assert chat.unread_count == 0

    def test_second_call_returns_same_chat(self, db, service, roster):
        first = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        second = service.get_or_create_chat(roster["event"].id, roster["U"].id)

        assert first.id == second.id
        assert db.query(Chat).count() == 1

    def test_existing_chat_reports_unread(self, service, roster, fake_clock):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        fake_clock.advance(5)
        service.send_message(chat.id, roster["O"].id, "Welcome!")

        again = service.get_or_create_chat(roster["event"].id, roster["U"].id)

        assert again.unread_count == 1
        assert again.last_message.content == "Welcome!"

    def test_missing_event(self, service, roster):
        with pytest.raises(NotFound):
            service.get_or_create_chat(uuid.uuid4(), roster["U"].id)

    def test_missing_user(self, service, roster):
        with pytest.raises(NotFound):
            service.get_or_create_chat(roster["event"].id, uuid.uuid4())


class TestFindChatByEvent:
    """Tests for ChatService.find_chat_by_event"""

    def test_none_before_first_access(self, service, roster):
        assert service.find_chat_by_event(roster["event"].id, roster["U"].id) is None

    def test_found_after_creation(self, service, roster):
        created = service.get_or_create_chat(roster["event"].id, roster["U"].id)

        found = service.find_chat_by_event(roster["event"].id, roster["U"].id)

        assert found.id == created.id


class TestMessages:
    """Tests for send_message / get_messages"""

    def test_history_newest_first_and_marks_read(self, service, roster, fake_clock):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        for text in ("first", "second", "third"):
            fake_clock.advance(1)
            service.send_message(chat.id, roster["U"].id, text)
        assert service.get_chat_details(chat.id, roster["O"].id).unread_count == 3

        fake_clock.advance(1)
        page = service.get_messages(chat.id, roster["O"].id, page=1, limit=2)

        assert [m.content for m in page.items] == ["third", "second"]
        assert page.total == 3
        assert page.total_pages == 2
        assert service.get_chat_details(chat.id, roster["O"].id).unread_count == 0

    def test_second_page(self, service, roster, fake_clock):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        for text in ("first", "second", "third"):
            fake_clock.advance(1)
            service.send_message(chat.id, roster["U"].id, text)

        page = service.get_messages(chat.id, roster["U"].id, page=2, limit=2)

        assert [m.content for m in page.items] == ["first"]

    def test_history_forbidden_for_outsider(self, service, roster, make_user):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)

        with pytest.raises(Forbidden):
            service.get_messages(chat.id, make_user("Xena").id)

    def test_send_to_missing_chat(self, service, roster):
        with pytest.raises(NotFound):
            service.send_message(uuid.uuid4(), roster["U"].id, "hello")


class TestListChats:
    """Tests for ChatService.list_chats"""

    def test_most_recent_activity_first(self, service, roster, make_user, make_event, fake_clock):
        other_event = make_event(roster["O"], title="Genomics Summit")
        first = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        fake_clock.advance(1)
        second = service.get_or_create_chat(other_event.id, roster["U"].id)
        fake_clock.advance(1)
        service.send_message(first.id, roster["U"].id, "bump")

        listing = service.list_chats(roster["O"].id)

        assert [c.id for c in listing.items] == [first.id, second.id]
        assert listing.total == 2

    def test_inactive_chats_hidden(self, db, service, roster):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        db.query(ChatParticipant).filter(
            ChatParticipant.chat_id == chat.id, ChatParticipant.user_id == roster["R"].id
        ).update({"is_active": False})
        db.commit()

        assert service.list_chats(roster["R"].id).total == 0
        assert service.list_chats(roster["C"].id).total == 1


class TestParticipants:
    """Tests for details and participant profiles"""

    def test_details_lists_active_only(self, db, service, roster):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        roster["event"].reviewers = []
        db.commit()
        service.synchronize_event(roster["event"].id)

        details = service.get_chat_details(chat.id, roster["U"].id)

        assert roster["R"].id not in details.participant_ids
        assert roster["O"].id in details.participant_ids

    def test_profiles_include_former_participants(self, db, service, roster):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        roster["event"].reviewers = []
        db.commit()
        service.synchronize_event(roster["event"].id)

        profiles = {p.user_id: p for p in service.list_participant_profiles(chat.id, roster["U"].id)}

        assert profiles[roster["R"].id].is_active is False
        assert profiles[roster["O"].id].first_name == "Olga"
        assert profiles[roster["O"].id].avatar_url is None

    def test_details_forbidden_for_outsider(self, service, roster, make_user):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)

        with pytest.raises(Forbidden):
            service.get_chat_details(chat.id, make_user("Xena").id)

    def test_is_participant(self, service, roster, make_user):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)

        assert service.is_participant(chat.id, roster["C"].id) is True
        assert service.is_participant(chat.id, make_user("Xena").id) is False


class TestDeletion:
    """Tests for explicit chat deletion"""

    def test_delete_chat_removes_everything(self, db, service, roster, fake_clock):
        chat = service.get_or_create_chat(roster["event"].id, roster["U"].id)
        fake_clock.advance(1)
        service.send_message(chat.id, roster["O"].id, "hi")
        fake_clock.advance(1)
        service.mark_read(chat.id, roster["U"].id)

        service.delete_chat(chat_crud.get_by_id(db, chat_id=chat.id))

        assert db.query(Chat).count() == 0
        assert db.query(ChatMessage).count() == 0
        assert db.query(ChatReadStatus).count() == 0
        assert db.query(ChatParticipant).count() == 0

    def test_delete_chats_for_event(self, db, service, roster, make_user):
        service.get_or_create_chat(roster["event"].id, roster["U"].id)
        service.get_or_create_chat(roster["event"].id, make_user("Otto").id)

        assert service.delete_chats_for_event(roster["event"].id) == 2
        assert db.query(Chat).count() == 0
        assert db.query(ChatParticipant).count() == 0
