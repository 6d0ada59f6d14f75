from app.model.user import User
from app.model.event import Event
from app.model.chat import Chat
from app.model.chat_participant import ChatParticipant
from app.model.chat_message import ChatMessage
from app.model.chat_read_status import ChatReadStatus
from app.model.notification import Notification
from app.model.application import Application

__all__ = ["User", "Event", "Chat", "ChatParticipant", "ChatMessage", "ChatReadStatus", "Notification", "Application"]
