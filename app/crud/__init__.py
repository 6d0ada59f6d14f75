from app.crud.user_crud import user_crud
from app.crud.event_crud import event_crud
from app.crud.chat_crud import chat_crud
from app.crud.chat_participant_crud import chat_participant_crud
from app.crud.chat_message_crud import chat_message_crud
from app.crud.chat_read_status_crud import chat_read_status_crud
from app.crud.notification_crud import notification_crud
from app.crud.application_crud import application_crud

__all__ = [
    "user_crud",
    "event_crud",
    "chat_crud",
    "chat_participant_crud",
    "chat_message_crud",
    "chat_read_status_crud",
    "notification_crud",
    "application_crud",
]
