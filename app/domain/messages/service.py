"""Message service - Chat between the participants of a session"""

import logging

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.orm import Session

from ...constants.statuses import NotificationType
from ...models import AppSession, Message, User
from ...services.notification_service import send_notification
from ..sessions.repository import SessionRepository
from .repository import MessageRepository
from .schemas import MessageCreate

logger = logging.getLogger(__name__)


class MessageService:
    """Service layer for session chat"""

    def __init__(self, db: Session, background_tasks: BackgroundTasks):
        self.db = db
        self.background_tasks = background_tasks
        self.repo = MessageRepository()
        self.sessions = SessionRepository()

    def _get_participant_session(self, session_id: int, user: User) -> AppSession:
        session = self.sessions.get_session_by_id(self.db, session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        if user.id not in (session.client_id, session.provider_id):
            logger.warning(f"⚠️ User {user.id} denied access to chat of session {session_id}")
            raise HTTPException(status_code=403, detail="You are not a participant in this chat")
        return session

    def get_messages(self, session_id: int, user: User) -> list[Message]:
        self._get_participant_session(session_id, user)
        return self.repo.get_messages_for_session(self.db, session_id)

    def send_message(self, session_id: int, data: MessageCreate, user: User) -> Message:
        """Post a message and notify the other participant"""
        session = self._get_participant_session(session_id, user)
        message = self.repo.create_message(self.db, session.id, user.id, data.content)
        logger.info(f"✅ Message {message.id} posted to session {session.id} by user {user.id}")

        recipient = session.provider_id if user.id == session.client_id else session.client_id
        send_notification(
            self.db,
            self.background_tasks,
            recipient,
            NotificationType.NEW_MESSAGE.value,
            f"New message from {user.name or 'your session partner'}",
            data.content[:120],
            {"sessionId": session.id, "messageId": message.id},
        )
        return message

    def mark_read(self, session_id: int, user: User) -> int:
        self._get_participant_session(session_id, user)
        return self.repo.mark_read(self.db, session_id, user.id)
