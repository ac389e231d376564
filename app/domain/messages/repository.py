"""Message repository - Database operations for session chat"""

from sqlalchemy.orm import Session

from ...models import Message


class MessageRepository:
    """Repository for message database operations"""

    @staticmethod
    def get_messages_for_session(db: Session, session_id: int) -> list[Message]:
        """Conversation of a session, oldest first"""
        return (
            db.query(Message)
            .filter(Message.session_id == session_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    @staticmethod
    def create_message(db: Session, session_id: int, sender_id: int, content: str) -> Message:
        message = Message(session_id=session_id, sender_id=sender_id, content=content)
        db.add(message)
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def mark_read(db: Session, session_id: int, reader_id: int) -> int:
        """Mark every message the reader received in a session as read"""
        updated = (
            db.query(Message)
            .filter(
                Message.session_id == session_id,
                Message.sender_id != reader_id,
                Message.is_read.is_(False),
            )
            .update({Message.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated
