"""Message router - FastAPI endpoints for session chat"""

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import MarkReadResponse, MessageCreate, MessageCreatedResponse, MessageResponse
from .service import MessageService

router = APIRouter(prefix="/chat", tags=["Chat"])


def get_message_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> MessageService:
    """Dependency injection for MessageService"""
    return MessageService(db, background_tasks)


@router.get("/{session_id}/messages", response_model=list[MessageResponse])
async def get_messages(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Conversation of a session, oldest first (participants only)"""
    return [
        MessageResponse(
            id=m.id,
            senderId=m.sender_id,
            content=m.content,
            isRead=m.is_read,
            createdAt=m.created_at,
        )
        for m in service.get_messages(session_id, current_user)
    ]


@router.post("/{session_id}/messages", response_model=MessageCreatedResponse, status_code=201)
async def send_message(
    session_id: int,
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    message = service.send_message(session_id, data, current_user)
    return MessageCreatedResponse(id=message.id, isRead=message.is_read, createdAt=message.created_at)


@router.patch("/{session_id}/messages/read", response_model=MarkReadResponse)
async def mark_messages_read(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Mark the messages received in a session as read"""
    return MarkReadResponse(updated=service.mark_read(session_id, current_user))
