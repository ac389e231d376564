"""Session router - FastAPI endpoints for app sessions"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...clock import Clock, get_clock
from ...database import get_db
from ...models import AppSession, User
from .schemas import SessionReschedule, SessionResponse, SessionStatusUpdate
from .service import SessionService, session_minutes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def get_session_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SessionService:
    """Dependency injection for SessionService"""
    return SessionService(db, clock, background_tasks)


def _to_response(s: AppSession) -> SessionResponse:
    return SessionResponse(
        id=s.id,
        bookingId=s.booking_id,
        clientId=s.client_id,
        providerId=s.provider_id,
        serviceId=s.service_id,
        service=s.service.title if s.service else "Session",
        clientName=s.client.name if s.client else None,
        clientImage=s.client.image if s.client else None,
        providerName=s.provider.name if s.provider else None,
        status=s.status,
        startTime=s.start_time,
        endTime=s.end_time,
        durationMinutes=session_minutes(s) if s.end_time else None,
        price=s.price,
        hasReview=s.review is not None,
        createdAt=s.created_at,
    )


@router.get("", response_model=list[SessionResponse])
async def get_sessions(
    status: Optional[Literal["ALL", "SCHEDULED", "ACTIVE", "COMPLETED", "CANCELLED"]] = Query("ALL"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Sessions of the current user, latest start first"""
    status_filter = None if status == "ALL" else status
    return [_to_response(s) for s in service.get_sessions(current_user, status_filter, limit, offset)]


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return _to_response(service.get_session(session_id, current_user))


@router.post("/{session_id}/reschedule", response_model=SessionResponse)
async def reschedule_session(
    session_id: int,
    data: SessionReschedule,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Move a session to a new start time (not within 15 minutes of its start)"""
    return _to_response(service.reschedule(session_id, data, current_user))


@router.patch("/{session_id}/status", response_model=SessionResponse)
async def update_session_status(
    session_id: int,
    data: SessionStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Start, complete or cancel a session"""
    return _to_response(service.update_status(session_id, data.status, current_user))
