"""Session service - Business logic for scheduled sessions"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.orm import Session

from ...clock import Clock, to_naive_utc
from ...config import DEFAULT_BOOKING_DURATION_MINUTES, RESCHEDULE_CUTOFF_MINUTES
from ...constants.statuses import AppSessionStatus, NotificationType
from ...models import AppSession, User
from ...services.notification_service import send_notification
from ..wallet.service import stage_session_settlement
from .repository import SessionRepository
from .schemas import SessionReschedule

logger = logging.getLogger(__name__)

SCHEDULED = AppSessionStatus.SCHEDULED.value
ACTIVE = AppSessionStatus.ACTIVE.value
COMPLETED = AppSessionStatus.COMPLETED.value
CANCELLED = AppSessionStatus.CANCELLED.value

# Allowed status moves per participant
PROVIDER_TRANSITIONS = {
    SCHEDULED: {ACTIVE, CANCELLED},
    ACTIVE: {COMPLETED, CANCELLED},
}
CLIENT_TRANSITIONS = {
    SCHEDULED: {CANCELLED},
}


def session_minutes(session: AppSession) -> int:
    """Length of a session in whole minutes"""
    if session.end_time is None or session.end_time <= session.start_time:
        return DEFAULT_BOOKING_DURATION_MINUTES
    return int((session.end_time - session.start_time).total_seconds() // 60)


class SessionService:
    """Service layer for session business logic"""

    def __init__(self, db: Session, clock: Clock, background_tasks: BackgroundTasks):
        self.db = db
        self.background_tasks = background_tasks
        self.clock = clock
        self.repo = SessionRepository()

    def get_sessions(
        self, user: User, status: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> list[AppSession]:
        return self.repo.get_sessions_for_user(self.db, user.id, status, limit, offset)

    def get_session(self, session_id: int, user: User) -> AppSession:
        """Get a session the user takes part in"""
        session = self.repo.get_session_by_id(self.db, session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        if user.id not in (session.client_id, session.provider_id):
            logger.warning(f"⚠️ User {user.id} denied access to session {session_id}")
            raise HTTPException(status_code=403, detail="Forbidden")
        return session

    def reschedule(self, session_id: int, data: SessionReschedule, user: User) -> AppSession:
        """
        Move a session to a new start time, keeping its length

        Only allowed while the current start is more than
        RESCHEDULE_CUTOFF_MINUTES away.
        """
        session = self.get_session(session_id, user)
        if session.status in (COMPLETED, CANCELLED):
            raise HTTPException(status_code=409, detail=f"Cannot reschedule a {session.status} session")

        now = self.clock.now()
        if session.start_time - now <= timedelta(minutes=RESCHEDULE_CUTOFF_MINUTES):
            raise HTTPException(
                status_code=400,
                detail=f"Cannot reschedule within {RESCHEDULE_CUTOFF_MINUTES} minutes of start time",
            )

        new_start = to_naive_utc(data.newStartTime)
        new_end = None
        if session.end_time is not None and session.end_time > session.start_time:
            new_end = new_start + (session.end_time - session.start_time)

        previous_start = session.start_time
        session.start_time = new_start
        session.end_time = new_end
        session.status = SCHEDULED
        if session.booking is not None:
            # Keep the accepted booking on the same slot as its session
            session.booking.requested_time = new_start
        self.db.commit()
        self.db.refresh(session)
        logger.info(f"✅ Session {session.id} moved from {previous_start} to {new_start}")

        other_party = session.provider_id if user.id == session.client_id else session.client_id
        send_notification(
            self.db,
            self.background_tasks,
            other_party,
            NotificationType.SESSION_UPDATE.value,
            "Session Rescheduled",
            f"Your session now starts at {new_start.isoformat()}.",
            {"sessionId": session.id},
        )
        return session

    def update_status(self, session_id: int, status: str, user: User) -> AppSession:
        """
        Move a session through its lifecycle

        Completion settles the wallets in the same transaction as the status
        change.
        """
        session = self.get_session(session_id, user)
        transitions = PROVIDER_TRANSITIONS if user.id == session.provider_id else CLIENT_TRANSITIONS
        if status not in transitions.get(session.status, set()):
            raise HTTPException(
                status_code=409, detail=f"Cannot change session from {session.status} to {status}"
            )

        previous = session.status
        try:
            session.status = status
            if status == COMPLETED:
                stage_session_settlement(self.db, session, session_minutes(session))
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Failed to move session {session.id} to {status}", exc_info=True)
            raise

        self.db.refresh(session)
        logger.info(f"✅ Session {session.id}: {previous} -> {status}")

        other_party = session.client_id if user.id == session.provider_id else session.provider_id
        send_notification(
            self.db,
            self.background_tasks,
            other_party,
            NotificationType.SESSION_UPDATE.value,
            "Session Update",
            f"Your session is now {status.lower()}.",
            {"sessionId": session.id, "status": status},
        )
        return session
