"""Availability service - open slots for a provider over a date range"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants.statuses import UserRole
from ...models import User
from ...shared.validators import parse_iso_date
from .generator import booking_interval, generate_availability, query_window, session_interval
from .repository import AvailabilityRepository

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Service layer for provider availability"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def get_availability(self, provider_id: int, date_param: str, days: int) -> dict:
        provider = (
            self.db.query(User)
            .filter(User.id == provider_id, User.role == UserRole.PROVIDER.value)
            .first()
        )
        if not provider:
            raise HTTPException(status_code=404, detail="Provider not found")

        try:
            start_date = parse_iso_date(date_param)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        window_start, window_end = query_window(start_date, days)
        bookings = self.repo.get_blocking_bookings(self.db, provider_id, window_start, window_end)
        sessions = self.repo.get_blocking_sessions(self.db, provider_id, window_start, window_end)

        busy = [interval for interval in (booking_interval(b.requested_time, b.duration) for b in bookings) if interval]
        busy.extend(session_interval(s.start_time, s.end_time) for s in sessions)

        logger.debug(
            f"📅 Provider {provider_id}: {len(bookings)} booking(s), {len(sessions)} session(s) "
            f"between {window_start.date()} and {window_end.date()}"
        )
        return {
            "providerId": provider_id,
            "availability": generate_availability(start_date, days, busy),
        }
