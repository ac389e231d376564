"""Availability repository - conflicting bookings and sessions of a provider"""

from datetime import datetime

from sqlalchemy.orm import Session

from ...constants.statuses import BLOCKING_BOOKING_STATUSES, BLOCKING_SESSION_STATUSES
from ...models import AppSession, BookingRequest, Service


class AvailabilityRepository:
    """Read-only queries used by slot generation"""

    @staticmethod
    def get_blocking_bookings(
        db: Session, provider_id: int, window_start: datetime, window_end: datetime
    ) -> list[BookingRequest]:
        """PENDING/ACCEPTED bookings for the provider's services inside the window"""
        return (
            db.query(BookingRequest)
            .join(Service, BookingRequest.service_id == Service.id)
            .filter(
                Service.provider_id == provider_id,
                BookingRequest.status.in_(BLOCKING_BOOKING_STATUSES),
                BookingRequest.requested_time >= window_start,
                BookingRequest.requested_time < window_end,
            )
            .all()
        )

    @staticmethod
    def get_blocking_sessions(
        db: Session, provider_id: int, window_start: datetime, window_end: datetime
    ) -> list[AppSession]:
        """SCHEDULED/ACTIVE sessions of the provider starting inside the window"""
        return (
            db.query(AppSession)
            .filter(
                AppSession.provider_id == provider_id,
                AppSession.status.in_(BLOCKING_SESSION_STATUSES),
                AppSession.start_time >= window_start,
                AppSession.start_time < window_end,
            )
            .all()
        )
