"""Booking service - Business logic for the booking lifecycle

PENDING -> ACCEPTED | DECLINED through the provider's response. Either party
may reschedule, which puts the booking back to PENDING until the provider
answers again. Accepting materializes the booking's AppSession.
"""

import logging
import random
from datetime import timedelta
from typing import Optional

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...clock import Clock, to_naive_utc
from ...config import INSTANT_BOOKING_EXPIRY_MINUTES
from ...constants.statuses import AppSessionStatus, BookingStatus, NotificationType
from ...models import AppSession, BookingRequest, User
from ...services.notification_service import send_notification
from ..catalog.repository import ServiceRepository
from ..pricing.calculator import InvalidServiceConfiguration, calculate_dynamic_price
from .repository import BookingRepository
from .schemas import BookingCreate, BookingReschedule, BookingRespond

logger = logging.getLogger(__name__)


def _append_note(notes: Optional[str], line: str) -> str:
    return f"{notes}\n{line}" if notes else line


class BookingService:
    """Service layer for booking business logic"""

    def __init__(
        self, db: Session, clock: Clock, rng: random.Random, background_tasks: BackgroundTasks
    ):
        self.db = db
        self.background_tasks = background_tasks
        self.clock = clock
        self.rng = rng
        self.repo = BookingRepository()
        self.services = ServiceRepository()

    def get_bookings(self, user: User) -> list[BookingRequest]:
        return self.repo.get_bookings_for_user(self.db, user.id)

    def get_booking(self, booking_id: int) -> BookingRequest:
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_booking(self, data: BookingCreate, user: User) -> BookingRequest:
        """Create a PENDING booking request and notify the provider"""
        logger.info(f"📥 Booking request from user {user.id} for service {data.serviceId}")

        service = self.services.get_service_by_id(self.db, data.serviceId)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        if not service.is_active:
            raise HTTPException(status_code=400, detail="Service is not available for booking")
        if service.provider_id == user.id:
            raise HTTPException(status_code=400, detail="Cannot book your own service")
        if not data.isInstant and data.date is None:
            raise HTTPException(status_code=400, detail="Missing date for scheduled booking")

        if data.duration is not None:
            try:
                price = calculate_dynamic_price(service.price, service.duration, data.duration, self.rng)
            except InvalidServiceConfiguration as e:
                logger.error(f"❌ Service {service.id} cannot be priced: {e}")
                raise HTTPException(status_code=400, detail=str(e)) from e
            duration = data.duration
        else:
            price = service.price
            duration = service.duration

        now = self.clock.now()
        if data.isInstant:
            requested_time = now
            expires_at = now + timedelta(minutes=INSTANT_BOOKING_EXPIRY_MINUTES)
        else:
            requested_time = to_naive_utc(data.date)
            expires_at = None

        booking = self.repo.create_booking(
            self.db,
            client_id=user.id,
            service_id=service.id,
            requested_time=requested_time,
            duration=duration,
            price=price,
            status=BookingStatus.PENDING.value,
            notes=data.notes,
            is_instant=data.isInstant,
            expires_at=expires_at,
        )
        logger.info(f"✅ Booking {booking.id} created (price={price}, instant={data.isInstant})")

        send_notification(
            self.db,
            self.background_tasks,
            service.provider_id,
            NotificationType.BOOKING_REQUEST.value,
            "New Booking Request",
            f"{user.name or 'A client'} requested {service.title}.",
            {"bookingId": booking.id},
        )
        return booking

    # ------------------------------------------------------------------
    # Respond
    # ------------------------------------------------------------------

    def respond(self, booking_id: int, data: BookingRespond, user: User) -> tuple[BookingRequest, str]:
        """
        Apply the provider's answer to a pending booking

        Returns:
            The updated booking and a human readable outcome message
        """
        booking = self.get_booking(booking_id)
        if booking.service.provider_id != user.id:
            logger.warning(f"⚠️ User {user.id} tried to respond to booking {booking_id}")
            raise HTTPException(status_code=403, detail="Only the service provider can respond")
        if booking.status != BookingStatus.PENDING.value:
            raise HTTPException(
                status_code=409, detail=f"Booking is {booking.status}; only PENDING bookings can be answered"
            )

        provider_name = user.name or "Provider"

        if data.status == "suggest_alternative":
            if data.suggestedTime is None:
                raise HTTPException(
                    status_code=400, detail="suggestedTime is required for suggest_alternative"
                )
            suggested = to_naive_utc(data.suggestedTime)
            booking = self.repo.update_booking(
                self.db,
                booking,
                requested_time=suggested,
                notes=_append_note(
                    booking.notes, f"Provider suggested alternative time: {suggested.isoformat()}"
                ),
            )
            send_notification(
                self.db,
                self.background_tasks,
                booking.client_id,
                NotificationType.BOOKING_RESCHEDULED.value,
                "New Time Suggested",
                f"{provider_name} suggested a new time: {suggested.isoformat()}.",
                {"bookingId": booking.id},
            )
            return booking, "Alternative time suggested. Awaiting client confirmation."

        if data.status == "declined":
            booking = self.repo.update_booking(self.db, booking, status=BookingStatus.DECLINED.value)
            logger.info(f"✅ Booking {booking.id} declined")
            send_notification(
                self.db,
                self.background_tasks,
                booking.client_id,
                NotificationType.BOOKING_DECLINED.value,
                "Booking Declined",
                f"{provider_name} declined your booking request.",
                {"bookingId": booking.id},
            )
            return booking, "Booking declined successfully"

        session = self._accept(booking)
        send_notification(
            self.db,
            self.background_tasks,
            booking.client_id,
            NotificationType.BOOKING_CONFIRMED.value,
            "Booking Confirmed",
            f"{provider_name} accepted your booking request.",
            {"bookingId": booking.id, "sessionId": session.id},
        )
        return booking, "Booking accepted successfully"

    def _accept(self, booking: BookingRequest) -> AppSession:
        """
        Mark the booking ACCEPTED and schedule its session in one transaction

        A booking that was accepted before and then rescheduled still owns its
        (cancelled) session row; that row is re-scheduled instead of inserting
        a second one.
        """
        service = booking.service
        start_time = booking.requested_time or self.clock.now()
        duration = booking.duration or service.duration
        price = booking.price if booking.price is not None else service.price

        session = booking.session
        if session is not None and session.status != AppSessionStatus.CANCELLED.value:
            raise HTTPException(status_code=409, detail="Booking already has an active session")

        try:
            booking.status = BookingStatus.ACCEPTED.value
            if session is None:
                session = AppSession(booking_id=booking.id)
                self.db.add(session)

            session.client_id = booking.client_id
            session.provider_id = service.provider_id
            session.service_id = service.id
            session.status = AppSessionStatus.SCHEDULED.value
            session.start_time = start_time
            session.end_time = start_time + timedelta(minutes=duration)
            session.price = price

            self.db.commit()
        except IntegrityError:
            # Concurrent accept of the same booking lost the race on booking_id
            self.db.rollback()
            logger.warning(f"⚠️ Duplicate session for booking {booking.id} rejected")
            raise HTTPException(status_code=409, detail="Booking already has a session") from None
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Failed to accept booking {booking.id}", exc_info=True)
            raise

        self.db.refresh(booking)
        self.db.refresh(session)
        logger.info(f"✅ Booking {booking.id} accepted, session {session.id} scheduled at {start_time}")
        return session

    # ------------------------------------------------------------------
    # Reschedule
    # ------------------------------------------------------------------

    def reschedule(self, booking_id: int, data: BookingReschedule, user: User) -> BookingRequest:
        """Move a booking to a new time and send it back for provider approval"""
        booking = self.get_booking(booking_id)
        is_client = booking.client_id == user.id
        is_provider = booking.service.provider_id == user.id
        if not is_client and not is_provider:
            raise HTTPException(status_code=403, detail="Forbidden")

        session = booking.session
        if session is not None and session.status in (
            AppSessionStatus.ACTIVE.value,
            AppSessionStatus.COMPLETED.value,
        ):
            raise HTTPException(
                status_code=409, detail=f"Session is already {session.status}; booking cannot be rescheduled"
            )

        previous_status = booking.status
        try:
            booking.requested_time = to_naive_utc(data.requestedTime)
            booking.status = BookingStatus.PENDING.value
            if data.reason:
                booking.notes = _append_note(booking.notes, f"Reschedule request: {data.reason}")
            # Fixed time from now on; the instant window no longer applies
            booking.is_instant = False
            booking.expires_at = None
            if session is not None and session.status == AppSessionStatus.SCHEDULED.value:
                session.status = AppSessionStatus.CANCELLED.value
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Failed to reschedule booking {booking.id}", exc_info=True)
            raise
        self.db.refresh(booking)

        logger.info(f"✅ Booking {booking.id} rescheduled by user {user.id} ({previous_status} -> PENDING)")

        other_party = booking.service.provider_id if is_client else booking.client_id
        send_notification(
            self.db,
            self.background_tasks,
            other_party,
            NotificationType.BOOKING_RESCHEDULED.value,
            "Reschedule Requested",
            f"{user.name or 'Someone'} asked to move the booking to {booking.requested_time.isoformat()}.",
            {"bookingId": booking.id},
        )
        return booking
