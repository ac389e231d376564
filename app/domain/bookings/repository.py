"""Booking repository - Database operations for booking requests"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import BookingRequest, Service


class BookingRepository:
    """Repository for booking request database operations"""

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: int) -> Optional[BookingRequest]:
        """Get a booking with its service (and therefore its provider)"""
        return (
            db.query(BookingRequest)
            .options(joinedload(BookingRequest.service))
            .filter(BookingRequest.id == booking_id)
            .first()
        )

    @staticmethod
    def get_bookings_for_user(db: Session, user_id: int) -> list[BookingRequest]:
        """Bookings the user made or received as provider, newest first"""
        return (
            db.query(BookingRequest)
            .join(Service, BookingRequest.service_id == Service.id)
            .options(joinedload(BookingRequest.service), joinedload(BookingRequest.client))
            .filter(or_(BookingRequest.client_id == user_id, Service.provider_id == user_id))
            .order_by(BookingRequest.created_at.desc(), BookingRequest.id.desc())
            .all()
        )

    @staticmethod
    def create_booking(db: Session, **booking_data) -> BookingRequest:
        booking = BookingRequest(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def update_booking(db: Session, booking: BookingRequest, **updates) -> BookingRequest:
        """Update a booking with provided fields"""
        for key, value in updates.items():
            setattr(booking, key, value)
        db.commit()
        db.refresh(booking)
        return booking
