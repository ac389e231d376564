"""Booking router - FastAPI endpoints for booking requests"""

import logging
import random

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...clock import Clock, get_clock, get_rng
from ...database import get_db
from ...models import BookingRequest, User
from .schemas import (
    BookingActionResponse,
    BookingCreate,
    BookingReschedule,
    BookingRespond,
    BookingResponse,
    ClientSummary,
    ServiceSummary,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    rng: random.Random = Depends(get_rng),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, clock, rng, background_tasks)


def booking_to_response(b: BookingRequest) -> BookingResponse:
    service = b.service
    client = b.client
    return BookingResponse(
        id=b.id,
        clientId=b.client_id,
        serviceId=b.service_id,
        requestedTime=b.requested_time,
        duration=b.duration,
        price=b.price,
        status=b.status,
        notes=b.notes,
        isInstant=b.is_instant,
        expiresAt=b.expires_at,
        sessionId=b.session.id if b.session else None,
        createdAt=b.created_at,
        service=ServiceSummary(
            id=service.id,
            title=service.title,
            price=service.price,
            duration=service.duration,
            providerId=service.provider_id,
        )
        if service
        else None,
        client=ClientSummary(id=client.id, name=client.name, image=client.image) if client else None,
    )


@router.get("", response_model=list[BookingResponse])
async def get_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings where the current user is the client or the provider"""
    return [booking_to_response(b) for b in service.get_bookings(current_user)]


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Request a scheduled or instant booking"""
    return booking_to_response(service.create_booking(data, current_user))


@router.post("/{booking_id}/respond", response_model=BookingActionResponse)
async def respond_to_booking(
    booking_id: int,
    data: BookingRespond,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Accept, decline or suggest another time for a pending booking (provider only)"""
    booking, message = service.respond(booking_id, data, current_user)
    return BookingActionResponse(message=message, booking=booking_to_response(booking))


@router.patch("/{booking_id}/reschedule", response_model=BookingActionResponse)
async def reschedule_booking(
    booking_id: int,
    data: BookingReschedule,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Request a new time; the booking goes back to PENDING"""
    booking = service.reschedule(booking_id, data, current_user)
    return BookingActionResponse(
        message="Reschedule request submitted. Awaiting provider approval.",
        booking=booking_to_response(booking),
    )
