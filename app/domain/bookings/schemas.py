"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text


class BookingCreate(BaseModel):
    """Schema for a client's booking request"""

    serviceId: int
    date: Optional[datetime] = None
    notes: Optional[str] = None
    duration: Optional[int] = None  # Custom length in minutes; triggers dynamic pricing
    isInstant: bool = False

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return clean_text(v)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Duration must be greater than 0")
        return v


class BookingRespond(BaseModel):
    """Provider's answer to a pending booking"""

    status: Literal["accepted", "declined", "suggest_alternative"]
    suggestedTime: Optional[datetime] = None


class BookingReschedule(BaseModel):
    requestedTime: datetime
    reason: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return clean_text(v, max_length=500)


class ServiceSummary(BaseModel):
    id: int
    title: str
    price: float
    duration: int
    providerId: int


class ClientSummary(BaseModel):
    id: int
    name: Optional[str] = None
    image: Optional[str] = None


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    clientId: int
    serviceId: int
    requestedTime: Optional[datetime] = None
    duration: Optional[int] = None
    price: Optional[float] = None
    status: str
    notes: Optional[str] = None
    isInstant: bool
    expiresAt: Optional[datetime] = None
    sessionId: Optional[int] = None
    createdAt: Optional[datetime] = None
    service: Optional[ServiceSummary] = None
    client: Optional[ClientSummary] = None


class BookingActionResponse(BaseModel):
    message: str
    booking: BookingResponse
