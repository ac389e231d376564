"""Session domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class SessionReschedule(BaseModel):
    newStartTime: datetime


class SessionStatusUpdate(BaseModel):
    status: Literal["ACTIVE", "COMPLETED", "CANCELLED"]


class SessionResponse(BaseModel):
    """Schema for session response"""

    id: int
    bookingId: Optional[int] = None
    clientId: int
    providerId: int
    serviceId: Optional[int] = None
    service: str
    clientName: Optional[str] = None
    clientImage: Optional[str] = None
    providerName: Optional[str] = None
    status: str
    startTime: datetime
    endTime: Optional[datetime] = None
    durationMinutes: Optional[int] = None
    price: float
    hasReview: bool = False
    createdAt: Optional[datetime] = None
