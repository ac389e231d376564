"""Availability router - provider slot listing"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import MAX_AVAILABILITY_DAYS
from ...database import get_db
from ...models import User
from .service import AvailabilityService

router = APIRouter(prefix="/providers", tags=["Availability"])


class DayAvailability(BaseModel):
    date: str
    isAvailable: bool
    slots: list[str]


class AvailabilityResponse(BaseModel):
    providerId: int
    availability: list[DayAvailability]


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.get("/{provider_id}/availability", response_model=AvailabilityResponse)
async def get_provider_availability(
    provider_id: int,
    date: str = Query(..., description="First day, YYYY-MM-DD"),
    days: int = Query(7, ge=1, le=MAX_AVAILABILITY_DAYS),
    current_user: User = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Open 30-minute slots within working hours for each of the next ``days`` days"""
    return service.get_availability(provider_id, date, days)
