"""Slot generation

Pure functions: callers fetch the provider's blocking bookings and sessions
and pass them in, so the date arithmetic can be tested without a database.
All datetimes are naive and compared as stored (no time-zone conversion).
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from ...config import (
    DEFAULT_BOOKING_DURATION_MINUTES,
    SLOT_INTERVAL_MINUTES,
    UNTIMED_BOOKING_POLICY,
    WORK_END_HOUR,
    WORK_START_HOUR,
)

logger = logging.getLogger(__name__)

Interval = tuple[datetime, datetime]


def query_window(start_date: date, days: int) -> Interval:
    """[start of start_date, end of (start_date + days)) used to fetch conflicts"""
    window_start = datetime.combine(start_date, time.min)
    window_end = datetime.combine(start_date + timedelta(days=days + 1), time.min)
    return window_start, window_end


def booking_interval(requested_time: Optional[datetime], duration: Optional[int]) -> Optional[Interval]:
    """
    Busy interval of a booking request

    Bookings without a requested time are handled by UNTIMED_BOOKING_POLICY;
    under "skip" they block nothing.
    """
    if requested_time is None:
        if UNTIMED_BOOKING_POLICY != "skip":
            raise ValueError(f"Unsupported untimed booking policy: {UNTIMED_BOOKING_POLICY}")
        return None
    minutes = duration or DEFAULT_BOOKING_DURATION_MINUTES
    return requested_time, requested_time + timedelta(minutes=minutes)


def session_interval(start_time: datetime, end_time: Optional[datetime]) -> Interval:
    """Busy interval of a session; open-ended sessions count as one hour"""
    if end_time is None:
        end_time = start_time + timedelta(minutes=DEFAULT_BOOKING_DURATION_MINUTES)
    return start_time, end_time


def is_blocked(slot: datetime, busy: Iterable[Interval]) -> bool:
    """A slot boundary is blocked when it lies in [start, end) of any busy interval"""
    return any(start <= slot < end for start, end in busy)


def day_slots(day: date) -> list[datetime]:
    """Every slot boundary inside working hours for one day"""
    slots = []
    current = datetime.combine(day, time(hour=WORK_START_HOUR))
    end = datetime.combine(day, time(hour=WORK_END_HOUR))
    while current < end:
        slots.append(current)
        current += timedelta(minutes=SLOT_INTERVAL_MINUTES)
    return slots


def generate_availability(start_date: date, days: int, busy: list[Interval]) -> list[dict]:
    """
    Build the per-day availability listing

    Returns:
        One entry per day: ``{"date": "YYYY-MM-DD", "isAvailable": bool,
        "slots": ["HH:MM", ...]}`` with only the open slots listed
    """
    availability = []
    for offset in range(days):
        day = start_date + timedelta(days=offset)
        open_slots = [slot.strftime("%H:%M") for slot in day_slots(day) if not is_blocked(slot, busy)]
        availability.append(
            {
                "date": day.isoformat(),
                "isAvailable": len(open_slots) > 0,
                "slots": open_slots,
            }
        )
    return availability
