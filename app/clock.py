"""
Time and randomness sources injected into request handlers.

Everything that depends on "now" or on the pricing surcharge draws from these
dependencies so tests can override them through ``app.dependency_overrides``.
"""

import random
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an incoming datetime to naive UTC"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class Clock:
    """Wall clock returning naive UTC datetimes"""

    def now(self) -> datetime:
        return utc_now()


class FixedClock(Clock):
    """Clock frozen at a given instant; used by tests and replay scripts"""

    def __init__(self, instant: datetime):
        self.instant = to_naive_utc(instant)

    def now(self) -> datetime:
        return self.instant


_system_clock = Clock()


def get_clock() -> Clock:
    """FastAPI dependency for the request clock"""
    return _system_clock


def get_rng() -> random.Random:
    """FastAPI dependency for the pricing randomness source"""
    return random.Random()
