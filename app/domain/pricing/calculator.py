"""Dynamic session pricing

Custom-length sessions are billed at the service's per-minute rate plus a
surcharge. The surcharge multiplier is drawn uniformly from
``[1.0, 1.0 + MAX_SURCHARGE)`` so the randomness source is passed in by the
caller.
"""

import random

from ...config import MAX_SURCHARGE


class InvalidServiceConfiguration(ValueError):
    """Raised when a service cannot be priced (non-positive base duration)"""


def calculate_dynamic_price(
    base_price: float,
    base_duration: int,
    requested_duration: int,
    rng: random.Random,
) -> float:
    """
    Price a session of ``requested_duration`` minutes.

    Args:
        base_price: Price of the service for ``base_duration`` minutes
        base_duration: Service's reference duration in minutes
        requested_duration: Minutes the client asked for
        rng: Source of the surcharge draw

    Returns:
        Price rounded to 2 decimals
    """
    if base_duration is None or base_duration <= 0:
        raise InvalidServiceConfiguration(
            f"Service base duration must be positive, got {base_duration}"
        )

    per_minute = base_price / base_duration
    base_cost = per_minute * requested_duration
    multiplier = 1.0 + rng.random() * MAX_SURCHARGE

    return round(base_cost * multiplier, 2)
