"""
Booking cost calculation.

The total cost of a booking is a pure function of the price snapshot
(base price and price type), the quantity and the optional time window.
"""

from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from eventplanner.core.exceptions import InvalidTimeRangeError
from eventplanner.models.enums import PriceType

CENTS = Decimal("0.01")
DEFAULT_DURATION_HOURS = Decimal(1)


def duration_hours(start_time: Optional[time], end_time: Optional[time]) -> Decimal:
    """Length of the window in hours; one hour when either end is missing."""
    if start_time is None or end_time is None:
        return DEFAULT_DURATION_HOURS
    validate_time_window(start_time, end_time)
    anchor = date(2000, 1, 1)
    delta = datetime.combine(anchor, end_time) - datetime.combine(anchor, start_time)
    return Decimal(int(delta.total_seconds())) / Decimal(3600)


def validate_time_window(start_time: Optional[time], end_time: Optional[time]) -> None:
    if start_time is not None and end_time is not None and end_time <= start_time:
        raise InvalidTimeRangeError(
            f"End time {end_time.strftime('%H:%M')} must be after start time {start_time.strftime('%H:%M')}"
        )


def calculate_cost(
    base_price: Union[Decimal, int, str],
    price_type: Union[PriceType, str],
    quantity: int,
    start_time: Optional[time] = None,
    end_time: Optional[time] = None,
) -> Decimal:
    """
    Compute a booking's total cost.

    - per_person / per_meal: base price times quantity
    - per_hour: base price times the window length in hours
    - per_event and anything unrecognised: the flat base price
    """
    price = Decimal(str(base_price))
    try:
        kind = PriceType(price_type)
    except ValueError:
        kind = None

    if kind in (PriceType.PER_PERSON, PriceType.PER_MEAL):
        total = price * quantity
    elif kind is PriceType.PER_HOUR:
        total = price * duration_hours(start_time, end_time)
    else:
        total = price

    return total.quantize(CENTS, rounding=ROUND_HALF_UP)
