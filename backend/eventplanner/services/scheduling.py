"""
Time-slot overlap detection for vendor services.
"""

from datetime import time
from typing import Iterable, Optional

from eventplanner.models.booking import Booking


def intervals_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open intervals [start, end) overlap; touching ends do not."""
    return start_a < end_b and start_b < end_a


def find_conflict(
    existing: Iterable[Booking],
    start_time: time,
    end_time: time,
) -> Optional[Booking]:
    for booking in existing:
        if booking.start_time is None or booking.end_time is None:
            continue
        if intervals_overlap(start_time, end_time, booking.start_time, booking.end_time):
            return booking
    return None
