"""Booking conflict detection.

A mentor's active bookings (pending or confirmed) must be at least
``window_minutes`` apart. The window is open: two bookings exactly
``window_minutes`` apart do not conflict. The scan is linear because a single
mentor never has many active bookings.
"""

from datetime import datetime
from typing import Iterable

from src.db.models import Booking
from src.sessions import repository
from src.utils.validators import to_naive_utc


def find_conflict(bookings: Iterable[Booking], proposed_time: datetime, window_minutes: int) -> Booking | None:
    proposed = to_naive_utc(proposed_time)
    window_seconds = window_minutes * 60
    for booking in bookings:
        distance = abs((to_naive_utc(booking.scheduled_time) - proposed).total_seconds())
        if distance < window_seconds:
            return booking
    return None


def has_conflict(mentor_id: str, proposed_time: datetime, window_minutes: int) -> bool:
    """True if the mentor has an active booking closer than the window.

    An unknown mentor has no bookings, so this reports no conflict; callers
    validate the mentor separately.
    """
    bookings = repository.list_active_for_mentor(mentor_id)
    return find_conflict(bookings, proposed_time, window_minutes) is not None
