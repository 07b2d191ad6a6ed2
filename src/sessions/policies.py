"""Authorization predicates for booking actions.

Each rule is evaluated against (user, booking) before the action runs.
"""

from src.auth.dependencies import CurrentUser
from src.db.models import ROLE_MENTOR, ROLE_STUDENT, Booking
from src.utils.errors import AuthorizationError


def is_participant(user: CurrentUser, booking: Booking) -> bool:
    return user.id in (booking.student_id, booking.mentor_id)


def is_booking_mentor(user: CurrentUser, booking: Booking) -> bool:
    return user.role == ROLE_MENTOR and booking.mentor_id == user.id


def can_book(user: CurrentUser) -> bool:
    return user.role == ROLE_STUDENT


def can_confirm(user: CurrentUser, booking: Booking) -> bool:
    return is_booking_mentor(user, booking)


def can_cancel(user: CurrentUser, booking: Booking) -> bool:
    return is_participant(user, booking)


def can_complete(user: CurrentUser, booking: Booking) -> bool:
    return is_booking_mentor(user, booking)


def authorize(allowed: bool, message: str) -> None:
    if not allowed:
        raise AuthorizationError(message)
