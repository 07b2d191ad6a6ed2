"""Booking business logic: creation with conflict checks and status transitions."""

import logging
import threading
from datetime import datetime

from src.auth.dependencies import CurrentUser
from src.config.settings import get_settings
from src.db.models import (
    ROLE_MENTOR,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
    Booking,
)
from src.sessions import policies, repository
from src.sessions.conflicts import has_conflict
from src.sessions.schemas import SessionResponse, SessionWithUsersResponse
from src.users import repository as user_repository
from src.users.schemas import UserResponse
from src.utils.errors import ConflictError, NotFoundError
from src.utils.validators import to_naive_utc, utc_now

logger = logging.getLogger(__name__)

# Allowed status moves; completed and cancelled are terminal
TRANSITIONS: dict[str, set[str]] = {
    STATUS_PENDING: {STATUS_CONFIRMED, STATUS_CANCELLED},
    STATUS_CONFIRMED: {STATUS_CANCELLED, STATUS_COMPLETED},
}

# Serializes conflict check + insert so two overlapping requests cannot both pass
_booking_lock = threading.Lock()


def _get_booking(booking_id: str) -> Booking:
    booking = repository.get_by_id(booking_id)
    if booking is None:
        raise NotFoundError("Session not found")
    return booking


def _transition(booking: Booking, status: str) -> SessionResponse:
    if status not in TRANSITIONS.get(booking.status, set()):
        raise ConflictError(f"Cannot change a {booking.status} session to {status}")

    updated = repository.update_status(booking.id, booking.status, status)
    if updated is None:
        raise ConflictError("Session status changed concurrently")

    logger.info("Session %s: %s -> %s", booking.id, booking.status, status)
    return SessionResponse.model_validate(updated)


def book_session(user: CurrentUser, mentor_id: str, subject: str, scheduled_time: datetime) -> SessionResponse:
    policies.authorize(policies.can_book(user), "Only students can book sessions")

    mentor = user_repository.get_by_id(mentor_id)
    if mentor is None or mentor.role != ROLE_MENTOR:
        raise NotFoundError("Mentor not found")

    window = get_settings().BOOKING_CONFLICT_WINDOW_MINUTES
    when = to_naive_utc(scheduled_time)

    with _booking_lock:
        if has_conflict(mentor_id, when, window):
            logger.info("Rejected booking for mentor %s at %s: conflict", mentor_id, when.isoformat())
            raise ConflictError(f"Mentor already has a session within {window} minutes of this time")
        booking = repository.create(user.id, mentor_id, subject, when)

    logger.info("Booked session %s for student %s with mentor %s", booking.id, user.id, mentor_id)
    return SessionResponse.model_validate(booking)


def confirm_session(user: CurrentUser, booking_id: str) -> SessionResponse:
    booking = _get_booking(booking_id)
    policies.authorize(policies.can_confirm(user, booking), "Only the mentor can confirm this session")
    return _transition(booking, STATUS_CONFIRMED)


def cancel_session(user: CurrentUser, booking_id: str) -> SessionResponse:
    booking = _get_booking(booking_id)
    policies.authorize(policies.can_cancel(user, booking), "Only participants can cancel this session")
    return _transition(booking, STATUS_CANCELLED)


def complete_session(user: CurrentUser, booking_id: str) -> SessionResponse:
    booking = _get_booking(booking_id)
    policies.authorize(policies.can_complete(user, booking), "Only the mentor can complete this session")
    if booking.status == STATUS_CONFIRMED and booking.scheduled_time > utc_now():
        raise ConflictError("Session has not taken place yet")
    return _transition(booking, STATUS_COMPLETED)


def list_sessions(user: CurrentUser) -> list[SessionWithUsersResponse]:
    bookings = repository.list_for_user(user.id)
    users = user_repository.get_many({b.student_id for b in bookings} | {b.mentor_id for b in bookings})

    results = []
    for booking in bookings:
        view = SessionWithUsersResponse.model_validate(booking)
        student = users.get(booking.student_id)
        mentor = users.get(booking.mentor_id)
        view.student = UserResponse.model_validate(student) if student else None
        view.mentor = UserResponse.model_validate(mentor) if mentor else None
        results.append(view)
    return results
