"""Session booking endpoints."""

from fastapi import APIRouter, Depends

from src.auth.dependencies import CurrentUser, get_current_user, require_role
from src.db.models import ROLE_STUDENT
from src.sessions.schemas import BookSessionRequest
from src.sessions.service import book_session, cancel_session, complete_session, confirm_session, list_sessions
from src.utils.validators import success

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.post("/book", status_code=201, summary="Book a session", description="Students request a time slot with a mentor. Fails with 409 if it overlaps another of the mentor's sessions.")
def book(body: BookSessionRequest, user: CurrentUser = Depends(require_role(ROLE_STUDENT))):
    return success(book_session(user, body.mentor_id, body.subject, body.scheduled_time))


@router.get("/me", summary="List own sessions", description="Sessions where the caller is the student or the mentor, soonest first.")
def mine(user: CurrentUser = Depends(get_current_user)):
    return success(list_sessions(user))


@router.put("/{session_id}/confirm", summary="Confirm a session")
def confirm(session_id: str, user: CurrentUser = Depends(get_current_user)):
    return success(confirm_session(user, session_id))


@router.put("/{session_id}/cancel", summary="Cancel a session")
def cancel(session_id: str, user: CurrentUser = Depends(get_current_user)):
    return success(cancel_session(user, session_id))


@router.put("/{session_id}/complete", summary="Complete a session", description="The mentor marks a confirmed session as held once its time has passed.")
def complete(session_id: str, user: CurrentUser = Depends(get_current_user)):
    return success(complete_session(user, session_id))
