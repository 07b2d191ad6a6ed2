"""Chat history endpoints (the pull path of the messaging system)."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from src.auth.dependencies import CurrentUser, get_current_user
from src.messages.service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, get_history, list_partners
from src.utils.validators import success

router = APIRouter(tags=["Chat"])


@router.get("/chat/{other_user_id}", summary="Chat history", description="Messages between the caller and another user, newest first. Use the oldest createdAt as the next `before` cursor.")
def history(
    other_user_id: str,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    before: datetime | None = Query(None),
    user: CurrentUser = Depends(get_current_user),
):
    return success(get_history(user.id, other_user_id, limit, before))


@router.get("/conversations", summary="Conversation partners", description="Users the caller has exchanged messages with, most recent first.")
def conversations(user: CurrentUser = Depends(get_current_user)):
    return success(list_partners(user.id))
