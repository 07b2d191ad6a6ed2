"""Profile and mentor discovery endpoints."""

from fastapi import APIRouter, Depends, Query

from src.auth.dependencies import CurrentUser, get_current_user
from src.profiles.schemas import SaveProfileRequest
from src.profiles.service import get_mentor, get_profile, list_mentors, save_profile
from src.utils.validators import success

router = APIRouter(tags=["Profiles"])


@router.get("/profile/me", summary="Get own profile")
def my_profile(user: CurrentUser = Depends(get_current_user)):
    return success(get_profile(user.id))


@router.post("/profile", summary="Save own profile", description="Create or replace the authenticated user's profile.")
def save(body: SaveProfileRequest, user: CurrentUser = Depends(get_current_user)):
    return success(save_profile(user.id, body.bio, body.subjects, body.availability))


@router.get("/mentors", summary="List mentors", description="All mentors with their profiles, optionally filtered by subject.")
def mentors(
    subject: str | None = Query(None, max_length=100),
    user: CurrentUser = Depends(get_current_user),
):
    return success(list_mentors(subject))


@router.get("/mentors/{mentor_id}", summary="Get a mentor")
def mentor(mentor_id: str, user: CurrentUser = Depends(get_current_user)):
    return success(get_mentor(mentor_id))
