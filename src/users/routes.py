"""User lookup endpoint."""

from fastapi import APIRouter, Depends

from src.auth.dependencies import CurrentUser, get_current_user
from src.users import repository
from src.users.schemas import UserResponse
from src.utils.errors import NotFoundError
from src.utils.validators import success

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/{user_id}", summary="Get a user", description="Public view of any registered user.")
def get_user(user_id: str, user: CurrentUser = Depends(get_current_user)):
    found = repository.get_by_id(user_id)
    if found is None:
        raise NotFoundError("User not found")
    return success(UserResponse.model_validate(found))
