"""Public user representation."""

from src.utils.validators import CamelModel


class UserResponse(CamelModel):
    id: str
    username: str
    email: str
    role: str
