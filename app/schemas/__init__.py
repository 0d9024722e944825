from .guild import GuildRequest, GuildResponse, WorkoutRequest, WorkoutResponse
from .user import LoginRequest, PasswordChangeRequest, UserRequest, UserResponse, UserUpdateRequest

__all__ = [
    "GuildRequest",
    "GuildResponse",
    "LoginRequest",
    "PasswordChangeRequest",
    "UserRequest",
    "UserResponse",
    "UserUpdateRequest",
    "WorkoutRequest",
    "WorkoutResponse",
]
