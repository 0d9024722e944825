"""
Pydantic schemas defining the contract for user identity and authentication
across the Presentation (API) and Service Layers.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

# --- Input Schemas (Requests / Commands) ---


class UserRequest(BaseModel):
    """
    Schema for user registration. The password is mandatory for registration; it is
    typed as optional so the service can reject a missing one with its own error.
    """

    username: str = Field(..., min_length=1, max_length=50, description="Unique login name")
    password: str | None = Field(default=None, description="Plain text password (will be hashed)")

    email: EmailStr | None = Field(default=None, description="User's email address")
    country: str | None = Field(default=None, max_length=100)
    city: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=30)
    description: str | None = Field(default=None)
    guild_id: int | None = Field(default=None, description="Guild to join on registration")


class UserUpdateRequest(BaseModel):
    """
    Partial update. Only fields that are explicitly present in the request are applied:
    an omitted field is left unchanged, a field sent as null is cleared.
    """

    username: str | None = Field(default=None, max_length=50, description="New unique login name")
    password: str | None = Field(default=None, description="New password; blank or omitted keeps the current one")

    email: EmailStr | None = Field(default=None)
    country: str | None = Field(default=None, max_length=100)
    city: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=30)
    description: str | None = Field(default=None)
    guild_id: int | None = Field(default=None)


class PasswordChangeRequest(BaseModel):
    """
    Schema for changing password (requires old password verification).
    """

    old_password: str = Field(..., description="Current password for verification")
    new_password: str = Field(..., min_length=1, description="New password")


class LoginRequest(BaseModel):
    """
    Minimal schema for user authentication/login command.
    """

    username: str = Field(..., description="User's login name")
    password: str = Field(..., description="User's plain text password")


# --- Output Schema (Response / Domain Object) ---


class UserResponse(BaseModel):
    """
    Response schema for user information. Credential columns are never exposed.
    """

    # Configuration allows mapping from SQLAlchemy ORM objects
    model_config = {"from_attributes": True}

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Unique login name")
    email: str | None = None
    country: str | None = None
    city: str | None = None
    phone_number: str | None = None
    description: str | None = None
    guild_id: int | None = None
    total_xp: int = Field(default=0, description="User's accumulated XP")

    created_at: datetime = Field(..., description="Date and time of user creation")
    updated_at: datetime = Field(..., description="Date and time of last update")
