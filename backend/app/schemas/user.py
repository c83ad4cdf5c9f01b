"""
Pydantic schemas for authentication requests and responses.

Request fields are typed loosely; the rules in app.core.validation decide
what is acceptable and which message comes back first.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class RegisterRequest(BaseModel):
    """Schema for user registration."""
    username: Any = None
    password: Any = None


class LoginRequest(BaseModel):
    """Schema for user login."""
    username: Any = None
    password: Any = None


class ChangePasswordRequest(BaseModel):
    """Schema for password change."""
    model_config = ConfigDict(populate_by_name=True)

    current_password: Any = Field(None, alias="currentPassword")
    new_password: Any = Field(None, alias="newPassword")


class UserIdentity(BaseModel):
    """Public identity of the logged-in user."""
    id: int
    username: str


class RegisterResponse(BaseModel):
    message: str
    user_id: int = Field(..., serialization_alias="userId")


class LoginResponse(BaseModel):
    message: str
    user: UserIdentity


class MeResponse(BaseModel):
    user: Optional[UserIdentity] = None


class MessageResponse(BaseModel):
    message: str
