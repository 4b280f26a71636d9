"""User models for authentication and database storage."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class Credentials(BaseModel):
    """Schema for registration and login bodies.

    Both fields are optional here so that missing values are reported by the
    handlers with a single validation message.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class UserInDB(BaseModel):
    """Schema for user stored in database."""
    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserPublic(BaseModel):
    """Public user fields returned alongside a token."""
    id: str
    email: str


class UserResponse(BaseModel):
    """Schema for user response (without sensitive data)."""
    id: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthResponse(BaseModel):
    """Schema for register and login responses."""
    token: str
    user: UserPublic


class MeResponse(BaseModel):
    """Schema for the current-user response."""
    user: UserResponse


class Token(BaseModel):
    """Schema for OAuth2 token response."""
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Schema for decoded token data."""
    user_id: str
    expires_at: Optional[datetime] = Field(default=None)
