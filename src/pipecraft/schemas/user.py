"""Pydantic schemas for users and sessions."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from pipecraft.schemas.common import EMAIL_PATTERN, PatchBody


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = Field(None, min_length=10, max_length=15)
    age: Optional[int] = Field(None, ge=0)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class UserUpdate(PatchBody):
    """Admin edit of a user profile (avatar arrives as a file, not here)."""

    nullable_fields = frozenset({"phone", "age"})

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, min_length=10, max_length=15)
    age: Optional[int] = Field(None, ge=0)


class UserRead(BaseModel):
    """Public view of a user — never includes the hash or refresh token."""

    id: str
    email: str
    name: str
    role: Literal["admin", "user"]
    phone: Optional[str] = None
    age: Optional[int] = None
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SessionTokens(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResult(SessionTokens):
    user: UserRead
