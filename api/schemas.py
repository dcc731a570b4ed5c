"""API request bodies and response envelopes."""

from datetime import date, time
from pydantic import BaseModel, EmailStr, Field
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from models import TTRStatus, User

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: {"success": true, "data": ...}."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


def ok(data=None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(data=data, message=message)


# ================================================================
# Auth
# ================================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    user: User
    access_token: str
    refresh_token: str
    expires_at: int


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: int


# ================================================================
# Users
# ================================================================

class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    handicap: Optional[float] = Field(None, ge=0, le=54)
    phone: Optional[str] = Field(None, max_length=20)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)


# ================================================================
# TTRs
# ================================================================

class CreateTTRRequest(BaseModel):
    course_name: str = Field(..., min_length=1, max_length=255)
    course_location: Optional[str] = Field(None, max_length=255)
    tee_date: date
    tee_time: time
    max_players: int = Field(4, ge=1, le=8)
    notes: Optional[str] = None


class UpdateTTRRequest(BaseModel):
    """Only the fields present in the body are applied."""
    course_name: Optional[str] = Field(None, min_length=1, max_length=255)
    course_location: Optional[str] = Field(None, max_length=255)
    tee_date: Optional[date] = None
    tee_time: Optional[time] = None
    max_players: Optional[int] = Field(None, ge=1, le=8)
    status: Optional[TTRStatus] = None
    notes: Optional[str] = None


class AddCoCaptainRequest(BaseModel):
    user_id: UUID


class UpdatePlayerStatusRequest(BaseModel):
    status: str


# ================================================================
# Invitations
# ================================================================

class CreateInvitationRequest(BaseModel):
    ttr_id: UUID
    invitee_user_id: UUID
    message: Optional[str] = Field(None, max_length=1000)


class RespondInvitationRequest(BaseModel):
    status: str


class MarkAllReadResponse(BaseModel):
    updated: int


class MessageResponse(BaseModel):
    message: str


class UserListResponse(BaseModel):
    users: List[User]
    limit: int
    offset: int
