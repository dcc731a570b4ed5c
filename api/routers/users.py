"""User profile, avatar and search endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from uuid import UUID

from api.dependencies import get_current_user_id, get_user_service
from api.schemas import (
    ApiResponse,
    ChangePasswordRequest,
    MessageResponse,
    UpdateProfileRequest,
    UserListResponse,
    ok,
)
from models import User
from services import UserService

router = APIRouter()

ALLOWED_AVATAR_TYPES = {"image/jpeg", "image/jpg", "image/png"}
MAX_AVATAR_BYTES = 10 << 20


@router.get("/me", response_model=ApiResponse[User])
async def get_me(
    user_id: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    return ok(await users.get_profile(user_id))


@router.put("/me", response_model=ApiResponse[User])
async def update_me(
    req: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    fields = req.model_dump(exclude_unset=True)
    return ok(await users.update_profile(user_id, **fields))


@router.put("/me/password", response_model=ApiResponse[MessageResponse])
async def change_password(
    req: ChangePasswordRequest,
    user_id: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    await users.change_password(user_id, req.old_password, req.new_password)
    return ok(MessageResponse(message="Password changed successfully"))


# ================================================================
# Avatar
# ================================================================

@router.post("/me/avatar", response_model=ApiResponse[User])
async def upload_avatar(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    """Upload a JPEG or PNG avatar (max 10 MB)."""
    if file.content_type not in ALLOWED_AVATAR_TYPES:
        raise HTTPException(400, "Only JPEG and PNG images are allowed")
    if file.size is not None and file.size > MAX_AVATAR_BYTES:
        raise HTTPException(413, "Avatar must be 10 MB or smaller")
    user = await users.upload_avatar(user_id, file.file, file.filename or "", file.content_type)
    return ok(user)


@router.delete("/me/avatar", response_model=ApiResponse[User])
async def delete_avatar(
    user_id: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    return ok(await users.delete_avatar(user_id))


# ================================================================
# Directory
# ================================================================

@router.get("", response_model=ApiResponse[UserListResponse])
async def search_users(
    q: str = Query(""),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    _: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    """Search users by name or email."""
    found = await users.search_users(q, limit=limit, offset=offset)
    return ok(UserListResponse(users=found, limit=limit, offset=offset))


@router.get("/{user_id}", response_model=ApiResponse[User])
async def get_user(
    user_id: UUID,
    _: str = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service),
):
    return ok(await users.get_user(str(user_id)))
