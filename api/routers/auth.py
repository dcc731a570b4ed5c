"""Registration, login and token endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_auth_service
from api.schemas import (
    ApiResponse,
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    ok,
)
from services import AuthService

router = APIRouter()


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=201)
async def register(req: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    user, tokens = await auth.register(req.email, req.password, req.first_name, req.last_name)
    return ok(AuthResponse(user=user, **tokens._asdict()))


@router.post("/login", response_model=ApiResponse[AuthResponse])
async def login(req: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    user, tokens = await auth.login(req.email, req.password)
    return ok(AuthResponse(user=user, **tokens._asdict()))


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh(req: RefreshRequest, auth: AuthService = Depends(get_auth_service)):
    tokens = await auth.refresh(req.refresh_token)
    return ok(TokenResponse(**tokens._asdict()))


@router.post("/logout", response_model=ApiResponse[MessageResponse])
async def logout(req: RefreshRequest, auth: AuthService = Depends(get_auth_service)):
    await auth.logout(req.refresh_token)
    return ok(MessageResponse(message="Logged out successfully"))
