import logging
from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.config import Settings, get_settings
from auth import InvalidTokenError, decode_access_token
from database.db_manager import DatabaseManager
from services import (
    AuthService,
    InvitationService,
    NotificationService,
    TTRService,
    UserService,
)
from storage.s3 import S3Storage

security = HTTPBearer(auto_error=False)


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_storage(request: Request) -> Optional[S3Storage]:
    """Avatar storage, or None when no bucket is configured."""
    return getattr(request.app.state, "storage", None)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> str:
    """Resolve the caller from the bearer access token."""
    if credentials is None:
        raise HTTPException(401, "Missing authorization header",
                            headers={"WWW-Authenticate": "Bearer"})
    try:
        claims = decode_access_token(credentials.credentials, settings.jwt_secret)
    except InvalidTokenError:
        raise HTTPException(401, "Invalid or expired token",
                            headers={"WWW-Authenticate": "Bearer"})
    return claims.user_id


# ================================================================
# Services
# ================================================================

def get_notification_service(db: DatabaseManager = Depends(get_db)) -> NotificationService:
    return NotificationService(
        db.notifications, logger=logging.getLogger("services.notifications")
    )


def get_ttr_service(db: DatabaseManager = Depends(get_db)) -> TTRService:
    return TTRService(db.ttrs, db.users, logger=logging.getLogger("services.ttrs"))


def get_invitation_service(
    db: DatabaseManager = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
) -> InvitationService:
    return InvitationService(
        db.invitations,
        db.ttrs,
        db.users,
        notifications,
        logger=logging.getLogger("services.invitations"),
    )


def get_auth_service(
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(
        db.users,
        db.refresh_tokens,
        settings.jwt_secret,
        access_duration=timedelta(minutes=settings.access_token_minutes),
        refresh_duration=timedelta(days=settings.refresh_token_days),
        logger=logging.getLogger("services.auth"),
    )


def get_user_service(
    db: DatabaseManager = Depends(get_db),
    storage: Optional[S3Storage] = Depends(get_storage),
) -> UserService:
    return UserService(db.users, storage, logger=logging.getLogger("services.users"))
