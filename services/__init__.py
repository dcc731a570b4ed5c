from services.errors import (
    AlreadyExistsError,
    AuthenticationError,
    InvalidArgumentError,
    InvalidOperationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    RosterFullError,
    ServiceError,
)
from services.auth_service import AuthService
from services.invitation_service import InvitationService
from services.notification_service import NotificationService
from services.ttr_service import TTRService
from services.user_service import UserService

__all__ = [
    "ServiceError",
    "ResourceNotFoundError",
    "PermissionDeniedError",
    "InvalidArgumentError",
    "AlreadyExistsError",
    "RosterFullError",
    "InvalidOperationError",
    "AuthenticationError",
    "AuthService",
    "InvitationService",
    "NotificationService",
    "TTRService",
    "UserService",
]
