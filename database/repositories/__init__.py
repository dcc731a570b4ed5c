from .user_repo import UserRepositoryDB
from .refresh_token_repo import RefreshTokenRepositoryDB
from .ttr_repo import TTRRepositoryDB
from .invitation_repo import InvitationRepositoryDB
from .notification_repo import NotificationRepositoryDB

__all__ = [
    "UserRepositoryDB",
    "RefreshTokenRepositoryDB",
    "TTRRepositoryDB",
    "InvitationRepositoryDB",
    "NotificationRepositoryDB",
]
