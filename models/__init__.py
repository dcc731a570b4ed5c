from .base import BaseGolfModel
from .invitation import RESPONSE_STATUSES, Invitation, InvitationStatus
from .notification import Notification
from .refresh_token import RefreshToken
from .ttr import TTR, CoCaptain, Player, PlayerStatus, TTRStatus
from .user import User

__all__ = [
    "BaseGolfModel",
    "User",
    "RefreshToken",
    "TTR",
    "TTRStatus",
    "CoCaptain",
    "Player",
    "PlayerStatus",
    "Invitation",
    "InvitationStatus",
    "RESPONSE_STATUSES",
    "Notification",
]
