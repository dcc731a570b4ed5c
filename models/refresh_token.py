from datetime import datetime, timezone
from typing import Optional

from .base import BaseGolfModel


class RefreshToken(BaseGolfModel):
    """Stored refresh token. Only the sha256 hash of the token is kept."""
    id: Optional[str] = None
    user_id: str
    token_hash: str
    expires_at: datetime
    revoked: bool = False
    created_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return not self.revoked and not self.is_expired(now)
