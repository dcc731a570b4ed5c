from datetime import datetime
from typing import Optional

from .base import BaseGolfModel


class Notification(BaseGolfModel):
    """A message queued for a user (invitation received, roster changes...)."""
    id: Optional[str] = None
    user_id: str
    type: str
    title: str
    message: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
