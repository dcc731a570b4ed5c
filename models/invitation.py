from datetime import datetime
from enum import Enum
from typing import Optional

from .base import BaseGolfModel


class InvitationStatus(str, Enum):
    """Invitation lifecycle. PENDING is the only non-terminal state."""
    PENDING = "PENDING"
    YES = "YES"
    NO = "NO"
    MAYBE = "MAYBE"
    CANCELED = "CANCELED"


# Statuses an invitee may answer with
RESPONSE_STATUSES = frozenset(
    {InvitationStatus.YES, InvitationStatus.NO, InvitationStatus.MAYBE}
)


class Invitation(BaseGolfModel):
    """An offer from a captain or co-captain to join one TTR."""
    id: Optional[str] = None
    ttr_id: str
    inviter_user_id: str
    invitee_user_id: str
    status: InvitationStatus = InvitationStatus.PENDING
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING
