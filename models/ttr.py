from datetime import date, datetime, time
from enum import Enum
from pydantic import Field
from typing import List, Optional

from .base import BaseGolfModel


class TTRStatus(str, Enum):
    """Lifecycle of a tee time reservation."""
    OPEN = "OPEN"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class PlayerStatus(str, Enum):
    """A player's attendance on a roster."""
    CONFIRMED = "CONFIRMED"
    MAYBE = "MAYBE"
    DECLINED = "DECLINED"


class CoCaptain(BaseGolfModel):
    ttr_id: str
    user_id: str
    assigned_at: Optional[datetime] = None


class Player(BaseGolfModel):
    ttr_id: str
    user_id: str
    status: PlayerStatus = PlayerStatus.CONFIRMED
    joined_at: Optional[datetime] = None


class TTR(BaseGolfModel):
    """A scheduled golf outing with a capacity-limited roster.

    The captain is always on the roster; co-captains share every management
    right except adding/removing co-captains and deleting the TTR.
    """
    id: Optional[str] = None
    course_name: str = Field(..., min_length=1, max_length=255)
    course_location: Optional[str] = Field(None, max_length=255)
    tee_date: date
    tee_time: time
    max_players: int = Field(4, gt=0)
    created_by_user_id: str
    captain_user_id: str
    status: TTRStatus = TTRStatus.OPEN
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    co_captains: List[CoCaptain] = Field(default_factory=list)
    players: List[Player] = Field(default_factory=list)

    @property
    def player_count(self) -> int:
        return len(self.players)

    def is_full(self) -> bool:
        return self.player_count >= self.max_players

    def is_captain(self, user_id: str) -> bool:
        return self.captain_user_id == user_id

    def is_co_captain(self, user_id: str) -> bool:
        return any(c.user_id == user_id for c in self.co_captains)

    def can_manage(self, user_id: str) -> bool:
        """Captain or co-captain."""
        return self.is_captain(user_id) or self.is_co_captain(user_id)

    def get_player(self, user_id: str) -> Optional[Player]:
        for player in self.players:
            if player.user_id == user_id:
                return player
        return None

    def has_player(self, user_id: str) -> bool:
        return self.get_player(user_id) is not None
