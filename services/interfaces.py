"""Repository interfaces the services depend on.

The asyncpg repositories in ``database.repositories`` satisfy these; any
class with matching method signatures does too (tests use in-memory fakes).
"""

from datetime import date, datetime
from typing import List, Optional, Protocol

from models import (
    Invitation,
    InvitationStatus,
    Notification,
    Player,
    PlayerStatus,
    RefreshToken,
    TTR,
    User,
)


class UserRepository(Protocol):
    async def get_user(self, user_id: str) -> Optional[User]: ...

    async def get_user_by_email(self, email: str) -> Optional[User]: ...

    async def exists(self, user_id: str) -> bool: ...

    async def create_user(self, user: User) -> User: ...

    async def update_user(self, user_id: str, **fields) -> Optional[User]: ...

    async def search_users(
        self, query: str, *, limit: int = 20, offset: int = 0
    ) -> List[User]: ...


class RefreshTokenRepository(Protocol):
    async def create_token(
        self, user_id: str, token_hash: str, expires_at: datetime
    ) -> RefreshToken: ...

    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]: ...

    async def revoke_for_user(self, user_id: str) -> int: ...


class TTRRepository(Protocol):
    async def get_ttr(self, ttr_id: str) -> Optional[TTR]: ...

    async def list_ttrs(
        self, *, limit: int = 20, offset: int = 0, status: Optional[str] = None
    ) -> List[TTR]: ...

    async def list_for_user(
        self, user_id: str, *, upcoming: bool = True, today: Optional[date] = None
    ) -> List[TTR]: ...

    async def create_ttr(self, ttr: TTR) -> TTR: ...

    async def update_ttr(self, ttr_id: str, **fields) -> Optional[TTR]: ...

    async def delete_ttr(self, ttr_id: str) -> None: ...

    async def is_co_captain(self, ttr_id: str, user_id: str) -> bool: ...

    async def add_co_captain(self, ttr_id: str, user_id: str) -> None: ...

    async def remove_co_captain(self, ttr_id: str, user_id: str) -> None: ...

    async def list_players(self, ttr_id: str) -> List[Player]: ...

    async def add_player_with_capacity(
        self, ttr_id: str, user_id: str, status: PlayerStatus = PlayerStatus.CONFIRMED
    ) -> None: ...

    async def remove_player(self, ttr_id: str, user_id: str) -> None: ...

    async def update_player_status(
        self, ttr_id: str, user_id: str, status: PlayerStatus
    ) -> Player: ...


class InvitationRepository(Protocol):
    async def get_invitation(self, invitation_id: str) -> Optional[Invitation]: ...

    async def find_pending(
        self, ttr_id: str, invitee_user_id: str
    ) -> Optional[Invitation]: ...

    async def list_received(self, user_id: str) -> List[Invitation]: ...

    async def list_sent(self, user_id: str) -> List[Invitation]: ...

    async def create_invitation(self, invitation: Invitation) -> Invitation: ...

    async def update_status(
        self, invitation_id: str, status: InvitationStatus
    ) -> Optional[Invitation]: ...

    async def accept(
        self, invitation_id: str, ttr_id: str, invitee_user_id: str
    ) -> Invitation: ...


class NotificationRepository(Protocol):
    async def create_notification(self, notification: Notification) -> Notification: ...

    async def list_for_user(
        self,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> List[Notification]: ...

    async def mark_read(
        self, notification_id: str, user_id: str
    ) -> Optional[Notification]: ...

    async def mark_all_read(self, user_id: str) -> int: ...
