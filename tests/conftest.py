import os
from datetime import date, datetime, time, timezone
from typing import List, Optional
from uuid import uuid4

import pytest

# api.main builds the app at import time and needs a signing secret
os.environ.setdefault("JWT_SECRET", "test-secret")

from database.exceptions import CapacityError, DuplicateError, NotFoundError, StaleStateError
from models import (
    CoCaptain,
    Invitation,
    InvitationStatus,
    Notification,
    Player,
    PlayerStatus,
    RefreshToken,
    TTR,
    User,
)
from services import InvitationService, NotificationService, TTRService


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ================================================================
# In-memory repositories
# ================================================================

class FakeUserRepository:
    def __init__(self):
        self.users = {}

    def add(self, first_name="Test", last_name="User", email=None, password_hash=None) -> User:
        user_id = str(uuid4())
        user = User(
            id=user_id,
            email=email or f"{user_id[:8]}@example.com",
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            created_at=_now(),
            updated_at=_now(),
        )
        self.users[user_id] = user
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        for user in self.users.values():
            if user.email.lower() == email.lower():
                return user.model_copy(deep=True)
        return None

    async def exists(self, user_id: str) -> bool:
        return user_id in self.users

    async def create_user(self, user: User) -> User:
        if await self.get_user_by_email(user.email):
            raise DuplicateError("Email already in use")
        stored = user.model_copy(update={"id": str(uuid4()), "created_at": _now(), "updated_at": _now()})
        self.users[stored.id] = stored
        return stored.model_copy(deep=True)

    async def update_user(self, user_id: str, **fields) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        self.users[user_id] = user.model_copy(update={**fields, "updated_at": _now()})
        return await self.get_user(user_id)

    async def search_users(self, query: str, *, limit: int = 20, offset: int = 0) -> List[User]:
        q = query.lower()
        found = [
            u for u in self.users.values()
            if q in u.first_name.lower() or q in u.last_name.lower() or q in u.email.lower()
        ]
        found.sort(key=lambda u: (u.first_name, u.last_name))
        return found[offset:offset + limit]


class FakeRefreshTokenRepository:
    def __init__(self):
        self.tokens = {}

    async def create_token(self, user_id: str, token_hash: str, expires_at: datetime) -> RefreshToken:
        token = RefreshToken(
            id=str(uuid4()), user_id=user_id, token_hash=token_hash,
            expires_at=expires_at, created_at=_now(),
        )
        self.tokens[token_hash] = token
        return token

    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        return self.tokens.get(token_hash)

    async def revoke_for_user(self, user_id: str) -> int:
        revoked = 0
        for token in self.tokens.values():
            if token.user_id == user_id and not token.revoked:
                token.revoked = True
                revoked += 1
        return revoked


class FakeTTRRepository:
    def __init__(self):
        self.ttrs = {}

    def _stored(self, ttr_id: str) -> TTR:
        ttr = self.ttrs.get(ttr_id)
        if ttr is None:
            raise NotFoundError(f"TTR {ttr_id} not found")
        return ttr

    async def get_ttr(self, ttr_id: str) -> Optional[TTR]:
        ttr = self.ttrs.get(ttr_id)
        return ttr.model_copy(deep=True) if ttr else None

    async def list_ttrs(self, *, limit: int = 20, offset: int = 0, status: Optional[str] = None) -> List[TTR]:
        found = [t for t in self.ttrs.values() if status is None or t.status.value == status]
        found.sort(key=lambda t: (t.tee_date, t.tee_time))
        return [t.model_copy(deep=True) for t in found[offset:offset + limit]]

    async def list_for_user(self, user_id: str, *, upcoming: bool = True, today: Optional[date] = None) -> List[TTR]:
        today = today or date.today()
        found = [
            t for t in self.ttrs.values()
            if (t.is_captain(user_id) or t.is_co_captain(user_id) or t.has_player(user_id))
            and ((t.tee_date >= today) if upcoming else (t.tee_date < today))
        ]
        found.sort(key=lambda t: (t.tee_date, t.tee_time), reverse=not upcoming)
        return [t.model_copy(deep=True) for t in found]

    async def create_ttr(self, ttr: TTR) -> TTR:
        ttr_id = str(uuid4())
        stored = ttr.model_copy(update={
            "id": ttr_id,
            "created_at": _now(),
            "updated_at": _now(),
            "players": [Player(ttr_id=ttr_id, user_id=ttr.captain_user_id, joined_at=_now())],
        })
        self.ttrs[ttr_id] = stored
        return stored.model_copy(deep=True)

    async def update_ttr(self, ttr_id: str, **fields) -> Optional[TTR]:
        if ttr_id not in self.ttrs:
            return None
        ttr = self.ttrs[ttr_id]
        for name, value in fields.items():
            setattr(ttr, name, value)
        ttr.updated_at = _now()
        return await self.get_ttr(ttr_id)

    async def delete_ttr(self, ttr_id: str) -> None:
        self._stored(ttr_id)
        del self.ttrs[ttr_id]

    async def is_co_captain(self, ttr_id: str, user_id: str) -> bool:
        return self._stored(ttr_id).is_co_captain(user_id)

    async def add_co_captain(self, ttr_id: str, user_id: str) -> None:
        ttr = self._stored(ttr_id)
        if ttr.is_co_captain(user_id):
            raise DuplicateError("already a co-captain")
        ttr.co_captains.append(CoCaptain(ttr_id=ttr_id, user_id=user_id, assigned_at=_now()))

    async def remove_co_captain(self, ttr_id: str, user_id: str) -> None:
        ttr = self._stored(ttr_id)
        if not ttr.is_co_captain(user_id):
            raise NotFoundError("not a co-captain")
        ttr.co_captains = [c for c in ttr.co_captains if c.user_id != user_id]

    async def list_players(self, ttr_id: str) -> List[Player]:
        return [p.model_copy() for p in self._stored(ttr_id).players]

    async def add_player_with_capacity(
        self, ttr_id: str, user_id: str, status: PlayerStatus = PlayerStatus.CONFIRMED
    ) -> None:
        ttr = self._stored(ttr_id)
        if ttr.is_full():
            raise CapacityError("full")
        if ttr.has_player(user_id):
            raise DuplicateError("already a player")
        ttr.players.append(Player(ttr_id=ttr_id, user_id=user_id, status=status, joined_at=_now()))

    async def remove_player(self, ttr_id: str, user_id: str) -> None:
        ttr = self._stored(ttr_id)
        if not ttr.has_player(user_id):
            raise NotFoundError("not a player")
        ttr.players = [p for p in ttr.players if p.user_id != user_id]

    async def update_player_status(self, ttr_id: str, user_id: str, status: PlayerStatus) -> Player:
        player = self._stored(ttr_id).get_player(user_id)
        if player is None:
            raise NotFoundError("not a player")
        player.status = status
        return player.model_copy()


class FakeInvitationRepository:
    def __init__(self, ttrs: FakeTTRRepository):
        self.invitations = {}
        self._ttrs = ttrs

    async def get_invitation(self, invitation_id: str) -> Optional[Invitation]:
        invitation = self.invitations.get(invitation_id)
        return invitation.model_copy() if invitation else None

    async def find_pending(self, ttr_id: str, invitee_user_id: str) -> Optional[Invitation]:
        for inv in self.invitations.values():
            if inv.ttr_id == ttr_id and inv.invitee_user_id == invitee_user_id and inv.is_pending():
                return inv.model_copy()
        return None

    async def list_received(self, user_id: str) -> List[Invitation]:
        # dict keeps insertion order, so reversed() is newest first
        return [i for i in reversed(self.invitations.values()) if i.invitee_user_id == user_id]

    async def list_sent(self, user_id: str) -> List[Invitation]:
        return [i for i in reversed(self.invitations.values()) if i.inviter_user_id == user_id]

    async def create_invitation(self, invitation: Invitation) -> Invitation:
        if await self.find_pending(invitation.ttr_id, invitation.invitee_user_id):
            raise DuplicateError("pending invitation exists")
        stored = invitation.model_copy(update={"id": str(uuid4()), "created_at": _now()})
        self.invitations[stored.id] = stored
        return stored.model_copy()

    async def update_status(self, invitation_id: str, status: InvitationStatus) -> Optional[Invitation]:
        invitation = self.invitations.get(invitation_id)
        if invitation is None or not invitation.is_pending():
            return None
        invitation.status = status
        invitation.responded_at = _now()
        return invitation.model_copy()

    async def accept(self, invitation_id: str, ttr_id: str, invitee_user_id: str) -> Invitation:
        ttr = self._ttrs.ttrs.get(ttr_id)
        if ttr is None:
            raise NotFoundError("TTR not found")
        invitation = self.invitations[invitation_id]
        if not invitation.is_pending():
            raise StaleStateError("not pending")
        if ttr.is_full():
            raise CapacityError("full")
        if not ttr.has_player(invitee_user_id):
            ttr.players.append(Player(ttr_id=ttr_id, user_id=invitee_user_id, joined_at=_now()))
        invitation.status = InvitationStatus.YES
        invitation.responded_at = _now()
        return invitation.model_copy()


class FakeNotificationRepository:
    def __init__(self):
        self.notifications = []

    async def create_notification(self, notification: Notification) -> Notification:
        stored = notification.model_copy(update={"id": str(uuid4()), "created_at": _now()})
        self.notifications.append(stored)
        return stored

    async def list_for_user(self, user_id: str, *, limit: int = 20, offset: int = 0, unread_only: bool = False):
        found = [n for n in reversed(self.notifications)
                 if n.user_id == user_id and not (unread_only and n.is_read)]
        return found[offset:offset + limit]

    async def mark_read(self, notification_id: str, user_id: str) -> Optional[Notification]:
        for n in self.notifications:
            if n.id == notification_id and n.user_id == user_id:
                n.is_read = True
                n.read_at = n.read_at or _now()
                return n
        return None

    async def mark_all_read(self, user_id: str) -> int:
        count = 0
        for n in self.notifications:
            if n.user_id == user_id and not n.is_read:
                n.is_read = True
                n.read_at = _now()
                count += 1
        return count


class FailingNotificationRepository(FakeNotificationRepository):
    async def create_notification(self, notification: Notification) -> Notification:
        raise ConnectionError("notification store unavailable")


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def users():
    return FakeUserRepository()


@pytest.fixture
def ttrs():
    return FakeTTRRepository()


@pytest.fixture
def invitations(ttrs):
    return FakeInvitationRepository(ttrs)


@pytest.fixture
def notifications():
    return FakeNotificationRepository()


@pytest.fixture
def ttr_service(ttrs, users):
    return TTRService(ttrs, users)


@pytest.fixture
def invitation_service(invitations, ttrs, users, notifications):
    return InvitationService(invitations, ttrs, users, NotificationService(notifications))


@pytest.fixture
def tee_slot():
    """Keyword arguments for a tee slot in the future."""
    return {
        "course_name": "Pebble Creek",
        "tee_date": date(2099, 6, 1),
        "tee_time": time(8, 30),
    }


@pytest.fixture
def failing_notifications():
    return FailingNotificationRepository()


@pytest.fixture
def refresh_tokens():
    return FakeRefreshTokenRepository()
