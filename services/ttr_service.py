"""TTR roster manager: creation, co-captains, joining/leaving and player status."""

import logging
from datetime import date, time
from typing import List, Optional

from pydantic import ValidationError

from database.exceptions import CapacityError, DuplicateError, NotFoundError
from models import Player, PlayerStatus, TTR, TTRStatus
from services.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    InvalidOperationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    RosterFullError,
)
from services.interfaces import TTRRepository, UserRepository


class TTRService:
    """Business rules for tee time reservations.

    Roles: the captain may do anything; a co-captain may do everything except
    manage co-captains and delete the TTR; any user may join or leave.
    """

    # Fields a captain or co-captain may change through update_ttr
    UPDATABLE_FIELDS = frozenset({
        "course_name", "course_location", "tee_date", "tee_time",
        "max_players", "status", "notes",
    })

    def __init__(
        self,
        ttrs: TTRRepository,
        users: UserRepository,
        logger: Optional[logging.Logger] = None,
    ):
        self._ttrs = ttrs
        self._users = users
        self._logger = logger or logging.getLogger(__name__)

    # ================================================================
    # Helpers
    # ================================================================

    async def _require_ttr(self, ttr_id: str) -> TTR:
        ttr = await self._ttrs.get_ttr(ttr_id)
        if ttr is None:
            raise ResourceNotFoundError("TTR not found")
        return ttr

    async def is_captain(self, ttr_id: str, user_id: str) -> bool:
        ttr = await self._require_ttr(ttr_id)
        return ttr.is_captain(user_id)

    async def can_manage(self, ttr_id: str, user_id: str) -> bool:
        """Captain or co-captain. Raises ResourceNotFoundError for a missing TTR."""
        ttr = await self._require_ttr(ttr_id)
        return ttr.can_manage(user_id)

    # ================================================================
    # TTR lifecycle
    # ================================================================

    async def create_ttr(
        self,
        actor_id: str,
        course_name: str,
        tee_date: date,
        tee_time: time,
        max_players: int,
        course_location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> TTR:
        """Create a TTR with the actor as creator, captain and first player."""
        if max_players <= 0:
            raise InvalidArgumentError("max_players must be greater than 0")
        if not await self._users.exists(actor_id):
            raise ResourceNotFoundError("user not found")

        try:
            ttr = TTR(
                course_name=course_name,
                course_location=course_location,
                tee_date=tee_date,
                tee_time=tee_time,
                max_players=max_players,
                created_by_user_id=actor_id,
                captain_user_id=actor_id,
                notes=notes,
            )
        except ValidationError as e:
            raise InvalidArgumentError(e.errors()[0]["msg"]) from e

        created = await self._ttrs.create_ttr(ttr)
        self._logger.info("TTR %s created by %s at %s", created.id, actor_id, course_name)
        return created

    async def get_ttr(self, ttr_id: str) -> TTR:
        return await self._require_ttr(ttr_id)

    async def update_ttr(self, ttr_id: str, actor_id: str, **fields) -> TTR:
        """Partial update keyed on presence: every supplied field overwrites.

        Values are validated by applying them to the loaded TTR, so a required
        field cannot be cleared and status must be a known TTRStatus.
        """
        ttr = await self._require_ttr(ttr_id)
        if not ttr.can_manage(actor_id):
            raise PermissionDeniedError(
                "unauthorized: only captain or co-captain can update TTR"
            )

        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise InvalidArgumentError(f"cannot update field(s): {', '.join(sorted(unknown))}")

        if "max_players" in fields:
            max_players = fields["max_players"]
            if max_players is None or max_players <= 0:
                raise InvalidArgumentError("max_players must be greater than 0")
            if max_players < ttr.player_count:
                raise InvalidArgumentError(
                    f"max_players cannot be less than the current roster size ({ttr.player_count})"
                )

        for name, value in fields.items():
            error = ttr.update_field(name, value)
            if error:
                raise InvalidArgumentError(f"{name}: {error}")

        updated = await self._ttrs.update_ttr(
            ttr_id, **{name: getattr(ttr, name) for name in fields}
        )
        if updated is None:
            raise ResourceNotFoundError("TTR not found")
        self._logger.info("TTR %s updated by %s (%s)", ttr_id, actor_id, ", ".join(sorted(fields)))
        return updated

    async def delete_ttr(self, ttr_id: str, actor_id: str) -> None:
        ttr = await self._require_ttr(ttr_id)
        if not ttr.is_captain(actor_id):
            raise PermissionDeniedError("unauthorized: only captain can delete TTR")
        try:
            await self._ttrs.delete_ttr(ttr_id)
        except NotFoundError as e:
            raise ResourceNotFoundError("TTR not found") from e
        self._logger.info("TTR %s deleted by %s", ttr_id, actor_id)

    async def search_ttrs(
        self, *, limit: int = 20, offset: int = 0, status: Optional[str] = None
    ) -> List[TTR]:
        """List TTRs by tee date/time ascending, optionally by exact status."""
        if status is not None:
            try:
                status = TTRStatus(status).value
            except ValueError as e:
                raise InvalidArgumentError(f"invalid TTR status: {status}") from e
        return await self._ttrs.list_ttrs(limit=limit, offset=offset, status=status)

    async def list_user_ttrs(self, user_id: str, *, upcoming: bool = True) -> List[TTR]:
        """TTRs the user captains, co-captains or plays in."""
        return await self._ttrs.list_for_user(user_id, upcoming=upcoming)

    # ================================================================
    # Co-captains
    # ================================================================

    async def add_co_captain(self, ttr_id: str, actor_id: str, target_user_id: str) -> None:
        ttr = await self._require_ttr(ttr_id)
        if not ttr.is_captain(actor_id):
            raise PermissionDeniedError("unauthorized: only captain can add co-captains")
        if not await self._users.exists(target_user_id):
            raise ResourceNotFoundError("co-captain user not found")
        if await self._ttrs.is_co_captain(ttr_id, target_user_id):
            raise AlreadyExistsError("user is already a co-captain")

        try:
            await self._ttrs.add_co_captain(ttr_id, target_user_id)
        except DuplicateError as e:
            raise AlreadyExistsError("user is already a co-captain") from e
        self._logger.info("User %s made co-captain of TTR %s", target_user_id, ttr_id)

    async def remove_co_captain(self, ttr_id: str, actor_id: str, target_user_id: str) -> None:
        ttr = await self._require_ttr(ttr_id)
        if not ttr.is_captain(actor_id):
            raise PermissionDeniedError("unauthorized: only captain can remove co-captains")
        try:
            await self._ttrs.remove_co_captain(ttr_id, target_user_id)
        except NotFoundError as e:
            raise ResourceNotFoundError("user is not a co-captain") from e
        self._logger.info("User %s removed as co-captain of TTR %s", target_user_id, ttr_id)

    # ================================================================
    # Roster
    # ================================================================

    async def join_ttr(self, ttr_id: str, actor_id: str) -> None:
        """Self-join as a CONFIRMED player if there is room."""
        try:
            await self._ttrs.add_player_with_capacity(ttr_id, actor_id, PlayerStatus.CONFIRMED)
        except NotFoundError as e:
            raise ResourceNotFoundError("TTR not found") from e
        except CapacityError as e:
            raise RosterFullError("TTR is full") from e
        except DuplicateError as e:
            raise AlreadyExistsError("user is already a player") from e
        self._logger.info("User %s joined TTR %s", actor_id, ttr_id)

    async def leave_ttr(self, ttr_id: str, actor_id: str) -> None:
        ttr = await self._require_ttr(ttr_id)
        if ttr.is_captain(actor_id):
            raise InvalidOperationError("captain cannot leave TTR")
        try:
            await self._ttrs.remove_player(ttr_id, actor_id)
        except NotFoundError as e:
            raise ResourceNotFoundError("player not found in TTR") from e
        self._logger.info("User %s left TTR %s", actor_id, ttr_id)

    async def update_player_status(
        self, ttr_id: str, actor_id: str, target_user_id: str, status: str
    ) -> Player:
        """Set a player's status in place; joined_at is preserved."""
        ttr = await self._require_ttr(ttr_id)
        if not ttr.can_manage(actor_id):
            raise PermissionDeniedError(
                "unauthorized: only captain or co-captain can update player status"
            )
        try:
            new_status = PlayerStatus(status)
        except ValueError as e:
            raise InvalidArgumentError("invalid player status") from e

        try:
            player = await self._ttrs.update_player_status(ttr_id, target_user_id, new_status)
        except NotFoundError as e:
            raise ResourceNotFoundError("player not found in TTR") from e
        self._logger.info(
            "Player %s in TTR %s set to %s by %s", target_user_id, ttr_id, new_status.value, actor_id
        )
        return player

    async def get_players(self, ttr_id: str) -> List[Player]:
        await self._require_ttr(ttr_id)
        return await self._ttrs.list_players(ttr_id)
