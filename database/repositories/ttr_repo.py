"""CRUD operations for ttrs, ttr_co_captains, and ttr_players."""

import asyncpg
from datetime import date
from typing import List, Optional
from uuid import UUID

from models import Player, PlayerStatus, TTR
from database.converters import group_rows_by, player_from_row, ttr_from_rows, ttr_to_row
from database.exceptions import CapacityError, DuplicateError, NotFoundError


async def lock_ttr(conn, ttr_id: UUID):
    """Row-lock a TTR for the rest of the current transaction.

    Returns the (id, max_players) row, or None if the TTR does not exist.
    """
    return await conn.fetchrow(
        "SELECT id, max_players FROM ttrs WHERE id = $1 FOR UPDATE", ttr_id
    )


class TTRRepositoryDB:
    """Async CRUD for tee time reservations and their rosters."""

    # Columns update_ttr may touch
    UPDATABLE = {
        "course_name", "course_location", "tee_date", "tee_time",
        "max_players", "status", "notes",
    }

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Private helpers
    # ================================================================

    async def _assemble(self, conn, ttr_row) -> TTR:
        """Build a full TTR model (co-captains + players) from a ttrs row."""
        co_rows = await conn.fetch(
            "SELECT * FROM ttr_co_captains WHERE ttr_id = $1 ORDER BY assigned_at",
            ttr_row["id"],
        )
        player_rows = await conn.fetch(
            "SELECT * FROM ttr_players WHERE ttr_id = $1", ttr_row["id"]
        )
        return ttr_from_rows(ttr_row, co_rows, player_rows)

    async def _assemble_many(self, conn, ttr_rows) -> List[TTR]:
        """Batch-load rosters for a page of ttrs rows, preserving row order."""
        if not ttr_rows:
            return []
        ids = [r["id"] for r in ttr_rows]
        co_rows = await conn.fetch(
            """SELECT * FROM ttr_co_captains
               WHERE ttr_id = ANY($1::uuid[]) ORDER BY assigned_at""",
            ids,
        )
        player_rows = await conn.fetch(
            "SELECT * FROM ttr_players WHERE ttr_id = ANY($1::uuid[])", ids
        )
        co_by_ttr = group_rows_by(co_rows, "ttr_id")
        players_by_ttr = group_rows_by(player_rows, "ttr_id")
        return [
            ttr_from_rows(r, co_by_ttr.get(r["id"], []), players_by_ttr.get(r["id"], []))
            for r in ttr_rows
        ]

    # ================================================================
    # Read
    # ================================================================

    async def get_ttr(self, ttr_id: str) -> Optional[TTR]:
        """Get a TTR with its co-captains and players."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM ttrs WHERE id = $1", UUID(ttr_id))
            if not row:
                return None
            return await self._assemble(conn, row)

    async def list_ttrs(
        self, *, limit: int = 20, offset: int = 0, status: Optional[str] = None
    ) -> List[TTR]:
        """List TTRs ordered by tee date and time, optionally filtered by status."""
        async with self._pool.acquire() as conn:
            if status:
                rows = await conn.fetch(
                    """SELECT * FROM ttrs WHERE status = $1
                       ORDER BY tee_date, tee_time
                       LIMIT $2 OFFSET $3""",
                    status, limit, offset,
                )
            else:
                rows = await conn.fetch(
                    """SELECT * FROM ttrs
                       ORDER BY tee_date, tee_time
                       LIMIT $1 OFFSET $2""",
                    limit, offset,
                )
            return await self._assemble_many(conn, rows)

    async def list_for_user(
        self, user_id: str, *, upcoming: bool = True, today: Optional[date] = None
    ) -> List[TTR]:
        """TTRs the user captains, co-captains or plays in.

        Upcoming (tee_date >= today) come soonest first; past ones most
        recent first.
        """
        today = today or date.today()
        if upcoming:
            date_filter, order = "t.tee_date >= $2", "t.tee_date ASC, t.tee_time ASC"
        else:
            date_filter, order = "t.tee_date < $2", "t.tee_date DESC, t.tee_time DESC"

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""SELECT DISTINCT t.* FROM ttrs t
                    LEFT JOIN ttr_players p ON p.ttr_id = t.id
                    LEFT JOIN ttr_co_captains c ON c.ttr_id = t.id
                    WHERE (t.captain_user_id = $1 OR p.user_id = $1 OR c.user_id = $1)
                      AND {date_filter}
                    ORDER BY {order}""",
                UUID(user_id), today,
            )
            return await self._assemble_many(conn, rows)

    async def is_co_captain(self, ttr_id: str, user_id: str) -> bool:
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                """SELECT EXISTS(SELECT 1 FROM ttr_co_captains
                   WHERE ttr_id = $1 AND user_id = $2)""",
                UUID(ttr_id), UUID(user_id),
            )

    async def list_players(self, ttr_id: str) -> List[Player]:
        """Roster in join order."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM ttr_players WHERE ttr_id = $1 ORDER BY joined_at",
                UUID(ttr_id),
            )
            return [player_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_ttr(self, ttr: TTR) -> TTR:
        """Insert a TTR and its captain as a CONFIRMED player in one transaction."""
        data = ttr_to_row(ttr)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    """INSERT INTO ttrs
                       (course_name, course_location, tee_date, tee_time, max_players,
                        created_by_user_id, captain_user_id, status, notes)
                       VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9) RETURNING *""",
                    data["course_name"], data["course_location"],
                    data["tee_date"], data["tee_time"], data["max_players"],
                    data["created_by_user_id"], data["captain_user_id"],
                    data["status"], data["notes"],
                )
                await conn.execute(
                    """INSERT INTO ttr_players (ttr_id, user_id, status)
                       VALUES ($1, $2, $3)""",
                    row["id"], data["captain_user_id"], PlayerStatus.CONFIRMED.value,
                )
                return await self._assemble(conn, row)

    async def add_co_captain(self, ttr_id: str, user_id: str) -> None:
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    "INSERT INTO ttr_co_captains (ttr_id, user_id) VALUES ($1, $2)",
                    UUID(ttr_id), UUID(user_id),
                )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"User {user_id} is already a co-captain") from e

    async def add_player_with_capacity(
        self, ttr_id: str, user_id: str, status: PlayerStatus = PlayerStatus.CONFIRMED
    ) -> None:
        """Add a player only if the roster has room.

        The TTR row is locked while counting, so two concurrent joins cannot
        both take the last seat.
        """
        ttr_uuid, user_uuid = UUID(ttr_id), UUID(user_id)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                ttr_row = await lock_ttr(conn, ttr_uuid)
                if not ttr_row:
                    raise NotFoundError(f"TTR {ttr_id} not found")

                count = await conn.fetchval(
                    "SELECT COUNT(*) FROM ttr_players WHERE ttr_id = $1", ttr_uuid
                )
                if count >= ttr_row["max_players"]:
                    raise CapacityError(f"TTR {ttr_id} is full")

                exists = await conn.fetchval(
                    """SELECT EXISTS(SELECT 1 FROM ttr_players
                       WHERE ttr_id = $1 AND user_id = $2)""",
                    ttr_uuid, user_uuid,
                )
                if exists:
                    raise DuplicateError(f"User {user_id} is already a player")

                await conn.execute(
                    """INSERT INTO ttr_players (ttr_id, user_id, status)
                       VALUES ($1, $2, $3)""",
                    ttr_uuid, user_uuid, status.value,
                )

    # ================================================================
    # Update
    # ================================================================

    async def update_ttr(self, ttr_id: str, **fields) -> Optional[TTR]:
        """Overwrite the supplied columns. Keys outside UPDATABLE are ignored."""
        updates = {k: v for k, v in fields.items() if k in self.UPDATABLE}
        if "status" in updates and hasattr(updates["status"], "value"):
            updates["status"] = updates["status"].value
        if not updates:
            return await self.get_ttr(ttr_id)

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [UUID(ttr_id)] + list(updates.values())

        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""UPDATE ttrs SET {set_clause}, updated_at = NOW()
                    WHERE id = $1 RETURNING *""",
                *values,
            )
            if not row:
                return None
            return await self._assemble(conn, row)

    async def update_player_status(
        self, ttr_id: str, user_id: str, status: PlayerStatus
    ) -> Player:
        """Change a player's status in place; joined_at is left alone."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """UPDATE ttr_players SET status = $3
                   WHERE ttr_id = $1 AND user_id = $2 RETURNING *""",
                UUID(ttr_id), UUID(user_id), status.value,
            )
            if not row:
                raise NotFoundError(f"User {user_id} is not a player in TTR {ttr_id}")
            return player_from_row(row)

    # ================================================================
    # Delete
    # ================================================================

    async def delete_ttr(self, ttr_id: str) -> None:
        """Delete a TTR. Co-captains, players and invitations cascade."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM ttrs WHERE id = $1", UUID(ttr_id)
            )
            if result != "DELETE 1":
                raise NotFoundError(f"TTR {ttr_id} not found")

    async def remove_co_captain(self, ttr_id: str, user_id: str) -> None:
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM ttr_co_captains WHERE ttr_id = $1 AND user_id = $2",
                UUID(ttr_id), UUID(user_id),
            )
            if result != "DELETE 1":
                raise NotFoundError(f"User {user_id} is not a co-captain of TTR {ttr_id}")

    async def remove_player(self, ttr_id: str, user_id: str) -> None:
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM ttr_players WHERE ttr_id = $1 AND user_id = $2",
                UUID(ttr_id), UUID(user_id),
            )
            if result != "DELETE 1":
                raise NotFoundError(f"User {user_id} is not a player in TTR {ttr_id}")
