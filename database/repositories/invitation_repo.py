"""CRUD operations for invitations, including the accept transaction."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import Invitation, InvitationStatus, PlayerStatus
from database.converters import invitation_from_row, invitation_to_row
from database.exceptions import CapacityError, DuplicateError, NotFoundError, StaleStateError
from database.repositories.ttr_repo import lock_ttr


class InvitationRepositoryDB:
    """Async CRUD for invitations."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_invitation(self, invitation_id: str) -> Optional[Invitation]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM invitations WHERE id = $1", UUID(invitation_id)
            )
            return invitation_from_row(row) if row else None

    async def find_pending(self, ttr_id: str, invitee_user_id: str) -> Optional[Invitation]:
        """The open invitation for (ttr, invitee), if any."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT * FROM invitations
                   WHERE ttr_id = $1 AND invitee_user_id = $2 AND status = $3""",
                UUID(ttr_id), UUID(invitee_user_id), InvitationStatus.PENDING.value,
            )
            return invitation_from_row(row) if row else None

    async def list_received(self, user_id: str) -> List[Invitation]:
        """Invitations addressed to the user, newest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM invitations WHERE invitee_user_id = $1
                   ORDER BY created_at DESC""",
                UUID(user_id),
            )
            return [invitation_from_row(r) for r in rows]

    async def list_sent(self, user_id: str) -> List[Invitation]:
        """Invitations the user sent, newest first."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM invitations WHERE inviter_user_id = $1
                   ORDER BY created_at DESC""",
                UUID(user_id),
            )
            return [invitation_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_invitation(self, invitation: Invitation) -> Invitation:
        """Insert a PENDING invitation.

        Raises DuplicateError when another PENDING invitation for the same
        (ttr, invitee) already exists.
        """
        data = invitation_to_row(invitation)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO invitations
                       (ttr_id, inviter_user_id, invitee_user_id, status, message)
                       VALUES ($1, $2, $3, $4, $5) RETURNING *""",
                    data["ttr_id"], data["inviter_user_id"],
                    data["invitee_user_id"], data["status"], data["message"],
                )
                return invitation_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(
                f"Pending invitation already exists for user {invitation.invitee_user_id}"
            ) from e

    # ================================================================
    # Update
    # ================================================================

    async def update_status(
        self, invitation_id: str, status: InvitationStatus
    ) -> Optional[Invitation]:
        """Move a PENDING invitation to a terminal status.

        Returns None if the invitation is no longer PENDING.
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """UPDATE invitations SET status = $2, responded_at = NOW()
                   WHERE id = $1 AND status = $3 RETURNING *""",
                UUID(invitation_id), status.value, InvitationStatus.PENDING.value,
            )
            return invitation_from_row(row) if row else None

    async def accept(self, invitation_id: str, ttr_id: str, invitee_user_id: str) -> Invitation:
        """Add the invitee to the roster and mark the invitation YES, atomically.

        The TTR row is locked before the roster is counted. A full roster
        rejects the answer even when the invitee is already on it; otherwise an
        invitee who is already on the roster is not inserted again.

        Raises:
            NotFoundError: TTR is gone.
            CapacityError: roster is full; the invitation stays PENDING.
            StaleStateError: invitation stopped being PENDING.
        """
        ttr_uuid, invitee_uuid = UUID(ttr_id), UUID(invitee_user_id)
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                ttr_row = await lock_ttr(conn, ttr_uuid)
                if not ttr_row:
                    raise NotFoundError(f"TTR {ttr_id} not found")

                status = await conn.fetchval(
                    "SELECT status FROM invitations WHERE id = $1 FOR UPDATE",
                    UUID(invitation_id),
                )
                if status != InvitationStatus.PENDING.value:
                    raise StaleStateError(f"Invitation {invitation_id} is not pending")

                count = await conn.fetchval(
                    "SELECT COUNT(*) FROM ttr_players WHERE ttr_id = $1", ttr_uuid
                )
                if count >= ttr_row["max_players"]:
                    raise CapacityError(f"TTR {ttr_id} is full")

                already = await conn.fetchval(
                    """SELECT EXISTS(SELECT 1 FROM ttr_players
                       WHERE ttr_id = $1 AND user_id = $2)""",
                    ttr_uuid, invitee_uuid,
                )
                if not already:
                    await conn.execute(
                        """INSERT INTO ttr_players (ttr_id, user_id, status)
                           VALUES ($1, $2, $3)""",
                        ttr_uuid, invitee_uuid, PlayerStatus.CONFIRMED.value,
                    )

                row = await conn.fetchrow(
                    """UPDATE invitations SET status = $2, responded_at = NOW()
                       WHERE id = $1 RETURNING *""",
                    UUID(invitation_id), InvitationStatus.YES.value,
                )
                return invitation_from_row(row)
