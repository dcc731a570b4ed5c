"""Persistence for user notifications."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import Notification
from database.converters import notification_from_row, notification_to_row


class NotificationRepositoryDB:
    """Async CRUD for notifications."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def create_notification(self, notification: Notification) -> Notification:
        data = notification_to_row(notification)
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """INSERT INTO notifications
                   (user_id, type, title, message, target_type, target_id)
                   VALUES ($1, $2, $3, $4, $5, $6) RETURNING *""",
                data["user_id"], data["type"], data["title"],
                data["message"], data["target_type"], data["target_id"],
            )
            return notification_from_row(row)

    async def list_for_user(
        self,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> List[Notification]:
        """Newest first."""
        unread_filter = "AND is_read = FALSE" if unread_only else ""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""SELECT * FROM notifications
                    WHERE user_id = $1 {unread_filter}
                    ORDER BY created_at DESC
                    LIMIT $2 OFFSET $3""",
                UUID(user_id), limit, offset,
            )
            return [notification_from_row(r) for r in rows]

    async def mark_read(self, notification_id: str, user_id: str) -> Optional[Notification]:
        """Mark one of the user's notifications read. None if not theirs or absent."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """UPDATE notifications SET is_read = TRUE, read_at = COALESCE(read_at, NOW())
                   WHERE id = $1 AND user_id = $2 RETURNING *""",
                UUID(notification_id), UUID(user_id),
            )
            return notification_from_row(row) if row else None

    async def mark_all_read(self, user_id: str) -> int:
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                """UPDATE notifications SET is_read = TRUE, read_at = NOW()
                   WHERE user_id = $1 AND is_read = FALSE""",
                UUID(user_id),
            )
            return int(result.split()[-1])
