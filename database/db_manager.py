from __future__ import annotations

from pathlib import Path
from typing import Optional

import asyncpg

from database.exceptions import DatabaseError
from database.repositories import (
    InvitationRepositoryDB,
    NotificationRepositoryDB,
    RefreshTokenRepositoryDB,
    TTRRepositoryDB,
    UserRepositoryDB,
)


class DatabaseManager:
    """
    PostgreSQL data-access layer: one repository per aggregate over a shared pool.

    Notes:
    - Repositories use raw SQL (no ORM) to keep behavior explicit.
    - Multi-statement writes open their own transaction inside the repository.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        schema_path: Optional[str] = None,
    ) -> None:
        self._pool = pool
        self.schema_path = Path(
            schema_path or Path(__file__).with_name("schema.sql")
        ).resolve()

        self.users = UserRepositoryDB(pool)
        self.refresh_tokens = RefreshTokenRepositoryDB(pool)
        self.ttrs = TTRRepositoryDB(pool)
        self.invitations = InvitationRepositoryDB(pool)
        self.notifications = NotificationRepositoryDB(pool)

    async def initialize_schema(self) -> None:
        """Create tables and indexes defined in `database/schema.sql`."""
        if not self.schema_path.exists():
            raise DatabaseError(f"Schema file not found: {self.schema_path}")

        sql_text = self.schema_path.read_text(encoding="utf-8")
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(sql_text)
