"""Persistence for hashed refresh tokens."""

import asyncpg
from datetime import datetime
from typing import Optional
from uuid import UUID

from models import RefreshToken
from database.converters import refresh_token_from_row


class RefreshTokenRepositoryDB:
    """Async CRUD for refresh_tokens."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def create_token(
        self, user_id: str, token_hash: str, expires_at: datetime
    ) -> RefreshToken:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """INSERT INTO refresh_tokens (user_id, token_hash, expires_at)
                   VALUES ($1, $2, $3) RETURNING *""",
                UUID(user_id), token_hash, expires_at,
            )
            return refresh_token_from_row(row)

    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM refresh_tokens WHERE token_hash = $1", token_hash
            )
            return refresh_token_from_row(row) if row else None

    async def revoke_for_user(self, user_id: str) -> int:
        """Revoke every live token of a user. Returns how many were revoked."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                """UPDATE refresh_tokens SET revoked = TRUE
                   WHERE user_id = $1 AND revoked = FALSE""",
                UUID(user_id),
            )
            return int(result.split()[-1])

    async def delete_expired(self) -> int:
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM refresh_tokens WHERE expires_at < NOW()"
            )
            return int(result.split()[-1])
