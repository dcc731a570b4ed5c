"""CRUD operations for the users table."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import User
from database.converters import user_from_row, user_to_row
from database.exceptions import DuplicateError, NotFoundError


class UserRepositoryDB:
    """Async CRUD for users. Soft-deleted rows are invisible to every read."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM users WHERE id = $1 AND deleted_at IS NULL",
                UUID(user_id),
            )
            return user_from_row(row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM users WHERE LOWER(email) = LOWER($1) AND deleted_at IS NULL",
                email,
            )
            return user_from_row(row) if row else None

    async def exists(self, user_id: str) -> bool:
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT EXISTS(SELECT 1 FROM users WHERE id = $1 AND deleted_at IS NULL)",
                UUID(user_id),
            )

    async def search_users(
        self, query: str, *, limit: int = 20, offset: int = 0
    ) -> List[User]:
        """Match first name, last name or email, ordered by name."""
        pattern = f"%{query}%"
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM users
                   WHERE deleted_at IS NULL
                     AND (first_name ILIKE $1 OR last_name ILIKE $1 OR email ILIKE $1)
                   ORDER BY first_name, last_name
                   LIMIT $2 OFFSET $3""",
                pattern, limit, offset,
            )
            return [user_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_user(self, user: User) -> User:
        """Create a new user. Returns User with DB-generated id."""
        data = user_to_row(user)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO users
                       (email, password_hash, first_name, last_name, handicap, phone, avatar_url)
                       VALUES ($1, $2, $3, $4, $5, $6, $7) RETURNING *""",
                    data["email"], data["password_hash"],
                    data["first_name"], data["last_name"],
                    data["handicap"], data["phone"], data["avatar_url"],
                )
                return user_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Email already in use: {e}") from e

    # ================================================================
    # Update
    # ================================================================

    async def update_user(self, user_id: str, **fields) -> Optional[User]:
        """Update profile fields (first_name, last_name, handicap, phone, avatar_url, password_hash)."""
        allowed = {"first_name", "last_name", "handicap", "phone", "avatar_url", "password_hash"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            return await self.get_user(user_id)

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [UUID(user_id)] + list(updates.values())

        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""UPDATE users SET {set_clause}, updated_at = NOW()
                    WHERE id = $1 AND deleted_at IS NULL RETURNING *""",
                *values,
            )
            return user_from_row(row) if row else None

    # ================================================================
    # Delete
    # ================================================================

    async def soft_delete_user(self, user_id: str) -> None:
        """Mark a user deleted. Rows referencing the user are kept."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "UPDATE users SET deleted_at = NOW() WHERE id = $1 AND deleted_at IS NULL",
                UUID(user_id),
            )
            if result == "UPDATE 0":
                raise NotFoundError(f"User {user_id} not found")
