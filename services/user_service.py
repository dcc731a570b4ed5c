"""Profile, password and avatar management, plus user search."""

import logging
from typing import BinaryIO, List, Optional

from botocore.exceptions import ClientError

from auth import hash_password, verify_password
from models import User
from services.errors import AuthenticationError, InvalidArgumentError, ResourceNotFoundError
from services.interfaces import UserRepository
from storage.s3 import S3Storage


class UserService:

    PROFILE_FIELDS = frozenset({"first_name", "last_name", "handicap", "phone"})

    def __init__(
        self,
        users: UserRepository,
        storage: Optional[S3Storage] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._users = users
        self._storage = storage
        self._logger = logger or logging.getLogger(__name__)

    async def _require_user(self, user_id: str) -> User:
        user = await self._users.get_user(user_id)
        if user is None:
            raise ResourceNotFoundError("user not found")
        return user

    def _require_storage(self) -> S3Storage:
        if self._storage is None:
            raise InvalidArgumentError("avatar storage is not configured")
        return self._storage

    async def get_profile(self, user_id: str) -> User:
        return await self._require_user(user_id)

    async def get_user(self, user_id: str) -> User:
        return await self._require_user(user_id)

    async def update_profile(self, user_id: str, **fields) -> User:
        """Overwrite the supplied profile fields, validated against the User model."""
        user = await self._require_user(user_id)
        unknown = set(fields) - self.PROFILE_FIELDS
        if unknown:
            raise InvalidArgumentError(f"cannot update field(s): {', '.join(sorted(unknown))}")

        for name, value in fields.items():
            error = user.update_field(name, value)
            if error:
                raise InvalidArgumentError(f"{name}: {error}")

        updated = await self._users.update_user(
            user_id, **{name: getattr(user, name) for name in fields}
        )
        if updated is None:
            raise ResourceNotFoundError("user not found")
        return updated

    async def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        user = await self._require_user(user_id)
        if not verify_password(old_password, user.password_hash):
            raise AuthenticationError("invalid old password")
        await self._users.update_user(user_id, password_hash=hash_password(new_password))
        self._logger.info("Password changed for user %s", user_id)

    async def upload_avatar(
        self, user_id: str, file: BinaryIO, filename: str, content_type: str
    ) -> User:
        """Store a new avatar, then delete the previous object.

        The old object is removed only after the profile points at the new
        one. A failed cleanup is logged and leaves an orphaned object.
        """
        storage = self._require_storage()
        user = await self._require_user(user_id)
        old_url = user.avatar_url

        url = await storage.upload_file(file, filename, content_type)
        updated = await self._users.update_user(user_id, avatar_url=url)
        self._logger.info("Avatar uploaded for user %s", user_id)

        if old_url:
            try:
                await storage.delete_file(old_url)
            except ClientError:
                self._logger.exception("Failed to delete old avatar %s", old_url)
        return updated

    async def delete_avatar(self, user_id: str) -> User:
        user = await self._require_user(user_id)
        if user.avatar_url:
            await self._require_storage().delete_file(user.avatar_url)
        return await self._users.update_user(user_id, avatar_url=None)

    async def search_users(
        self, query: str, *, limit: int = 20, offset: int = 0
    ) -> List[User]:
        """Case-insensitive match on first name, last name or email."""
        if not query or not query.strip():
            return []
        return await self._users.search_users(query.strip(), limit=limit, offset=offset)
