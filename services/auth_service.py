"""Registration, login and refresh-token rotation."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from pydantic import ValidationError

from auth import (
    TokenPair,
    create_access_token,
    generate_refresh_token,
    hash_password,
    hash_refresh_token,
    verify_password,
)
from database.exceptions import DuplicateError
from models import User
from services.errors import AlreadyExistsError, AuthenticationError, InvalidArgumentError
from services.interfaces import RefreshTokenRepository, UserRepository


class AuthService:
    """Issues access/refresh token pairs for users."""

    def __init__(
        self,
        users: UserRepository,
        refresh_tokens: RefreshTokenRepository,
        jwt_secret: str,
        access_duration: timedelta = timedelta(minutes=15),
        refresh_duration: timedelta = timedelta(days=7),
        logger: Optional[logging.Logger] = None,
    ):
        self._users = users
        self._refresh_tokens = refresh_tokens
        self._jwt_secret = jwt_secret
        self._access_duration = access_duration
        self._refresh_duration = refresh_duration
        self._logger = logger or logging.getLogger(__name__)

    async def _create_token_pair(self, user: User) -> TokenPair:
        access_token, expires_at = create_access_token(
            user.id, user.email, self._jwt_secret, self._access_duration
        )
        refresh_token, token_hash = generate_refresh_token()
        await self._refresh_tokens.create_token(
            user.id, token_hash, datetime.now(timezone.utc) + self._refresh_duration
        )
        return TokenPair(access_token, refresh_token, expires_at)

    async def register(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> Tuple[User, TokenPair]:
        if await self._users.get_user_by_email(email) is not None:
            raise AlreadyExistsError("user with this email already exists")

        try:
            user = User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                password_hash=hash_password(password),
            )
        except ValidationError as e:
            raise InvalidArgumentError(e.errors()[0]["msg"]) from e

        try:
            user = await self._users.create_user(user)
        except DuplicateError as e:
            raise AlreadyExistsError("user with this email already exists") from e

        self._logger.info("Registered user %s", user.id)
        return user, await self._create_token_pair(user)

    async def login(self, email: str, password: str) -> Tuple[User, TokenPair]:
        user = await self._users.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            self._logger.warning("Failed login for %s", email)
            raise AuthenticationError("invalid email or password")

        self._logger.info("User %s logged in", user.id)
        return user, await self._create_token_pair(user)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair. Every older refresh token is revoked."""
        stored = await self._refresh_tokens.get_by_hash(hash_refresh_token(refresh_token))
        if stored is None:
            raise AuthenticationError("invalid refresh token")
        if not stored.is_valid():
            raise AuthenticationError("refresh token is invalid or expired")

        user = await self._users.get_user(stored.user_id)
        if user is None:
            raise AuthenticationError("invalid refresh token")

        await self._refresh_tokens.revoke_for_user(user.id)
        return await self._create_token_pair(user)

    async def logout(self, refresh_token: str) -> None:
        """Revoke all of the token owner's refresh tokens."""
        stored = await self._refresh_tokens.get_by_hash(hash_refresh_token(refresh_token))
        if stored is None:
            raise AuthenticationError("invalid refresh token")
        revoked = await self._refresh_tokens.revoke_for_user(stored.user_id)
        self._logger.info("User %s logged out (%d tokens revoked)", stored.user_id, revoked)
