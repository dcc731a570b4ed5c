"""Access (JWT) and refresh token helpers."""

import base64
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Access token is malformed, badly signed or expired."""


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str
    expires_at: int  # access token expiry, unix seconds


class AccessClaims(NamedTuple):
    user_id: str
    email: str


def create_access_token(
    user_id: str,
    email: str,
    secret: str,
    expires_delta: timedelta,
    now: Optional[datetime] = None,
) -> tuple:
    """Sign an HS256 access token. Returns (token, expiry as unix seconds)."""
    now = now or datetime.now(timezone.utc)
    expire = now + expires_delta
    claims = {
        "sub": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "nbf": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM), int(expire.timestamp())


def decode_access_token(token: str, secret: str) -> AccessClaims:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("token has no subject")
    return AccessClaims(user_id=user_id, email=payload.get("email", ""))


def generate_refresh_token() -> tuple:
    """32 random bytes, urlsafe base64. Returns (token, hash to store)."""
    token = base64.urlsafe_b64encode(secrets.token_bytes(32)).decode("ascii")
    return token, hash_refresh_token(token)


def hash_refresh_token(token: str) -> str:
    digest = hashlib.sha256(token.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii")
