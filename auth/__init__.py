from .passwords import hash_password, verify_password
from .tokens import (
    AccessClaims,
    InvalidTokenError,
    TokenPair,
    create_access_token,
    decode_access_token,
    generate_refresh_token,
    hash_refresh_token,
)

__all__ = [
    "hash_password",
    "verify_password",
    "AccessClaims",
    "InvalidTokenError",
    "TokenPair",
    "create_access_token",
    "decode_access_token",
    "generate_refresh_token",
    "hash_refresh_token",
]
