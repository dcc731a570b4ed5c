import pytest
from datetime import datetime, timedelta, timezone

from auth import InvalidTokenError, decode_access_token, hash_refresh_token
from auth.tokens import create_access_token, generate_refresh_token
from services import AuthService
from services.errors import AlreadyExistsError, AuthenticationError

SECRET = "unit-test-secret"


@pytest.fixture
def auth_service(users, refresh_tokens):
    return AuthService(users, refresh_tokens, SECRET)


# ================================================================
# tokens.py
# ================================================================

def test_access_token_claims():
    token, expires_at = create_access_token("user-1", "a@example.com", SECRET, timedelta(minutes=15))
    claims = decode_access_token(token, SECRET)

    assert claims.user_id == "user-1"
    assert claims.email == "a@example.com"
    assert expires_at > datetime.now(timezone.utc).timestamp()


def test_access_token_rejects_wrong_secret_and_expiry():
    token, _ = create_access_token("user-1", "a@example.com", SECRET, timedelta(minutes=15))
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, "other-secret")

    expired, _ = create_access_token(
        "user-1", "a@example.com", SECRET, timedelta(minutes=15),
        now=datetime.now(timezone.utc) - timedelta(hours=1),
    )
    with pytest.raises(InvalidTokenError):
        decode_access_token(expired, SECRET)

    with pytest.raises(InvalidTokenError):
        decode_access_token("not-a-jwt", SECRET)


def test_refresh_token_is_random_and_hashed():
    token, token_hash = generate_refresh_token()
    other, _ = generate_refresh_token()

    assert token != other
    assert token_hash == hash_refresh_token(token)
    assert token_hash != token
    assert len(token) == 44   # 32 bytes, urlsafe base64 with padding


# ================================================================
# AuthService
# ================================================================

@pytest.mark.asyncio
async def test_register_and_login(auth_service, refresh_tokens):
    user, tokens = await auth_service.register("golfer@example.com", "s3cret-pass", "Gary", "Golfer")

    assert user.id
    assert user.password_hash != "s3cret-pass"
    assert decode_access_token(tokens.access_token, SECRET).user_id == user.id
    assert hash_refresh_token(tokens.refresh_token) in refresh_tokens.tokens

    logged_in, _ = await auth_service.login("GOLFER@example.com", "s3cret-pass")
    assert logged_in.id == user.id


@pytest.mark.asyncio
async def test_register_duplicate_email(auth_service):
    await auth_service.register("dup@example.com", "password1", "D", "Up")
    with pytest.raises(AlreadyExistsError):
        await auth_service.register("dup@example.com", "password2", "D", "Up")


@pytest.mark.asyncio
async def test_login_bad_credentials(auth_service):
    await auth_service.register("who@example.com", "right-password", "W", "Ho")

    with pytest.raises(AuthenticationError):
        await auth_service.login("who@example.com", "wrong-password")
    with pytest.raises(AuthenticationError):
        await auth_service.login("nobody@example.com", "right-password")


@pytest.mark.asyncio
async def test_refresh_rotates_and_revokes(auth_service):
    _, tokens = await auth_service.register("r@example.com", "password1", "R", "Efresh")

    rotated = await auth_service.refresh(tokens.refresh_token)
    assert rotated.refresh_token != tokens.refresh_token

    # the old token was revoked by the rotation
    with pytest.raises(AuthenticationError):
        await auth_service.refresh(tokens.refresh_token)

    with pytest.raises(AuthenticationError):
        await auth_service.refresh("unknown-token")


@pytest.mark.asyncio
async def test_refresh_expired_token(auth_service, refresh_tokens, users):
    user = users.add()
    token, token_hash = generate_refresh_token()
    await refresh_tokens.create_token(
        user.id, token_hash, datetime.now(timezone.utc) - timedelta(seconds=1)
    )
    with pytest.raises(AuthenticationError):
        await auth_service.refresh(token)


@pytest.mark.asyncio
async def test_logout_revokes_all_tokens(auth_service, refresh_tokens):
    _, first = await auth_service.register("l@example.com", "password1", "L", "Out")
    _, second = await auth_service.login("l@example.com", "password1")

    await auth_service.logout(second.refresh_token)

    assert all(t.revoked for t in refresh_tokens.tokens.values())
    with pytest.raises(AuthenticationError):
        await auth_service.refresh(first.refresh_token)
