# tests/test_security.py

from datetime import timedelta

import pytest

from taskflow.core.errors import AuthenticationError
from taskflow.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from taskflow.services import auth as auth_service


def test_password_hash_roundtrip() -> None:
    digest = get_password_hash("worker123")

    assert digest != "worker123"
    assert verify_password("worker123", digest)
    assert not verify_password("wrong", digest)


def test_malformed_hash_is_a_wrong_password() -> None:
    assert verify_password("admin123", "not-a-hash") is False


def test_token_carries_identity_claims() -> None:
    token = create_access_token({"id": "worker1", "email": "worker@example.com", "role": "worker"})
    claims = decode_access_token(token)

    assert claims["id"] == "worker1"
    assert claims["role"] == "worker"
    assert "exp" in claims


def test_expired_token_is_rejected() -> None:
    token = create_access_token({"id": "worker1"}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


@pytest.mark.parametrize("token", ["garbage", create_access_token({"email": "x@example.com"})])
def test_invalid_tokens_are_rejected(token) -> None:
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


@pytest.mark.asyncio
async def test_login_with_seeded_credentials(db) -> None:
    token, user = await auth_service.login(db, "admin@example.com", "admin123")

    assert user.id == "admin1"
    assert (await auth_service.authenticate(db, token)).id == "admin1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password",
    [("admin@example.com", "nope"), ("ghost@example.com", "admin123")],
)
async def test_login_failures_look_the_same(db, email, password) -> None:
    with pytest.raises(AuthenticationError) as exc:
        await auth_service.login(db, email, password)
    assert exc.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_token_for_unknown_user(db) -> None:
    token = create_access_token({"id": "user_gone", "email": "gone@example.com", "role": "admin"})
    with pytest.raises(AuthenticationError):
        await auth_service.authenticate(db, token)
