"""Token codec and password hashing tests."""

from datetime import timedelta

import jwt
import pytest

from pipecraft.auth.jwt import ACCESS, REFRESH, TokenCodec, TokenExpiredError, TokenInvalidError
from pipecraft.auth.password import hash_password, verify_password
from pipecraft.config import Settings


@pytest.fixture()
def codec():
    return TokenCodec(
        Settings(access_token_secret="access-test", refresh_token_secret="refresh-test")
    )


def test_access_token_round_trip(codec):
    token = codec.issue_access("USR1", "a@x.com", "Ada", "user")
    payload = codec.verify(token, ACCESS)
    assert payload["sub"] == "USR1"
    assert payload["email"] == "a@x.com"
    assert payload["role"] == "user"
    assert payload["type"] == ACCESS


def test_refresh_token_carries_only_identity(codec):
    payload = codec.verify(codec.issue_refresh("USR1"), REFRESH)
    assert payload["sub"] == "USR1"
    assert "email" not in payload
    assert "role" not in payload


def test_kinds_are_not_interchangeable(codec):
    with pytest.raises(TokenInvalidError):
        codec.verify(codec.issue_refresh("USR1"), ACCESS)
    with pytest.raises(TokenInvalidError):
        codec.verify(codec.issue_access("USR1", "a@x.com", "Ada", "user"), REFRESH)


def test_wrong_kind_rejected_even_with_shared_secret():
    """The type claim alone keeps a refresh token out of the access context."""
    settings = Settings.model_construct(
        access_token_secret="same",
        refresh_token_secret="same",
        jwt_algorithm="HS256",
        access_token_expire_minutes=5,
        refresh_token_expire_days=1,
    )
    shared = TokenCodec(settings)
    with pytest.raises(TokenInvalidError):
        shared.verify(shared.issue_refresh("USR1"), ACCESS)


def test_expired_token(codec):
    token = codec.issue_access("USR1", "a@x.com", "Ada", "user", ttl=timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        codec.verify(token, ACCESS)


def test_tampered_token(codec):
    forged = jwt.encode(
        {"sub": "USR1", "type": ACCESS, "role": "admin", "exp": 9999999999},
        "not-the-secret",
        algorithm="HS256",
    )
    with pytest.raises(TokenInvalidError):
        codec.verify(forged, ACCESS)


def test_garbage_token(codec):
    with pytest.raises(TokenInvalidError):
        codec.verify("not.a.jwt", ACCESS)


def test_settings_refuse_identical_secrets():
    with pytest.raises(ValueError):
        Settings(access_token_secret="same", refresh_token_secret="same")


def test_settings_refuse_default_secrets_in_production():
    with pytest.raises(ValueError):
        Settings(environment="production")


# ─── Passwords ──────────────────────────────────────────


def test_hash_is_salted_and_verifies():
    first = hash_password("secret1", rounds=4)
    second = hash_password("secret1", rounds=4)
    assert first != "secret1"
    assert first != second
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)


def test_wrong_password_fails():
    assert not verify_password("secret2", hash_password("secret1", rounds=4))


def test_malformed_hash_is_a_mismatch():
    assert not verify_password("secret1", "not-a-bcrypt-hash")
