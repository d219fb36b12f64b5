"""Tests for password hashing and JWT helpers."""

from datetime import timedelta

from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)


def test_password_hashing():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_access_token_round_trip():
    token = create_access_token(
        {"sub": "3f0c4b5e-0000-4000-8000-000000000001", "email": "a@example.com", "roles": []}
    )
    payload = decode_access_token(token)
    assert payload["sub"] == "3f0c4b5e-0000-4000-8000-000000000001"
    assert payload["type"] == "access"
    assert "exp" in payload
    assert "iat" in payload


def test_token_types_are_not_interchangeable():
    access = create_access_token({"sub": "user"})
    refresh = create_refresh_token({"sub": "user"})

    assert decode_refresh_token(access) is None
    assert decode_access_token(refresh) is None
    assert decode_refresh_token(refresh)["type"] == "refresh"


def test_expired_token_rejected():
    token = create_access_token({"sub": "user"}, expires_delta=timedelta(seconds=-1))
    assert decode_access_token(token) is None


def test_tampered_token_rejected():
    token = create_access_token({"sub": "user"})
    header_and_payload = token.rsplit(".", 1)[0]
    assert decode_access_token(f"{header_and_payload}.forged-signature") is None
