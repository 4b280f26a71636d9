# tests/test_auth_service.py

from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from services.auth_service import TokenService, hash_password, normalize_email, verify_password


def test_normalize_email_trims_and_lowercases() -> None:
    assert normalize_email("  Alice@Example.COM ") == "alice@example.com"


def test_hash_password_is_salted_and_verifiable() -> None:
    first = hash_password("hunter22", rounds=4)
    second = hash_password("hunter22", rounds=4)

    assert first != second
    assert "hunter22" not in first
    assert verify_password("hunter22", first)
    assert verify_password("hunter22", second)


def test_verify_password_mismatch_is_false() -> None:
    digest = hash_password("right-password", rounds=4)

    assert verify_password("wrong-password", digest) is False


def test_verify_password_with_garbage_digest_is_false() -> None:
    assert verify_password("whatever", "not-a-bcrypt-hash") is False


def test_token_round_trip(token_service: TokenService) -> None:
    token = token_service.issue("64b000000000000000000001")

    identity = token_service.verify(token)

    assert identity is not None
    assert identity.user_id == "64b000000000000000000001"
    assert identity.expires_at is not None


def test_expired_token_is_rejected(token_service: TokenService) -> None:
    token = token_service.issue("user-1", ttl=timedelta(seconds=-30))

    assert token_service.verify(token) is None


def test_token_signed_with_other_secret_is_rejected(token_service: TokenService) -> None:
    other = TokenService("another-secret")

    assert token_service.verify(other.issue("user-1")) is None


def test_tampered_payload_is_rejected(token_service: TokenService) -> None:
    header, _, signature = token_service.issue("user-a").split(".")
    _, forged_payload, _ = token_service.issue("user-b").split(".")

    assert token_service.verify(f"{header}.{forged_payload}.{signature}") is None


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "Bearer xyz"])
def test_malformed_tokens_are_rejected(token_service: TokenService, token: str) -> None:
    assert token_service.verify(token) is None


def test_token_without_subject_is_rejected(token_service: TokenService) -> None:
    token = jwt.encode({"exp": 9999999999}, "test-secret", algorithm="HS256")

    assert token_service.verify(token) is None


def test_token_without_expiry_is_rejected(token_service: TokenService) -> None:
    token = jwt.encode({"sub": "user-1"}, "test-secret", algorithm="HS256")

    assert token_service.verify(token) is None


def test_empty_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        TokenService("")


def test_only_first_72_bytes_of_password_count() -> None:
    digest = hash_password("a" * 72 + "tail-one", rounds=4)

    assert verify_password("a" * 72 + "tail-two", digest)
    assert not verify_password("a" * 71, digest)
