"""Tests for verification and session tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from security.tokens import TokenCodec
from services.errors import InvalidTokenError

TEST_SECRET = "test-signing-key-with-enough-length-for-hs256"


def test_verification_tokens_are_long_and_unique(codec: TokenCodec):
    tokens = {codec.issue_verification_token() for _ in range(200)}

    assert len(tokens) == 200
    # 32 random bytes, hex encoded
    assert all(len(token) == 64 for token in tokens)


def test_verification_token_entropy_has_a_floor():
    with pytest.raises(ValueError):
        TokenCodec(TEST_SECRET, verification_token_bytes=16)


def test_signing_key_is_required():
    with pytest.raises(ValueError):
        TokenCodec("")


def test_session_token_round_trip(codec: TokenCodec):
    token = codec.issue_session_token(7, "alice@example.com", {"user", "client"})

    claims = codec.verify_session_token(token)

    assert claims.user_id == 7
    assert claims.email == "alice@example.com"
    assert claims.roles == ("client", "user")
    assert claims.expires_at - claims.issued_at == timedelta(hours=1)


class _Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def test_session_token_accepted_until_expiry():
    clock = _Clock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))
    codec = TokenCodec(TEST_SECRET, clock=clock)
    token = codec.issue_session_token(1, "alice@example.com", ["user"])

    clock.advance(timedelta(minutes=59))
    assert codec.verify_session_token(token).user_id == 1

    clock.advance(timedelta(minutes=1))
    with pytest.raises(InvalidTokenError):
        codec.verify_session_token(token)


def test_session_token_within_custom_ttl_is_accepted():
    clock = _Clock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))
    codec = TokenCodec(TEST_SECRET, session_ttl=timedelta(hours=2), clock=clock)
    token = codec.issue_session_token(1, "alice@example.com", ["user"])

    clock.advance(timedelta(minutes=90))

    assert codec.verify_session_token(token).user_id == 1


def test_codec_accepts_its_own_tokens_when_clock_runs_ahead():
    ahead = datetime.now(timezone.utc) + timedelta(days=1)
    codec = TokenCodec(TEST_SECRET, clock=lambda: ahead)

    token = codec.issue_session_token(1, "alice@example.com", ["user"])

    assert codec.verify_session_token(token).email == "alice@example.com"


def test_token_from_the_future_is_rejected():
    issuer = TokenCodec(TEST_SECRET, clock=lambda: datetime.now(timezone.utc) + timedelta(days=1))
    token = issuer.issue_session_token(1, "alice@example.com", ["user"])

    with pytest.raises(InvalidTokenError):
        TokenCodec(TEST_SECRET).verify_session_token(token)


def test_session_token_signed_with_other_key_is_rejected(codec: TokenCodec):
    forged = TokenCodec("another-signing-key-of-sufficient-length").issue_session_token(
        1, "alice@example.com", ["user"]
    )

    with pytest.raises(InvalidTokenError):
        codec.verify_session_token(forged)


def test_altered_payload_is_rejected(codec: TokenCodec):
    token = codec.issue_session_token(1, "alice@example.com", ["user"])
    header, _payload, signature = token.split(".")
    claims = jwt.decode(token, options={"verify_signature": False})
    claims["roles"] = ["admin"]
    tampered_payload = jwt.encode(claims, "irrelevant", algorithm="HS256").split(".")[1]

    with pytest.raises(InvalidTokenError):
        codec.verify_session_token(f"{header}.{tampered_payload}.{signature}")


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_session_tokens_are_rejected(codec: TokenCodec, token: str):
    with pytest.raises(InvalidTokenError):
        codec.verify_session_token(token)
