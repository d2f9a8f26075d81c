"""Tests for password hashing."""

from __future__ import annotations

import pytest

from security.hasher import CredentialHasher


@pytest.mark.parametrize("password", ["J1Pass123", "ñandú-contraseña", " spaced ", "x" * 200])
def test_verify_accepts_own_digest(hasher: CredentialHasher, password: str):
    assert hasher.verify(password, hasher.hash(password)) is True


@pytest.mark.parametrize(
    "password, other",
    [("J1Pass123", "J1Pass124"), ("secret", "Secret"), ("secret", "secret ")],
)
def test_verify_rejects_other_plaintext(hasher: CredentialHasher, password: str, other: str):
    assert hasher.verify(other, hasher.hash(password)) is False


def test_hash_is_salted(hasher: CredentialHasher):
    first = hasher.hash("same-password")
    second = hasher.hash("same-password")

    assert first != second
    assert "same-password" not in first
    assert first.startswith("pbkdf2:sha256:1000$")


def test_verify_treats_malformed_digest_as_mismatch(hasher: CredentialHasher):
    assert hasher.verify("password", "") is False
    assert hasher.verify("password", "not-a-digest") is False
    assert hasher.verify("password", "unknown-method$salt$abc") is False


def test_digest_records_its_own_work_factor(hasher: CredentialHasher):
    digest = CredentialHasher("pbkdf2:sha256:2000").hash("password")

    assert hasher.verify("password", digest) is True
