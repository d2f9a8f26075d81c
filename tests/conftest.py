"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from mailer.abstract_sender import EmailSender  # noqa: E402
from repositories.memory_repository import InMemoryUserRepository  # noqa: E402
from security.hasher import CredentialHasher  # noqa: E402
from security.tokens import TokenCodec  # noqa: E402
from services.auth_service import AuthService  # noqa: E402
from services.errors import DeliveryError  # noqa: E402

# Cheap work factor so the suite stays fast.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"
TEST_SECRET = "test-signing-key-with-enough-length-for-hs256"


class RecordingEmailSender(EmailSender):
    """Keeps every message instead of delivering it."""

    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to_address: str, subject: str, verification_link: str) -> None:
        self.sent.append((to_address, subject, verification_link))

    def token_for(self, to_address: str) -> str:
        for address, _subject, link in reversed(self.sent):
            if address == to_address:
                return link.rsplit("token=", 1)[1]
        raise AssertionError(f"No verification email sent to {to_address}")


class FailingEmailSender(EmailSender):
    def __init__(self):
        self.attempts = 0

    def send(self, to_address: str, subject: str, verification_link: str) -> None:
        self.attempts += 1
        raise DeliveryError()


class _BaseTestConfig(Config):
    TESTING = True
    SECRET_KEY = TEST_SECRET
    JWT_SECRET_KEY = TEST_SECRET
    PASSWORD_HASH_METHOD = FAST_HASH_METHOD
    USER_STORE = "memory"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    CORS_ORIGINS = "*"
    VERIFICATION_URL = "https://app.example.com/verify-email"
    LOGIN_URL = "https://app.example.com/login"


@pytest.fixture()
def mailbox() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture()
def app(mailbox: RecordingEmailSender) -> Flask:
    """Create a Flask application instance for tests."""

    class TestConfig(_BaseTestConfig):
        pass

    return create_app(TestConfig, email_sender=mailbox)


@pytest.fixture()
def sql_app(mailbox: RecordingEmailSender) -> Flask:
    """Application backed by the SQL user store."""

    class SqlTestConfig(_BaseTestConfig):
        USER_STORE = "sql"

    return create_app(SqlTestConfig, email_sender=mailbox)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def hasher() -> CredentialHasher:
    return CredentialHasher(FAST_HASH_METHOD)


@pytest.fixture()
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


@pytest.fixture()
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def service(repository, hasher, codec, mailbox) -> AuthService:
    return AuthService(
        repository,
        hasher,
        codec,
        mailbox,
        verification_url="https://app.example.com/verify-email",
    )


@pytest.fixture()
def failing_sender() -> FailingEmailSender:
    return FailingEmailSender()
