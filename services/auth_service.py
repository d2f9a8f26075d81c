"""Registration, email verification and login.

Accounts move through two states::

    PENDING  --verify_email(token)-->  VERIFIED

Registration creates a PENDING account holding a single-use verification
token. Presenting that token once moves the account to VERIFIED and destroys
the token. Only VERIFIED accounts may log in and receive a session token.

Password hashing runs outside the repository's critical sections; the
repository only serialises the short check-and-insert and the
check-and-transition steps.
"""

from __future__ import annotations

import logging
import secrets
from typing import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from mailer.abstract_sender import EmailSender
from models.user import DEFAULT_ROLES, User, VerificationState
from repositories.abstract_repository import UserRepository
from security.hasher import CredentialHasher
from security.tokens import TokenCodec

from .errors import (
    DeliveryError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    UnverifiedAccountError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _require_text(value: object, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required.")
    return value


def _validate_email(email: str) -> None:
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain or any(ch.isspace() for ch in email):
        raise ValidationError("email must be a valid email address.")


def build_verification_link(base_url: str, token: str) -> str:
    """Append ``token`` as a query parameter, keeping any existing query."""

    parts = urlsplit(base_url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query = [(key, value) for key, value in query if key != "token"]
    query.append(("token", token))
    return urlunsplit(parts._replace(query=urlencode(query)))


class AuthService:
    """Owns the account state machine."""

    def __init__(
        self,
        repository: UserRepository,
        hasher: CredentialHasher,
        tokens: TokenCodec,
        email_sender: EmailSender,
        *,
        verification_url: str,
        email_subject: str = "Activate your account",
        default_roles: Iterable[str] = DEFAULT_ROLES,
    ):
        self.repository = repository
        self.hasher = hasher
        self.tokens = tokens
        self.email_sender = email_sender
        self.verification_url = verification_url
        self.email_subject = email_subject
        self.default_roles = frozenset(default_roles)
        # Checked on logins for unknown emails so they cost a full hash too.
        self._absent_user_digest = hasher.hash(secrets.token_hex(16))

    def register(self, name: object, email: object, password: object) -> User:
        """Create a Pending account and email its verification link.

        Raises ValidationError or DuplicateEmailError without creating
        anything. If delivery fails the account is kept and DeliveryError
        is raised with ``user_id`` set.
        """

        name = _require_text(name, "name")
        email = _require_text(email, "email")
        password = _require_text(password, "password")
        _validate_email(email)

        if self.repository.find_by_email(email) is not None:
            raise DuplicateEmailError()

        password_hash = self.hasher.hash(password)
        token = self.tokens.issue_verification_token()
        # A concurrent registration may win between the lookup and here;
        # create() re-checks under the repository's guard.
        user = self.repository.create(
            name=name,
            email=email,
            password_hash=password_hash,
            verification_token=token,
            roles=self.default_roles,
        )
        logger.info("Registered user %s", user.id)

        link = build_verification_link(self.verification_url, token)
        try:
            self.email_sender.send(email, self.email_subject, link)
        except DeliveryError as exc:
            logger.warning(
                "Verification email for user %s was not delivered; account kept", user.id
            )
            raise DeliveryError(exc.detail, user_id=user.id) from exc
        return user

    def verify_email(self, token: object) -> User:
        """Consume ``token`` and mark its account Verified."""

        if not isinstance(token, str) or not token:
            raise InvalidTokenError()

        user = self.repository.find_by_verification_token(token)
        if user is None:
            raise InvalidTokenError()
        if not self.repository.mark_verified(user.id):
            # Another request consumed the token first.
            raise InvalidTokenError()

        logger.info("Verified email for user %s", user.id)
        return self.repository.find_by_email(user.email) or user

    def login(self, email: object, password: object) -> str:
        """Return a signed session token for a Verified account."""

        email = _require_text(email, "email")
        password = _require_text(password, "password")

        user = self.repository.find_by_email(email)
        if user is None:
            self.hasher.verify(password, self._absent_user_digest)
            logger.info("Login rejected: unknown account")
            raise InvalidCredentialsError()
        if user.verification_state is VerificationState.PENDING:
            logger.info("Login rejected: user %s is not verified", user.id)
            raise UnverifiedAccountError()
        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login rejected: bad password for user %s", user.id)
            raise InvalidCredentialsError()

        logger.info("User %s logged in", user.id)
        return self.tokens.issue_session_token(user.id, user.email, user.roles)
