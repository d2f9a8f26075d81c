"""Error taxonomy for the credential lifecycle.

Every error carries the HTTP status and title the API layer reports for it,
so routes can let them propagate to the application's JSON error handler.
"""

from __future__ import annotations

from http import HTTPStatus


class AuthError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = HTTPStatus.BAD_REQUEST
    title = "Bad Request"
    default_detail = "The request could not be processed."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AuthError):
    """Missing or malformed input."""

    title = "Validation Error"
    default_detail = "The request contains missing or malformed fields."


class DuplicateEmailError(AuthError):
    """An account already exists for the email."""

    title = "Duplicate Email"
    default_detail = "That email is already registered."


class InvalidCredentialsError(AuthError):
    """Login failed; never says which of email or password was wrong."""

    status_code = HTTPStatus.UNAUTHORIZED
    title = "Invalid Credentials"
    default_detail = "Invalid email or password."


class UnverifiedAccountError(AuthError):
    status_code = HTTPStatus.FORBIDDEN
    title = "Account Not Verified"
    default_detail = (
        "Your account has not been verified yet. "
        "Please check your email for the activation link."
    )


class InvalidTokenError(AuthError):
    """Missing, unknown, consumed, expired or tampered token."""

    title = "Invalid Token"
    default_detail = "The token is invalid or has already been used."


class DeliveryError(AuthError):
    """The email provider could not deliver a message.

    When raised out of registration the account already exists;
    ``user_id`` then names it.
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    title = "Email Delivery Failed"
    default_detail = (
        "Your account was created but the verification email could not be sent."
    )

    def __init__(self, detail: str | None = None, user_id: int | None = None):
        super().__init__(detail)
        self.user_id = user_id


class InternalError(AuthError):
    """Unexpected fault in hashing or signing. Detail is never shown to callers."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    title = "Internal Server Error"
    default_detail = "An unexpected error occurred."
