"""Verification and session token issuance.

Session tokens are HS256 JWTs shaped like the access tokens
flask_jwt_extended issues, so ``@jwt_required`` views accept them when the
app is configured with the same key and algorithm.
"""

from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

import jwt

from services.errors import InternalError, InvalidTokenError

MIN_VERIFICATION_TOKEN_BYTES = 32
DEFAULT_SESSION_TTL = timedelta(hours=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionClaims:
    """Identity asserted by a verified session token."""

    user_id: int
    email: str
    roles: tuple[str, ...]
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Issues opaque verification tokens and signed, expiring session tokens.

    ``clock`` drives both issuance and the expiry checks in
    ``verify_session_token``. Views guarded by ``@jwt_required`` check the
    same tokens against wall-clock time.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
        algorithm: str = "HS256",
        verification_token_bytes: int = MIN_VERIFICATION_TOKEN_BYTES,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ValueError("A signing key is required for session tokens.")
        if verification_token_bytes < MIN_VERIFICATION_TOKEN_BYTES:
            raise ValueError(
                f"Verification tokens need at least {MIN_VERIFICATION_TOKEN_BYTES} bytes of entropy."
            )
        self._secret_key = secret_key
        self.session_ttl = session_ttl
        self.algorithm = algorithm
        self.verification_token_bytes = verification_token_bytes
        self._clock = clock

    def issue_verification_token(self) -> str:
        """Return a random hex token; it stays valid until consumed."""

        return secrets.token_hex(self.verification_token_bytes)

    def issue_session_token(self, user_id: int, email: str, roles: Iterable[str]) -> str:
        issued_at = self._clock()
        expires_at = issued_at + self.session_ttl
        payload = {
            "sub": str(user_id),
            "email": email,
            "roles": sorted(roles),
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expires_at,
            "jti": str(uuid.uuid4()),
            "type": "access",
            "fresh": False,
        }
        try:
            return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise InternalError("Session token signing failed.") from exc

    def verify_session_token(self, signed_token: str) -> SessionClaims:
        """Decode ``signed_token`` or raise InvalidTokenError.

        Rejects bad signatures, altered payloads and expired tokens. Time
        checks use the same clock that issued the token.
        """

        if not signed_token:
            raise InvalidTokenError("A session token is required.")
        try:
            payload = jwt.decode(
                signed_token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                },
            )
            user_id = int(payload["sub"])
            email = payload["email"]
            roles = tuple(payload.get("roles") or ())
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
            not_before = datetime.fromtimestamp(payload.get("nbf", payload["iat"]), tz=timezone.utc)
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError("The session token is invalid or expired.") from exc

        now = self._clock()
        if now >= expires_at or now < not_before:
            raise InvalidTokenError("The session token is invalid or expired.")

        return SessionClaims(
            user_id=user_id,
            email=email,
            roles=roles,
            issued_at=issued_at,
            expires_at=expires_at,
        )
