"""One-way password hashing backed by werkzeug.security."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from services.errors import InternalError


class CredentialHasher:
    """Salted, work-factor tunable password hashing.

    ``method`` is a werkzeug method string, e.g. ``"scrypt"``,
    ``"scrypt:32768:8:1"`` or ``"pbkdf2:sha256:600000"``. The digest records
    its own method and salt, so changing ``method`` never breaks existing
    digests.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length

    def hash(self, plaintext: str) -> str:
        try:
            return generate_password_hash(
                plaintext, method=self.method, salt_length=self.salt_length
            )
        except (OSError, MemoryError) as exc:
            raise InternalError("Password hashing failed.") from exc

    def verify(self, plaintext: str, digest: str) -> bool:
        """Return whether ``plaintext`` matches ``digest``.

        The final comparison is ``hmac.compare_digest``. Malformed digests
        count as a mismatch.
        """

        if not digest:
            return False
        try:
            return check_password_hash(digest, plaintext)
        except (ValueError, TypeError):
            return False
