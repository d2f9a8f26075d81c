"""User model definition."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


DEFAULT_ROLES = frozenset({"user"})


class VerificationState(str, enum.Enum):
    """Email verification state; ``PENDING`` moves to ``VERIFIED`` once."""

    PENDING = "pending"
    VERIFIED = "verified"


@dataclass(frozen=True)
class User:
    """Snapshot of a platform user as held by a repository.

    Instances are immutable; state changes go through the repository, which
    hands back fresh snapshots.
    """

    id: int
    name: str
    email: str
    password_hash: str
    roles: frozenset[str] = DEFAULT_ROLES
    verification_state: VerificationState = VerificationState.PENDING
    verification_token: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_verified(self) -> bool:
        return self.verification_state is VerificationState.VERIFIED

    def to_dict(self) -> dict:
        """Public representation; never includes secrets."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": sorted(self.roles),
            "is_verified": self.is_verified,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
