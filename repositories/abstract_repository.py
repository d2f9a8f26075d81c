"""User repository abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from models.user import User


class UserRepository(ABC):
    """Interface for user stores.

    Implementations must make ``create`` an indivisible check-and-insert on
    the email, and ``mark_verified`` an indivisible Pending to Verified
    transition, whatever the backing engine.
    """

    @abstractmethod
    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        verification_token: str,
        roles: Iterable[str] | None = None,
    ) -> User:
        """Insert a Pending user or raise DuplicateEmailError."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user with exactly this email, if any."""

    @abstractmethod
    def find_by_verification_token(self, token: str) -> Optional[User]:
        """Return the Pending user holding ``token``, if any."""

    @abstractmethod
    def mark_verified(self, user_id: int) -> bool:
        """Move a Pending user to Verified and clear its token.

        Returns False, changing nothing, when the user does not exist or is
        already Verified.
        """
