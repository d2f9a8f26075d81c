"""Process-local user repository."""

from __future__ import annotations

import dataclasses
import itertools
import threading
from typing import Iterable, Optional

from models.user import DEFAULT_ROLES, User, VerificationState
from services.errors import DuplicateEmailError

from .abstract_repository import UserRepository


class InMemoryUserRepository(UserRepository):
    """Keep users in dictionaries guarded by a single lock.

    Reads return immutable snapshots, so they never observe a half-applied
    transition.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._by_id: dict[int, User] = {}
        self._id_by_email: dict[str, int] = {}
        self._id_by_token: dict[str, int] = {}

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        verification_token: str,
        roles: Iterable[str] | None = None,
    ) -> User:
        with self._lock:
            if email in self._id_by_email:
                raise DuplicateEmailError()
            if verification_token in self._id_by_token:
                raise ValueError("Verification token is already in use.")

            user = User(
                id=next(self._ids),
                name=name,
                email=email,
                password_hash=password_hash,
                roles=frozenset(roles) if roles else DEFAULT_ROLES,
                verification_state=VerificationState.PENDING,
                verification_token=verification_token,
            )
            self._by_id[user.id] = user
            self._id_by_email[email] = user.id
            self._id_by_token[verification_token] = user.id
            return user

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._id_by_email.get(email)
            return self._by_id.get(user_id) if user_id is not None else None

    def find_by_verification_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        with self._lock:
            user_id = self._id_by_token.get(token)
            if user_id is None:
                return None
            user = self._by_id[user_id]
            if user.verification_state is not VerificationState.PENDING:
                return None
            return user

    def mark_verified(self, user_id: int) -> bool:
        with self._lock:
            user = self._by_id.get(user_id)
            if user is None or user.verification_state is not VerificationState.PENDING:
                return False

            self._id_by_token.pop(user.verification_token, None)
            self._by_id[user_id] = dataclasses.replace(
                user,
                verification_state=VerificationState.VERIFIED,
                verification_token=None,
            )
            return True
