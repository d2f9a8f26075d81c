"""Flask-SQLAlchemy backed user repository."""

from __future__ import annotations

import threading
from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.user import DEFAULT_ROLES, User, VerificationState
from models.user_record import UserRecord
from services.errors import DuplicateEmailError

from .abstract_repository import UserRepository


class SqlUserRepository(UserRepository):
    """Store users in the ``users`` table.

    Every method runs under one lock and ends its transaction before
    releasing it. In-memory SQLite shares a single connection between
    threads, so an open transaction or a rollback in one request must never
    overlap work in another. The UNIQUE constraint on ``email`` still backs
    ``create``, and ``mark_verified`` is a single conditional UPDATE.

    Must be used inside a Flask application context.
    """

    def __init__(self, database=db):
        self.db = database
        self._lock = threading.Lock()

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        verification_token: str,
        roles: Iterable[str] | None = None,
    ) -> User:
        record = UserRecord(
            name=name,
            email=email,
            password_hash=password_hash,
            roles=",".join(sorted(roles or DEFAULT_ROLES)),
            verification_state=VerificationState.PENDING.value,
            verification_token=verification_token,
        )
        with self._lock:
            session = self.db.session
            try:
                session.add(record)
                session.flush()
                user = record.to_user()
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if self._first(email=email) is not None:
                    raise DuplicateEmailError() from exc
                raise
            except SQLAlchemyError:
                session.rollback()
                raise
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._first(email=email)

    def find_by_verification_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        with self._lock:
            return self._first(
                verification_token=token,
                verification_state=VerificationState.PENDING.value,
            )

    def mark_verified(self, user_id: int) -> bool:
        with self._lock:
            session = self.db.session
            try:
                result = session.execute(
                    update(UserRecord)
                    .where(
                        UserRecord.id == user_id,
                        UserRecord.verification_state == VerificationState.PENDING.value,
                    )
                    .values(
                        verification_state=VerificationState.VERIFIED.value,
                        verification_token=None,
                    )
                    .execution_options(synchronize_session=False)
                )
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise
            return result.rowcount == 1

    def _first(self, **filters) -> Optional[User]:
        """Read one row as a snapshot; the caller holds the lock."""

        session = self.db.session
        try:
            record = session.query(UserRecord).filter_by(**filters).first()
            return record.to_user() if record is not None else None
        finally:
            session.rollback()
