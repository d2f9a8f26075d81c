"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import DEFAULT_ROLES, User, VerificationState  # noqa: E402,F401
from .user_record import UserRecord  # noqa: E402,F401

__all__ = [
    "db",
    "DEFAULT_ROLES",
    "User",
    "UserRecord",
    "VerificationState",
]
