"""Relational storage row for users."""

from datetime import datetime

from . import db
from .user import User, VerificationState


class UserRecord(db.Model):
    """Persistent row behind the SQL user repository."""

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    roles = db.Column(db.String(255), nullable=False, default="user")
    verification_state = db.Column(
        db.String(32),
        nullable=False,
        default=VerificationState.PENDING.value,
        server_default=db.text("'pending'"),
    )
    verification_token = db.Column(db.String(255), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_user(self) -> User:
        """Return an immutable snapshot of this row."""

        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            password_hash=self.password_hash,
            roles=frozenset(role for role in self.roles.split(",") if role),
            verification_state=VerificationState(self.verification_state),
            verification_token=self.verification_token,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<UserRecord {self.email}>"
