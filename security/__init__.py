"""Password hashing and token issuance."""

from .hasher import CredentialHasher
from .tokens import SessionClaims, TokenCodec

__all__ = ["CredentialHasher", "SessionClaims", "TokenCodec"]
