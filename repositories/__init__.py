"""User repositories."""

from .abstract_repository import UserRepository
from .memory_repository import InMemoryUserRepository
from .sql_repository import SqlUserRepository

__all__ = ["InMemoryUserRepository", "SqlUserRepository", "UserRepository"]
