"""Repository layer for data access."""

from .memory_token_repository import InMemoryTokenRepository
from .sql_token_repository import SQLTokenRepository
from .token_repository import TokenStore

__all__ = [
    "InMemoryTokenRepository",
    "SQLTokenRepository",
    "TokenStore",
]
