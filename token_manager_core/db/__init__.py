"""
Database layer for the token manager.

This module provides a common entry point for the token table and the
database configuration.
"""

from .db_base import UTCDateTime
from .db_config import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    close_db,
    get_db_manager,
    import_all_models,
    initialize_db,
    set_db_manager,
)
from .db_token_models import get_token_table, tokens_table

__all__ = [
    "Base",
    "UTCDateTime",
    "DatabaseConfig",
    "DatabaseManager",
    "close_db",
    "get_db_manager",
    "import_all_models",
    "initialize_db",
    "set_db_manager",
    "get_token_table",
    "tokens_table",
]
