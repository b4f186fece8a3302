"""
Token table definition.

The table name is configurable, so the table is built on demand with
SQLAlchemy Core and cached in the shared metadata by name.
"""

from typing import Optional

from sqlalchemy import Column, Index, Integer, MetaData, SmallInteger, String, Table

from ..constants import DEFAULT_TABLE_NAME, Limits
from .db_base import UTCDateTime
from .db_config import Base


def get_token_table(table_name: str = DEFAULT_TABLE_NAME, metadata: Optional[MetaData] = None) -> Table:
    """
    Return the token table called ``table_name``, defining it on first use.

    Args:
        table_name: Physical table name
        metadata: Metadata to register the table with (default: Base.metadata)
    """
    metadata = metadata if metadata is not None else Base.metadata
    existing = metadata.tables.get(table_name)
    if existing is not None:
        return existing

    return Table(
        table_name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("entity_name", String(Limits.MAX_ENTITY_NAME_LENGTH), nullable=False),
        Column("entity_id", Integer, nullable=False),
        Column("code", String(Limits.MAX_CODE_LENGTH), nullable=False),
        Column("type", String(Limits.MAX_TYPE_LENGTH), nullable=False),
        Column("behavior", String(10), nullable=False),
        Column("remaining_uses", SmallInteger, nullable=True),
        Column("expiration_at", UTCDateTime, nullable=False),
        Column("created_at", UTCDateTime, nullable=False),
        # Lookups by owner in create() and by code in redeem()
        Index(f"ix_{table_name}_owner", "entity_name", "entity_id", "type"),
        Index(f"ix_{table_name}_code", "code", "type"),
        Index(f"ix_{table_name}_expiration_at", "expiration_at"),
        # Never hand out the id of a deleted token again
        sqlite_autoincrement=True,
    )


tokens_table = get_token_table()
