"""
Column types shared by the token tables.

Keeps timestamps consistent between SQLite and PostgreSQL.
"""

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from ..utils.datetime_utils import ensure_utc


class UTCDateTime(TypeDecorator):
    """
    Cross-database UTC timestamp type.

    Values are stored as naive UTC and handed back timezone-aware, so SQLite
    (which drops tzinfo) and PostgreSQL compare the same way. Text bound
    against the column is read as an ISO 8601 timestamp.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return ensure_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return ensure_utc(value)
