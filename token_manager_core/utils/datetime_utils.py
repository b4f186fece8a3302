"""UTC helpers shared by the schema, the filters and the storage layer."""

from datetime import UTC, datetime
from typing import Union

from ..constants import TIMESTAMP_FORMAT


def utc_now() -> datetime:
    """Return current UTC time with timezone info attached."""
    return datetime.now(UTC)


def ensure_utc(value: Union[datetime, str]) -> datetime:
    """
    Return ``value`` as a timezone-aware UTC datetime.

    Strings are read as ISO 8601, so the canonical ``YYYY-MM-DD HH:MM:SS``
    form is accepted. Naive values are taken to already be in UTC, which is
    how SQLite hands them back.

    Raises:
        ValueError: If a string is not a valid timestamp
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_timestamp(value: Union[datetime, str]) -> str:
    """Render a datetime in the canonical ``YYYY-MM-DD HH:MM:SS`` UTC text form."""
    return ensure_utc(value).strftime(TIMESTAMP_FORMAT)
