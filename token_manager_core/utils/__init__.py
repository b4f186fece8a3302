"""Utility modules for the token manager."""

from .datetime_utils import ensure_utc, format_timestamp, utc_now

# Logging utilities
from .logger import (
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
    reset_logging,
)

__all__ = [
    "ensure_utc",
    "format_timestamp",
    "utc_now",
    "ContextAwareLogger",
    "CorrelationIdFilter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]
