"""
Constants and enums for the token manager.

This module centralizes all magic strings and constants used throughout
the package to ensure consistency and maintainability.
"""

from enum import Enum


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    APP_ENV = "APP_ENV"
    LOG_LEVEL = "LOG_LEVEL"
    DEBUG = "DEBUG"
    TOKEN_TYPES = "TOKEN_TYPES"
    TOKEN_CODE_LENGTH = "TOKEN_CODE_LENGTH"
    TOKEN_TABLE_NAME = "TOKEN_TABLE_NAME"
    DATABASE_URL = "DATABASE_URL"


# Default alphabets used for code generation
DEFAULT_CHARSET = {
    "letters": "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "numbers": "0123456789",
}

DEFAULT_TABLE_NAME = "tokens"

# Canonical text form used when binding timestamps into filter expressions
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Limits:
    """System limits and thresholds."""

    MIN_CODE_LENGTH = 4
    DEFAULT_CODE_LENGTH = 32
    MAX_CODE_LENGTH = 255
    MAX_REMAINING_USES = 32767
    MAX_ENTITY_NAME_LENGTH = 255
    MAX_TYPE_LENGTH = 50
