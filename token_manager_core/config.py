"""
Centralized configuration management for the token manager.

This module provides a unified configuration system with support for:
- Environment variables
- Token types, code length and charset
- Validation using Pydantic
"""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_CHARSET,
    DEFAULT_TABLE_NAME,
    EnvironmentVariable,
    Limits,
    LogLevel,
)


def _types_from_env() -> List[str]:
    raw = os.getenv(EnvironmentVariable.TOKEN_TYPES.value, "")
    return [item for item in raw.split(",") if item.strip()]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(validate_default=True)

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class CharsetConfig(BaseModel):
    """Alphabets that generated codes are drawn from."""

    letters: str = Field(default=DEFAULT_CHARSET["letters"], description="Letter alphabet")
    numbers: str = Field(default=DEFAULT_CHARSET["numbers"], description="Digit alphabet")


class TokenManagerConfig(BaseModel):
    """Token manager configuration: recognized types, code length and charset."""

    model_config = ConfigDict(validate_default=True)

    types: List[str] = Field(default_factory=_types_from_env, description="Recognized token types")
    default_code_length: int = Field(
        default_factory=lambda: int(
            os.getenv(
                EnvironmentVariable.TOKEN_CODE_LENGTH.value, str(Limits.DEFAULT_CODE_LENGTH)
            )
        ),
        description="Code length used when create() is not given one",
    )
    charset: CharsetConfig = Field(default_factory=CharsetConfig, description="Code alphabets")
    table_name: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.TOKEN_TABLE_NAME.value, DEFAULT_TABLE_NAME
        ),
        description="Table holding the tokens",
    )

    @field_validator("types")
    def normalize_types(cls, v: List[str]) -> List[str]:
        """Lowercase and strip types, dropping blanks and duplicates."""
        normalized: List[str] = []
        for item in v:
            value = item.strip().lower()
            if value and value not in normalized:
                normalized.append(value)
        return normalized

    @field_validator("default_code_length")
    def validate_code_length(cls, v: int) -> int:
        """Validate the default code length is usable."""
        if v < 1 or v > Limits.MAX_CODE_LENGTH:
            raise ValueError(f"default_code_length must be between 1 and {Limits.MAX_CODE_LENGTH}")
        return v

    @field_validator("table_name")
    def validate_table_name(cls, v: str) -> str:
        """Validate the table name is not blank."""
        if not v.strip():
            raise ValueError("table_name cannot be empty")
        return v.strip()


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.APP_ENV.value, "development"),
        description="Application environment",
    )
    debug: bool = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.DEBUG.value, "false").lower()
        == "true",
        description="Debug mode",
    )

    # Sub-configurations
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    tokens: TokenManagerConfig = Field(
        default_factory=TokenManagerConfig, description="Token manager configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
