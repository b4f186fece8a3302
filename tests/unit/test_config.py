"""Tests for centralized configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from token_manager_core.config import (
    AppConfig,
    CharsetConfig,
    LoggingConfig,
    TokenManagerConfig,
    get_config,
    reset_config,
    set_config,
)
from token_manager_core.constants import Limits, LogLevel
from token_manager_core.services import TokenManager


class TestLoggingConfig:
    """Test LoggingConfig model."""

    def test_default_values(self):
        """Test default logging configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            config = LoggingConfig()
        assert config.level == LogLevel.INFO.value
        assert config.format == "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def test_from_env(self):
        """Test loading logging config from environment."""
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}):
            config = LoggingConfig()
            assert config.level == "DEBUG"

    def test_validate_log_level(self):
        """Test log level validation."""
        config = LoggingConfig(level="debug")
        assert config.level == "DEBUG"

        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(level="INVALID")


class TestTokenManagerConfig:
    """Test TokenManagerConfig model."""

    def test_default_values(self):
        """Test default token configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            config = TokenManagerConfig()
        assert config.types == []
        assert config.default_code_length == Limits.DEFAULT_CODE_LENGTH
        assert config.table_name == "tokens"
        assert config.charset.letters == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
        assert config.charset.numbers == "0123456789"

    def test_types_are_normalized(self):
        """Types are stripped, lowercased and deduplicated in order."""
        config = TokenManagerConfig(types=[" Email_Validation", "PIN", "pin", "  "])
        assert config.types == ["email_validation", "pin"]

    def test_from_env(self):
        """Test loading token config from environment."""
        env_vars = {
            "TOKEN_TYPES": "email_validation, Discount ,pin",
            "TOKEN_CODE_LENGTH": "12",
            "TOKEN_TABLE_NAME": "verification_codes",
        }
        with patch.dict(os.environ, env_vars):
            config = TokenManagerConfig()
        assert config.types == ["email_validation", "discount", "pin"]
        assert config.default_code_length == 12
        assert config.table_name == "verification_codes"

    @pytest.mark.parametrize("length", ["0", "-3", str(Limits.MAX_CODE_LENGTH + 1)])
    def test_invalid_code_length_from_env(self, length):
        """Code length from the environment is validated like an explicit one."""
        with patch.dict(os.environ, {"TOKEN_CODE_LENGTH": length}):
            with pytest.raises(PydanticValidationError, match="default_code_length"):
                TokenManagerConfig()

    def test_blank_table_name_from_env(self):
        """A blank table name from the environment is rejected."""
        with patch.dict(os.environ, {"TOKEN_TABLE_NAME": "  "}):
            with pytest.raises(PydanticValidationError, match="table_name"):
                TokenManagerConfig()

    def test_invalid_log_level_from_env(self):
        """Log level from the environment is validated and uppercased."""
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            assert LoggingConfig().level == "WARNING"
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}):
            with pytest.raises(ValueError, match="Invalid log level"):
                LoggingConfig()

    @pytest.mark.parametrize("length", [0, -3, Limits.MAX_CODE_LENGTH + 1])
    def test_invalid_code_length(self, length):
        """Code length outside 1..255 is rejected."""
        with pytest.raises(PydanticValidationError, match="default_code_length"):
            TokenManagerConfig(types=["pin"], default_code_length=length)

    def test_blank_table_name(self):
        """A blank table name is rejected."""
        with pytest.raises(PydanticValidationError, match="table_name"):
            TokenManagerConfig(types=["pin"], table_name="   ")

    def test_custom_charset(self):
        """Charsets can be overridden."""
        config = TokenManagerConfig(types=["pin"], charset=CharsetConfig(letters="", numbers="01"))
        assert config.charset.numbers == "01"
        assert config.charset.letters == ""


class TestAppConfig:
    """Test main AppConfig model."""

    def test_default_values(self):
        """Test default app configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
        assert config.environment == "development"
        assert config.debug is False
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.tokens, TokenManagerConfig)

    def test_from_env(self):
        """Test loading app config from environment."""
        env_vars = {
            "APP_ENV": "production",
            "DEBUG": "true",
            "LOG_LEVEL": "ERROR",
            "TOKEN_TYPES": "pin",
        }
        with patch.dict(os.environ, env_vars):
            config = AppConfig.from_env()
            assert config.environment == "production"
            assert config.debug is True
            assert config.logging.level == "ERROR"
            assert config.tokens.types == ["pin"]

    def test_env_tokens_feed_the_manager(self, memory_store, clock):
        """Types read from the environment are usable by the token manager."""
        with patch.dict(os.environ, {"TOKEN_TYPES": " Discount , PIN"}):
            config = AppConfig.from_env()

        manager = TokenManager.from_config(memory_store, config, clock=clock)
        token = manager.create("users", 1, "discount", "add", 60)

        assert manager.types == ["discount", "pin"]
        assert token.type == "discount"


class TestConfigManagement:
    """Test global configuration management functions."""

    def test_get_config_singleton(self):
        """Test get_config returns singleton instance."""
        assert get_config() is get_config()

    def test_set_config(self):
        """Test setting custom configuration."""
        custom_config = AppConfig(environment="test")
        set_config(custom_config)

        assert get_config() is custom_config

    def test_reset_config(self):
        """Test resetting configuration."""
        custom_config = AppConfig(environment="custom")
        set_config(custom_config)

        reset_config()
        assert get_config() is not custom_config
