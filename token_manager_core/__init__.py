"""Issue, redeem and expire short codes bound to application entities."""

from .config import AppConfig, TokenManagerConfig, get_config, reset_config, set_config
from .enums import Combinator, TokenBehavior
from .exceptions import (
    InvalidArgumentError,
    InvalidFilterArgumentError,
    NotConfiguredError,
    UnknownBehaviorError,
    UnknownEntityError,
    UnknownTypeError,
    UnsupportedOperatorError,
)
from .repositories import InMemoryTokenRepository, SQLTokenRepository, TokenStore
from .schemas import Token
from .services import TokenManager

__all__ = [
    "AppConfig",
    "TokenManagerConfig",
    "get_config",
    "reset_config",
    "set_config",
    "Combinator",
    "TokenBehavior",
    "InvalidArgumentError",
    "InvalidFilterArgumentError",
    "NotConfiguredError",
    "UnknownBehaviorError",
    "UnknownEntityError",
    "UnknownTypeError",
    "UnsupportedOperatorError",
    "InMemoryTokenRepository",
    "SQLTokenRepository",
    "TokenStore",
    "Token",
    "TokenManager",
]
