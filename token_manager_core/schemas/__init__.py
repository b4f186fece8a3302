"""Pydantic schemas."""

from .token_schema import Token

__all__ = ["Token"]
