"""
Unit test conftest.py - Component-specific fixtures.

This module provides fixtures specific to unit testing.
"""

import pytest


@pytest.fixture
def save_tokens(store):
    """Save the given tokens to the current store and return them with ids."""

    def _save(*tokens):
        return [store.save(token) for token in tokens]

    return _save
