"""
Enums used across the token_manager_core package.

This module contains enum definitions that are used by multiple modules
to avoid circular import issues.
"""

import enum
from typing import List


class TokenBehavior(str, enum.Enum):
    """
    Collision policy stored on a token when it is first created.

    The stored value decides what a later create call for the same
    (entity_name, entity_id, type) does:

    - ADD: always insert a new token, previous ones are left untouched.
    - UNIQUE: return the active token unchanged.
    - RENEW: keep the code, refresh expiration and remaining uses.
    - REPLACE: keep the row, generate a new code, refresh expiration and uses.
    """

    ADD = "add"
    UNIQUE = "unique"
    RENEW = "renew"
    REPLACE = "replace"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


class Combinator(str, enum.Enum):
    """Boolean combinators accepted as group keys in filter specifications."""

    AND = "AND"
    OR = "OR"
