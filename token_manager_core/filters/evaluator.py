"""
Evaluate condition trees against plain mappings.

Used by the in-memory token store. Follows SQL semantics where they matter:
comparisons against NULL are false, LIKE treats ``%`` and ``_`` as wildcards
and is case-sensitive.
"""

import re
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping

from ..exceptions import InvalidFilterArgumentError
from ..utils.datetime_utils import ensure_utc
from .compiler import _COMPARATORS
from .conditions import (
    And,
    Between,
    Compare,
    Condition,
    Equals,
    In,
    IsNotNull,
    IsNull,
    Like,
    NotIn,
    Or,
)


def _normalize(value: Any) -> Any:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, Enum):
        return value.value
    return value


def _operand(value: Any, actual: Any, field_name: str) -> Any:
    """Normalize a filter value, reading text as a timestamp for datetime fields."""
    if isinstance(value, str) and isinstance(actual, datetime):
        try:
            return ensure_utc(value)
        except ValueError as e:
            raise InvalidFilterArgumentError(
                f"Invalid timestamp for '{field_name}': {value!r}", field=field_name, cause=e
            )
    return _normalize(value)


@lru_cache(maxsize=256)
def _like_pattern(pattern: str) -> "re.Pattern[str]":
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def matches(condition: Condition, record: Mapping[str, Any]) -> bool:
    """Return True when ``record`` satisfies ``condition``."""
    if isinstance(condition, And):
        return all(matches(child, record) for child in condition.conditions)
    if isinstance(condition, Or):
        return any(matches(child, record) for child in condition.conditions)

    if condition.field not in record:
        raise InvalidFilterArgumentError(f"Unknown field '{condition.field}'", field=condition.field)
    actual = _normalize(record[condition.field])

    if isinstance(condition, IsNull):
        return actual is None
    if isinstance(condition, IsNotNull):
        return actual is not None
    if actual is None:
        return False

    if isinstance(condition, Equals):
        return actual == _operand(condition.value, actual, condition.field)
    if isinstance(condition, Compare):
        expected = _operand(condition.value, actual, condition.field)
        return bool(_COMPARATORS[condition.op](actual, expected))
    if isinstance(condition, Like):
        return _like_pattern(condition.pattern).fullmatch(str(actual)) is not None
    if isinstance(condition, In):
        return actual in {_operand(v, actual, condition.field) for v in condition.values}
    if isinstance(condition, NotIn):
        return actual not in {_operand(v, actual, condition.field) for v in condition.values}
    if isinstance(condition, Between):
        low = _operand(condition.low, actual, condition.field)
        high = _operand(condition.high, actual, condition.field)
        return low <= actual <= high

    raise InvalidFilterArgumentError(f"Unknown condition type: {type(condition).__name__}")
