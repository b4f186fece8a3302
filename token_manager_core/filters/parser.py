"""
Translate loosely-typed filter specifications into condition trees.

All filters must follow the input format::

    {"fieldname": ["operator", value]}

A bare value is read as equality, ``{"fieldname": value}`` is the same as
``{"fieldname": ["=", value]}``. Several operator groups may follow each
other for one field and are joined with the combinator of the current level.

Example for ``type LIKE '%code%' AND entity_name = 'products' AND
entity_id >= 23 AND entity_id <= 35 AND (expiration_at <= :now OR
remaining_uses = 0)``::

    filters = {
        "type": ["like", "%code%"],
        "entity_name": "products",
        "entity_id": [">=", 23, "<=", 35],
        "OR": {
            "expiration_at": ["<=", now],
            "remaining_uses": 0,
        },
    }

There are two special keys, ``AND`` and ``OR`` (matched case-insensitively, so
``"or"`` and ``"OR"`` can hold two separate groups). ``AND`` is the default.
"""

from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from ..enums import Combinator
from ..exceptions import InvalidFilterArgumentError, UnsupportedOperatorError
from .conditions import (
    Between,
    Compare,
    Condition,
    Equals,
    In,
    IsNotNull,
    IsNull,
    Like,
    NotIn,
    combine,
)

BINARY_OPERATORS = ("=", "==", "!=", "<>", "<", "<=", ">", ">=", "like")
MEMBERSHIP_OPERATORS = ("in", "not in")
NULL_OPERATORS = ("is null", "is not null")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def parse_filters(
    filters: Mapping, combinator: Combinator = Combinator.AND
) -> Optional[Condition]:
    """
    Build a condition tree from a filter specification.

    Args:
        filters: Mapping of field name (or AND/OR group key) to value or condition list
        combinator: Combinator joining the entries of this level

    Returns:
        The condition, or None when the specification holds no conditions

    Raises:
        UnsupportedOperatorError: If an operator token is unknown
        InvalidFilterArgumentError: If an operator is missing operands
    """
    if not isinstance(filters, Mapping):
        raise InvalidFilterArgumentError(
            f"Filter groups must be mappings, got {type(filters).__name__}"
        )

    conditions: List[Condition] = []
    for key, value in filters.items():
        upper_key = str(key).upper()
        if upper_key in (Combinator.AND.value, Combinator.OR.value):
            nested = parse_filters(value, Combinator(upper_key))
            if nested is not None:
                conditions.append(nested)
        else:
            conditions.extend(_parse_field(str(key), value))

    return combine(combinator, conditions)


def _parse_field(field: str, value: Any) -> List[Condition]:
    if not isinstance(value, (list, tuple)):
        value = ["=", value]

    conditions: List[Condition] = []
    i = 0
    while i < len(value):
        token = value[i]
        if not isinstance(token, str):
            raise UnsupportedOperatorError(
                f"Expected an operator for '{field}', got {token!r}", field=field
            )
        operator = token.strip().lower()

        if operator in BINARY_OPERATORS:
            operand = _operand(field, operator, value, i + 1)
            conditions.append(_binary(field, operator, operand))
            i += 2
        elif operator in MEMBERSHIP_OPERATORS:
            operand = _operand(field, operator, value, i + 1)
            if not _is_sequence(operand):
                raise InvalidFilterArgumentError(
                    f"The '{operator}' operator expects a list.", field=field
                )
            values = tuple(operand)
            conditions.append(In(field, values) if operator == "in" else NotIn(field, values))
            i += 2
        elif operator in NULL_OPERATORS:
            conditions.append(IsNull(field) if operator == "is null" else IsNotNull(field))
            i += 1
        elif operator == "between":
            if len(value) < i + 3:
                raise InvalidFilterArgumentError(
                    "The 'between' operator expects two values.", field=field
                )
            conditions.append(Between(field, value[i + 1], value[i + 2]))
            i += 3
        else:
            raise UnsupportedOperatorError(
                f"Unsupported operator: {operator}", field=field, operator=operator
            )

    if not conditions:
        raise InvalidFilterArgumentError(f"No condition given for '{field}'", field=field)
    return conditions


def _operand(field: str, operator: str, value: Sequence, index: int) -> Any:
    if index >= len(value):
        raise InvalidFilterArgumentError(
            f"Operator '{operator}' expects a value.", field=field, operator=operator
        )
    return value[index]


def _binary(field: str, operator: str, operand: Any) -> Condition:
    # NULL never compares equal in SQL, so equality against None means IS NULL
    if operator in ("=", "=="):
        return IsNull(field) if operand is None else Equals(field, operand)
    if operator in ("!=", "<>"):
        return IsNotNull(field) if operand is None else Compare(field, "!=", operand)
    if operator == "like":
        return Like(field, operand)
    return Compare(field, operator, operand)
