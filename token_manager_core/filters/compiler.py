"""
Compile condition trees for SQL backends.

``compile_filter`` renders a parameterized boolean expression plus its
parameters, ``to_clause`` builds the equivalent SQLAlchemy Core clause
against a table. Parameter names are ``<field>_<n>`` with a counter that is
unique per compiled query, so one field may appear several times.
"""

import operator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List

from sqlalchemy import Table, and_, bindparam, or_
from sqlalchemy.sql.elements import ColumnElement

from ..exceptions import InvalidFilterArgumentError
from ..utils.datetime_utils import format_timestamp
from .conditions import (
    GROUP_TYPES,
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

_COMPARATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass
class CompiledFilter:
    """Parameterized boolean expression and the values to bind."""

    expression: str
    params: Dict[str, Any] = field(default_factory=dict)


class _ParamNamer:
    def __init__(self):
        self._counter = 0

    def next(self, field_name: str) -> str:
        self._counter += 1
        return f"{field_name.replace('.', '_')}_{self._counter}"


def _bind_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    return value


def compile_filter(condition: Condition) -> CompiledFilter:
    """
    Render a condition as a parameterized expression.

    Example:
        ``{"a": 1, "OR": {"b": ["like", "%x%"], "c": 0}}`` renders as
        ``a = :a_1 AND (b LIKE :b_2 OR c = :c_3)``.
    """
    params: Dict[str, Any] = {}
    expression = _render(condition, params, _ParamNamer())
    return CompiledFilter(expression=expression, params=params)


def _render(condition: Condition, params: Dict[str, Any], namer: _ParamNamer) -> str:
    if isinstance(condition, GROUP_TYPES):
        joiner = " AND " if isinstance(condition, And) else " OR "
        parts: List[str] = []
        for child in condition.conditions:
            rendered = _render(child, params, namer)
            if isinstance(child, GROUP_TYPES + (Between,)):
                rendered = f"({rendered})"
            parts.append(rendered)
        return joiner.join(parts)

    if isinstance(condition, (IsNull, IsNotNull)):
        suffix = "IS NULL" if isinstance(condition, IsNull) else "IS NOT NULL"
        return f"{condition.field} {suffix}"

    if isinstance(condition, (In, NotIn)):
        # Every element takes its own counter value
        placeholders = []
        for item in condition.values:
            item_name = namer.next(condition.field)
            params[item_name] = _bind_value(item)
            placeholders.append(f":{item_name}")
        keyword = "IN" if isinstance(condition, In) else "NOT IN"
        return f"{condition.field} {keyword} ({', '.join(placeholders)})"

    name = namer.next(condition.field)

    if isinstance(condition, Equals):
        params[name] = _bind_value(condition.value)
        return f"{condition.field} = :{name}"
    if isinstance(condition, Compare):
        params[name] = _bind_value(condition.value)
        return f"{condition.field} {condition.op} :{name}"
    if isinstance(condition, Like):
        params[name] = condition.pattern
        return f"{condition.field} LIKE :{name}"
    if isinstance(condition, Between):
        params[f"{name}_from"] = _bind_value(condition.low)
        params[f"{name}_to"] = _bind_value(condition.high)
        return f"{condition.field} >= :{name}_from AND {condition.field} <= :{name}_to"

    raise InvalidFilterArgumentError(f"Unknown condition type: {type(condition).__name__}")


def to_clause(condition: Condition, table: Table) -> ColumnElement:
    """
    Build a SQLAlchemy clause for ``condition`` against ``table``.

    Values are bound with the column's type so timestamps go through the
    same conversion as on insert.

    Raises:
        InvalidFilterArgumentError: If a condition names a column the table does not have
    """
    return _clause(condition, table, _ParamNamer())


def _column(table: Table, field_name: str):
    try:
        return table.c[field_name]
    except KeyError as e:
        raise InvalidFilterArgumentError(
            f"Unknown column '{field_name}' for table {table.name}", field=field_name, cause=e
        )


def _clause(condition: Condition, table: Table, namer: _ParamNamer) -> ColumnElement:
    if isinstance(condition, And):
        return and_(*[_clause(child, table, namer) for child in condition.conditions])
    if isinstance(condition, Or):
        return or_(*[_clause(child, table, namer) for child in condition.conditions])

    column = _column(table, condition.field)

    if isinstance(condition, IsNull):
        return column.is_(None)
    if isinstance(condition, IsNotNull):
        return column.is_not(None)

    name = namer.next(condition.field)

    if isinstance(condition, Equals):
        return column == bindparam(name, condition.value, type_=column.type)
    if isinstance(condition, Compare):
        comparator = _COMPARATORS[condition.op]
        return comparator(column, bindparam(name, condition.value, type_=column.type))
    if isinstance(condition, Like):
        return column.like(bindparam(name, condition.pattern))
    if isinstance(condition, In):
        return column.in_(bindparam(name, list(condition.values), type_=column.type, expanding=True))
    if isinstance(condition, NotIn):
        return column.not_in(
            bindparam(name, list(condition.values), type_=column.type, expanding=True)
        )
    if isinstance(condition, Between):
        return and_(
            column >= bindparam(f"{name}_from", condition.low, type_=column.type),
            column <= bindparam(f"{name}_to", condition.high, type_=column.type),
        )

    raise InvalidFilterArgumentError(f"Unknown condition type: {type(condition).__name__}")
