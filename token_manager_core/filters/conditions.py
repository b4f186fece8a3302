"""
Condition variants for token lookups.

Every filter the token store understands is one of a small, closed set of
frozen dataclasses. Leaf conditions name a single field; ``And`` and ``Or``
group other conditions. The tree carries no storage syntax, the compiler
and evaluator modules translate it for a given backend.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..enums import Combinator
from ..exceptions import InvalidFilterArgumentError, UnsupportedOperatorError

# Operators handled by Compare; equality and LIKE have their own variants
COMPARE_OPERATORS = ("!=", "<", "<=", ">", ">=")


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class Compare:
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in COMPARE_OPERATORS:
            raise UnsupportedOperatorError(
                f"Unsupported comparison operator: {self.op}", operator=self.op
            )


@dataclass(frozen=True)
class Like:
    field: str
    pattern: str


@dataclass(frozen=True)
class In:
    field: str
    values: Tuple[Any, ...]

    def __post_init__(self):
        if not self.values:
            raise InvalidFilterArgumentError(
                f"The 'in' operator on '{self.field}' expects a non-empty list", field=self.field
            )


@dataclass(frozen=True)
class NotIn:
    field: str
    values: Tuple[Any, ...]

    def __post_init__(self):
        if not self.values:
            raise InvalidFilterArgumentError(
                f"The 'not in' operator on '{self.field}' expects a non-empty list",
                field=self.field,
            )


@dataclass(frozen=True)
class IsNull:
    field: str


@dataclass(frozen=True)
class IsNotNull:
    field: str


@dataclass(frozen=True)
class Between:
    """Inclusive range, equivalent to ``field >= low AND field <= high``."""

    field: str
    low: Any
    high: Any


@dataclass(frozen=True)
class And:
    conditions: Tuple["Condition", ...]


@dataclass(frozen=True)
class Or:
    conditions: Tuple["Condition", ...]


Condition = Union[Equals, Compare, Like, In, NotIn, IsNull, IsNotNull, Between, And, Or]

GROUP_TYPES = (And, Or)


def combine(combinator: Union[Combinator, str], conditions: Iterable[Condition]) -> Optional[Condition]:
    """
    Join conditions with a combinator.

    No conditions gives None and a single condition is returned as is.
    """
    items: List[Condition] = list(conditions)
    if not items:
        return None
    if len(items) == 1:
        return items[0]
    if Combinator(combinator) == Combinator.OR:
        return Or(tuple(items))
    return And(tuple(items))
