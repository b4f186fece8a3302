"""
Typed builder for filter conditions.

Usage:
    condition = (
        FilterBuilder()
        .eq("entity_name", "users")
        .between("entity_id", 10, 20)
        .or_(FilterBuilder().is_null("remaining_uses").gt("remaining_uses", 0))
        .build()
    )
"""

from typing import Any, Iterable, List, Optional, Union

from ..enums import Combinator
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


class FilterBuilder:
    """Collects conditions for one level and joins them with a combinator."""

    def __init__(self, combinator: Union[Combinator, str] = Combinator.AND):
        self.combinator = Combinator(combinator.upper())
        self._conditions: List[Condition] = []

    def add(self, condition: Optional[Condition]) -> "FilterBuilder":
        if condition is not None:
            self._conditions.append(condition)
        return self

    def eq(self, field: str, value: Any) -> "FilterBuilder":
        return self.add(Equals(field, value))

    def ne(self, field: str, value: Any) -> "FilterBuilder":
        return self.add(Compare(field, "!=", value))

    def lt(self, field: str, value: Any) -> "FilterBuilder":
        return self.add(Compare(field, "<", value))

    def lte(self, field: str, value: Any) -> "FilterBuilder":
        return self.add(Compare(field, "<=", value))

    def gt(self, field: str, value: Any) -> "FilterBuilder":
        return self.add(Compare(field, ">", value))

    def gte(self, field: str, value: Any) -> "FilterBuilder":
        return self.add(Compare(field, ">=", value))

    def like(self, field: str, pattern: str) -> "FilterBuilder":
        return self.add(Like(field, pattern))

    def in_(self, field: str, values: Iterable[Any]) -> "FilterBuilder":
        return self.add(In(field, tuple(values)))

    def not_in(self, field: str, values: Iterable[Any]) -> "FilterBuilder":
        return self.add(NotIn(field, tuple(values)))

    def is_null(self, field: str) -> "FilterBuilder":
        return self.add(IsNull(field))

    def is_not_null(self, field: str) -> "FilterBuilder":
        return self.add(IsNotNull(field))

    def between(self, field: str, low: Any, high: Any) -> "FilterBuilder":
        return self.add(Between(field, low, high))

    def and_(self, group: "FilterBuilder") -> "FilterBuilder":
        """Nest ``group`` as an AND group, whatever combinator it was created with."""
        return self.add(combine(Combinator.AND, group._conditions))

    def or_(self, group: "FilterBuilder") -> "FilterBuilder":
        """Nest ``group`` as an OR group, whatever combinator it was created with."""
        return self.add(combine(Combinator.OR, group._conditions))

    def build(self) -> Optional[Condition]:
        return combine(self.combinator, self._conditions)
