"""Filter conditions, their builder and parser, and backend translations."""

from .builder import FilterBuilder
from .compiler import CompiledFilter, compile_filter, to_clause
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
    combine,
)
from .evaluator import matches
from .parser import parse_filters

__all__ = [
    "FilterBuilder",
    "CompiledFilter",
    "compile_filter",
    "to_clause",
    "And",
    "Between",
    "Compare",
    "Condition",
    "Equals",
    "In",
    "IsNotNull",
    "IsNull",
    "Like",
    "NotIn",
    "Or",
    "combine",
    "matches",
    "parse_filters",
]
