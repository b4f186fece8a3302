"""Service layer for business logic."""

from .token_behavior import MutationKind, TokenMutation, TokenRequest, plan_token_mutation
from .token_service import TokenManager

__all__ = [
    "MutationKind",
    "TokenMutation",
    "TokenRequest",
    "plan_token_mutation",
    "TokenManager",
]
