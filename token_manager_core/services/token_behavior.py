"""
Collision handling for token creation.

What happens when a token is requested for an (entity, type) that already
holds an active token is decided by the behavior stored on that existing
token, not by the behavior of the new request. ``plan_token_mutation`` turns
that decision into a described effect without touching storage; the
lifecycle manager then applies it.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from ..enums import TokenBehavior
from ..schemas.token_schema import Token


class MutationKind(str, enum.Enum):
    INSERT_NEW = "insert_new"
    REPLACE_CODE = "replace_code"
    KEEP_CODE = "keep_code"
    NO_OP = "no_op"


@dataclass(frozen=True)
class TokenRequest:
    """Validated, normalized arguments of a create call."""

    entity_name: str
    entity_id: int
    type: str
    behavior: TokenBehavior
    remaining_uses: Optional[int]
    expiration_at: datetime
    created_at: datetime
    code_length: int


@dataclass(frozen=True)
class TokenMutation:
    kind: MutationKind
    request: TokenRequest
    existing: Optional[Token] = None

    @property
    def needs_code(self) -> bool:
        return self.kind in (MutationKind.INSERT_NEW, MutationKind.REPLACE_CODE)

    @property
    def needs_save(self) -> bool:
        return self.kind != MutationKind.NO_OP


def _on_add(existing: Token, request: TokenRequest) -> TokenMutation:
    return TokenMutation(MutationKind.INSERT_NEW, request)


def _on_unique(existing: Token, request: TokenRequest) -> TokenMutation:
    return TokenMutation(MutationKind.NO_OP, request, existing)


def _on_renew(existing: Token, request: TokenRequest) -> TokenMutation:
    return TokenMutation(MutationKind.KEEP_CODE, request, existing)


def _on_replace(existing: Token, request: TokenRequest) -> TokenMutation:
    return TokenMutation(MutationKind.REPLACE_CODE, request, existing)


BEHAVIOR_HANDLERS: Dict[TokenBehavior, Callable[[Token, TokenRequest], TokenMutation]] = {
    TokenBehavior.ADD: _on_add,
    TokenBehavior.UNIQUE: _on_unique,
    TokenBehavior.RENEW: _on_renew,
    TokenBehavior.REPLACE: _on_replace,
}


def plan_token_mutation(existing: Optional[Token], request: TokenRequest) -> TokenMutation:
    """
    Decide what a create request does, given the active token for its key.

    Args:
        existing: Active token for (entity_name, entity_id, type), or None
        request: The create request

    Returns:
        The effect to apply
    """
    if existing is None:
        return TokenMutation(MutationKind.INSERT_NEW, request)
    return BEHAVIOR_HANDLERS[existing.behavior](existing, request)
