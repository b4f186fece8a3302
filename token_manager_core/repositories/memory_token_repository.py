"""In-memory token store, for tests and single-process use."""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import InvalidArgumentError
from ..filters import matches, parse_filters
from ..filters.conditions import Condition
from ..schemas.token_schema import Token
from .token_repository import TokenStore


class InMemoryTokenRepository(TokenStore):
    """
    Keeps tokens in a dict keyed by id.

    Tokens are copied on the way in and out so callers never share state
    with the store. ``transaction()`` holds a re-entrant lock, which makes the
    manager's read-then-write sequences atomic across threads.
    """

    def __init__(self):
        self._rows: Dict[int, Token] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._rows)

    @contextmanager
    def transaction(self) -> Iterator["InMemoryTokenRepository"]:
        with self._lock:
            yield self

    def _matching(self, condition: Optional[Condition]) -> List[Token]:
        return [
            token
            for _, token in sorted(self._rows.items())
            if condition is None or matches(condition, token.to_record())
        ]

    def all(self) -> List[Token]:
        with self._lock:
            return [token.model_copy(deep=True) for token in self._matching(None)]

    def find(self, filters: Dict[str, Any]) -> Optional[Token]:
        condition = parse_filters(filters)
        with self._lock:
            found = self._matching(condition)
            return found[0].model_copy(deep=True) if found else None

    def save(self, token: Token) -> Token:
        with self._lock:
            if token.id is None:
                token.id = self._next_id
                self._next_id += 1
                self._rows[token.id] = token.model_copy(deep=True)
            elif token.id in self._rows:
                stored = self._rows[token.id]
                stored.code = token.code
                stored.remaining_uses = token.remaining_uses
                stored.expiration_at = token.expiration_at
        return token

    def delete(self, token: Token) -> int:
        with self._lock:
            if token.id is not None and self._rows.pop(token.id, None) is not None:
                return 1
        return 0

    def remove_matching(self, filters: Dict[str, Any]) -> int:
        if not filters:
            raise InvalidArgumentError("Filters cannot be empty")
        condition = parse_filters(filters)
        if condition is None:
            raise InvalidArgumentError("Filters cannot be empty")

        with self._lock:
            doomed = self._matching(condition)
            for token in doomed:
                del self._rows[token.id]
        return len(doomed)
