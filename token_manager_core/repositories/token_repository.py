"""
Token store interface.

The lifecycle manager only talks to storage through this interface, so any
backend implementing it (relational, document, in-memory) can be plugged in.
"""

import importlib
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ..exceptions import UnknownEntityError
from ..schemas.token_schema import Token


class TokenStore(ABC):
    """
    Storage contract for tokens.

    - ``find`` returns the lowest-id match when several rows qualify.
    - ``save`` inserts when the token has no id yet, otherwise it updates the
      mutable fields only: code, remaining_uses and expiration_at.
    - ``remove_matching`` refuses an empty filter.
    """

    @abstractmethod
    def find(self, filters: Dict[str, Any]) -> Optional[Token]:
        """Return the first token matching the filter specification, or None."""

    @abstractmethod
    def save(self, token: Token) -> Token:
        """Insert or update a token and return it with its id set."""

    @abstractmethod
    def delete(self, token: Token) -> int:
        """Delete one token, returning the number of rows removed."""

    @abstractmethod
    def remove_matching(self, filters: Dict[str, Any]) -> int:
        """Delete every token matching the filter specification."""

    @contextmanager
    def transaction(self) -> Iterator["TokenStore"]:
        """Run a read-then-write sequence as one unit. No-op by default."""
        yield self

    def normalize_entity_name(self, entity_name: str) -> str:
        """
        Resolve a logical entity reference to a table name.

        A plain name ("users", "public.users") is returned as is. A model
        reference in ``module:Class`` form ("myapp.models:User") resolves to
        the class's table name.

        Raises:
            UnknownEntityError: If the name is empty or the class cannot be resolved
        """
        if not entity_name or not entity_name.strip():
            raise UnknownEntityError("Entity name cannot be empty")

        entity_name = entity_name.strip()
        if ":" not in entity_name:
            return entity_name

        module_path, _, class_name = entity_name.partition(":")
        try:
            module = importlib.import_module(module_path)
            model_class = getattr(module, class_name)
        except (ImportError, AttributeError, ValueError) as e:
            raise UnknownEntityError(
                f"Class {entity_name} does not exist.", entity_name=entity_name, cause=e
            )

        table_name = getattr(model_class, "__tablename__", None)
        if table_name is None and hasattr(model_class, "__table__"):
            table_name = model_class.__table__.name
        if not table_name:
            raise UnknownEntityError(
                f"Class {entity_name} is not a mapped model.", entity_name=entity_name
            )
        return table_name
