"""
SQLAlchemy token repository.

Runs token queries with SQLAlchemy Core against the configured token table.
The repository receives a session and flushes writes; committing is done by
``transaction()``, which the lifecycle manager wraps around each operation.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, NoReturn, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import DEFAULT_TABLE_NAME
from ..db.db_token_models import get_token_table
from ..enums import TokenBehavior
from ..exceptions import (
    BaseError,
    ErrorCode,
    InvalidArgumentError,
    RepositoryError,
    duplicate,
)
from ..filters import compile_filter, parse_filters, to_clause
from ..schemas.token_schema import Token
from ..utils.logger import get_logger
from .token_repository import TokenStore


class SQLTokenRepository(TokenStore):
    """Token store backed by a relational table."""

    def __init__(self, session: Session, table_name: str = DEFAULT_TABLE_NAME, logger=None):
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy session for database operations
            table_name: Name of the token table
            logger: Optional logger instance
        """
        self.session = session
        self.table = get_token_table(table_name)
        self.logger = logger or get_logger()

    def _handle_db_error(self, e: Exception, operation_name: str, **context: Any) -> NoReturn:
        """
        Map database errors to RepositoryError.

        Args:
            e: The original exception
            operation_name: Name of the operation that failed
            **context: Additional context for the error

        Raises:
            RepositoryError: With appropriate error code and context
        """
        if isinstance(e, BaseError):
            raise e

        error_context = {"operation_name": operation_name, "table": self.table.name, **context}

        if isinstance(e, IntegrityError):
            error_message = str(e.orig).lower() if hasattr(e, "orig") else str(e).lower()
            if "unique" in error_message or "duplicate" in error_message:
                raise duplicate(resource_type="Token", cause=e, **error_context)
            raise RepositoryError(
                f"Database constraint violation for Token: {str(e)}",
                error_code=ErrorCode.CONSTRAINT_VIOLATION,
                cause=e,
                **error_context,
            )

        if isinstance(e, SQLAlchemyError):
            raise RepositoryError(
                f"Database error for Token: {str(e)}",
                error_code=ErrorCode.DATABASE_ERROR,
                cause=e,
                **error_context,
            )

        raise RepositoryError(
            f"Unexpected error for Token: {str(e)}",
            error_code=ErrorCode.INTERNAL_ERROR,
            cause=e,
            **error_context,
        )

    @contextmanager
    def _session_operation(self, operation_name: str, is_read_only: bool = False):
        """
        Run an operation on the session, mapping database errors.

        Args:
            operation_name: Name of the operation for error reporting
            is_read_only: If True, skip flush

        Yields:
            The existing session
        """
        try:
            yield self.session
            if not is_read_only:
                self.session.flush()
        except Exception as e:
            self._handle_db_error(e, operation_name)

    @contextmanager
    def transaction(self) -> Iterator["SQLTokenRepository"]:
        """Commit on success, roll back on any error."""
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _where(self, filters: Dict[str, Any]):
        condition = parse_filters(filters)
        if condition is None:
            return None
        if self.logger.isEnabledFor(logging.DEBUG):
            compiled = compile_filter(condition)
            self.logger.debug(
                "Token filter", extra={"table": self.table.name, "where": compiled.expression}
            )
        return to_clause(condition, self.table)

    def _row_to_token(self, row: Mapping[str, Any]) -> Token:
        return Token(
            id=row["id"],
            entity_name=row["entity_name"],
            entity_id=row["entity_id"],
            code=row["code"],
            type=row["type"],
            behavior=TokenBehavior(row["behavior"]),
            remaining_uses=row["remaining_uses"],
            expiration_at=row["expiration_at"],
            created_at=row["created_at"],
        )

    def find(self, filters: Dict[str, Any]) -> Optional[Token]:
        where = self._where(filters)
        query = select(self.table)
        if where is not None:
            query = query.where(where)
        query = query.order_by(self.table.c.id.asc()).limit(1)

        with self._session_operation("find", is_read_only=True) as session:
            row = session.execute(query).mappings().first()

        return self._row_to_token(row) if row else None

    def save(self, token: Token) -> Token:
        if token.id is None:
            values = token.to_record()
            values.pop("id")
            with self._session_operation("insert") as session:
                result = session.execute(insert(self.table).values(**values))
            token.id = result.inserted_primary_key[0]
            self.logger.debug("Token inserted", extra={"token_id": token.id, "table": self.table.name})
        else:
            statement = (
                update(self.table)
                .where(self.table.c.id == token.id)
                .values(
                    code=token.code,
                    remaining_uses=token.remaining_uses,
                    expiration_at=token.expiration_at,
                )
            )
            with self._session_operation("update") as session:
                session.execute(statement)
            self.logger.debug("Token updated", extra={"token_id": token.id, "table": self.table.name})
        return token

    def delete(self, token: Token) -> int:
        if token.id is None:
            return 0
        return self.remove_matching({"id": token.id})

    def remove_matching(self, filters: Dict[str, Any]) -> int:
        if not filters:
            raise InvalidArgumentError("Filters cannot be empty")
        where = self._where(filters)
        if where is None:
            raise InvalidArgumentError("Filters cannot be empty")

        with self._session_operation("remove") as session:
            result = session.execute(delete(self.table).where(where))
        return result.rowcount
