"""
Token lifecycle manager.

TokenManager centralizes the creation of verification codes in one place.
Every generated code is saved through a token store and can be redeemed
later. All tokens are bound to an entity name and an entity id (usually a
user row) plus a type.

Examples:
    - email validation
    - discount codes
    - recovery pins
    - one-time links
"""

import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from ..config import AppConfig, TokenManagerConfig, get_config
from ..constants import Limits
from ..enums import TokenBehavior
from ..exceptions import (
    InvalidArgumentError,
    NotConfiguredError,
    UnknownBehaviorError,
    UnknownTypeError,
)
from ..repositories.token_repository import TokenStore
from ..schemas.token_schema import Token
from ..utils.datetime_utils import ensure_utc, utc_now
from ..utils.logger import get_logger
from .token_behavior import MutationKind, TokenMutation, TokenRequest, plan_token_mutation


class TokenManager:
    """
    Issues, redeems and removes tokens.

    The manager keeps no state besides its configuration, so one instance can
    be shared. ``create`` and ``redeem`` run their lookup and write inside
    ``store.transaction()``; whether that is atomic across threads or
    processes depends on the store.
    """

    def __init__(
        self,
        config: Optional[TokenManagerConfig],
        store: Optional[TokenStore],
        clock: Optional[Callable[[], datetime]] = None,
        logger=None,
    ):
        """
        Initialize the manager.

        Args:
            config: Recognized types, default code length and charset
            store: Storage backend
            clock: Returns the current UTC time (default: utc_now)
            logger: Optional logger instance

        Raises:
            NotConfiguredError: If config or store is missing
        """
        if config is None:
            raise NotConfiguredError()
        if store is None:
            raise NotConfiguredError("TokenManager requires a token store")

        self.config = config
        self.store = store
        self.clock = clock or utc_now
        self.logger = logger or get_logger()

    @classmethod
    def from_config(
        cls, store: TokenStore, app_config: Optional[AppConfig] = None, **kwargs: Any
    ) -> "TokenManager":
        """
        Build a manager from the application configuration.

        Raises:
            NotConfiguredError: If no token types are configured
        """
        app_config = app_config or get_config()
        if not app_config.tokens.types:
            raise NotConfiguredError(
                "TokenManager requires at least one token type", operation="from_config"
            )
        return cls(app_config.tokens, store, **kwargs)

    @property
    def types(self) -> List[str]:
        """Accepted token types."""
        return list(self.config.types)

    @staticmethod
    def behaviors() -> List[str]:
        """Accepted behaviors."""
        return TokenBehavior.values()

    def _now(self) -> datetime:
        return ensure_utc(self.clock())

    def _validate_type(self, token_type: Any) -> str:
        normalized = token_type.strip().lower() if isinstance(token_type, str) else None
        if normalized is None or normalized not in self.config.types:
            raise UnknownTypeError(f"Unknown token type: {token_type!r}", token_type=token_type)
        return normalized

    def _validate_behavior(self, behavior: Any) -> TokenBehavior:
        try:
            return TokenBehavior(behavior.strip().lower())
        except (AttributeError, ValueError) as e:
            raise UnknownBehaviorError(
                f"Unknown token behavior: {behavior!r}", behavior=behavior, cause=e
            )

    def create(
        self,
        entity_name: str,
        entity_id: int,
        type: str,
        behavior: str,
        duration: int,
        max_uses: int = 0,
        code_length: int = 0,
    ) -> Token:
        """
        Create a token and save it, honoring the behavior of any active token.

        Args:
            entity_name: Owning entity. A table name ("users") or a model
                reference ("myapp.models:User")
            entity_id: Owning record id
            type: Token purpose, one of the configured types
            behavior: What later create calls for the same entity and type do
                when this token is still active:
                - add: add a new token no matter how many already exist
                - unique: return this token unchanged
                - renew: keep the code, refresh expiration and remaining uses
                - replace: keep the row, generate a new code, refresh the rest
            duration: Seconds from now until expiration
            max_uses: Number of redemptions allowed. 0 or less means unlimited
                until expiration
            code_length: Length of the generated code. 0 or less uses the
                configured default

        Returns:
            The new, updated or unchanged token

        Raises:
            UnknownTypeError: If type is not configured
            UnknownBehaviorError: If behavior is not one of the four values
            UnknownEntityError: If the entity name cannot be resolved
            InvalidArgumentError: If duration, entity_id or max_uses are out of range
        """
        token_type = self._validate_type(type)
        token_behavior = self._validate_behavior(behavior)

        if duration < 0:
            raise InvalidArgumentError("duration cannot be negative", duration=duration)
        if entity_id < 0:
            raise InvalidArgumentError("entity_id cannot be negative", entity_id=entity_id)
        if max_uses > Limits.MAX_REMAINING_USES:
            raise InvalidArgumentError(
                f"max_uses cannot exceed {Limits.MAX_REMAINING_USES}", max_uses=max_uses
            )

        entity_name = self.store.normalize_entity_name(entity_name)

        created_at = self._now()
        request = TokenRequest(
            entity_name=entity_name,
            entity_id=entity_id,
            type=token_type,
            behavior=token_behavior,
            remaining_uses=max_uses if max_uses >= 1 else None,
            expiration_at=created_at + timedelta(seconds=duration),
            created_at=created_at,
            code_length=code_length if code_length >= 1 else self.config.default_code_length,
        )

        with self.store.transaction():
            existing = self.find_active(
                {"entity_name": entity_name, "entity_id": entity_id, "type": token_type}
            )
            mutation = plan_token_mutation(existing, request)
            token = self._apply_mutation(mutation)

        self.logger.info(
            "Token created" if mutation.kind == MutationKind.INSERT_NEW else "Token reused",
            extra={
                "token_id": token.id,
                "entity_name": entity_name,
                "entity_id": entity_id,
                "token_type": token_type,
                "mutation": mutation.kind.value,
            },
        )
        return token

    def _apply_mutation(self, mutation: TokenMutation) -> Token:
        request = mutation.request

        if mutation.kind == MutationKind.INSERT_NEW:
            token = Token(
                entity_name=request.entity_name,
                entity_id=request.entity_id,
                code=self.generate_code(request.code_length),
                type=request.type,
                behavior=request.behavior,
                remaining_uses=request.remaining_uses,
                expiration_at=request.expiration_at,
                created_at=request.created_at,
            )
        else:
            token = mutation.existing
            if mutation.needs_code:
                token.code = self.generate_code(request.code_length)
            if mutation.needs_save:
                token.remaining_uses = request.remaining_uses
                token.expiration_at = request.expiration_at

        if mutation.needs_save:
            token = self.store.save(token)
        return token

    def redeem(self, code: str, type: str) -> Optional[Token]:
        """
        Redeem a token if it has not expired and still has uses left.

        A token with unlimited uses is returned unchanged. Otherwise one use
        is consumed. A token found with no uses left is deleted and None is
        returned, so exhaustion is cleaned up on the attempt after the last
        successful redemption.

        Args:
            code: The code handed to the user
            type: Token type, see create()

        Returns:
            The redeemed token, or None

        Raises:
            UnknownTypeError: If type is not configured
            InvalidArgumentError: If code is not a string
        """
        # A list here would be read as an operator by the filter parser
        if not isinstance(code, str):
            raise InvalidArgumentError("code must be a string", field="code")

        with self.store.transaction():
            token = self.find_active({"code": code, "type": type})

            if token is None or token.remaining_uses is None:
                return token

            if token.remaining_uses >= 1:
                token.remaining_uses -= 1
                self.store.save(token)
                self.logger.info(
                    "Token redeemed",
                    extra={"token_id": token.id, "remaining_uses": token.remaining_uses},
                )
                return token

            self.store.delete(token)
            self.logger.info("Token used up and removed", extra={"token_id": token.id})
            return None

    def remove_token(self, token: Token) -> int:
        """Delete a single token."""
        with self.store.transaction():
            removed = self.store.delete(token)
        self.logger.debug("Token removed", extra={"token_id": token.id, "removed": removed})
        return removed

    def remove_all_of_type(self, entity_name: str, entity_id: int, type: str) -> int:
        """
        Delete every token of a type for an entity, expired or not.

        Returns:
            Number of tokens removed
        """
        entity_name = self.store.normalize_entity_name(entity_name)
        token_type = type.strip().lower()
        filters = {"entity_name": entity_name, "entity_id": entity_id, "type": token_type}

        with self.store.transaction():
            removed = self.store.remove_matching(filters)

        self.logger.info(
            "Tokens removed",
            extra={
                "entity_name": entity_name,
                "entity_id": entity_id,
                "token_type": token_type,
                "removed": removed,
            },
        )
        return removed

    def remove_expired(self, now: Optional[datetime] = None) -> int:
        """
        Delete every expired token.

        Expired tokens are already ignored and purged by lookups; this is for
        callers that want to reclaim space explicitly.
        """
        cutoff = ensure_utc(now) if now is not None else self._now()
        with self.store.transaction():
            removed = self.store.remove_matching({"expiration_at": ["<=", cutoff]})
        self.logger.info("Expired tokens removed", extra={"removed": removed})
        return removed

    def find_active(self, filters: Dict[str, Any]) -> Optional[Token]:
        """
        Find a token, treating an expired match as absent.

        An expired match is deleted before None is returned.

        Args:
            filters: Filter specification, must include a configured "type"

        Raises:
            UnknownTypeError: If filters has no type or an unknown one
        """
        if "type" not in filters:
            raise UnknownTypeError("A token type is required to look up tokens")
        filters = {**filters, "type": self._validate_type(filters["type"])}

        token = self.store.find(filters)
        if token is not None and token.is_expired(self._now()):
            self.store.delete(token)
            self.logger.debug("Expired token removed", extra={"token_id": token.id})
            return None
        return token

    def generate_code(
        self, length: int, allow_letters: bool = True, allow_numbers: bool = True
    ) -> str:
        """
        Generate a random code from the configured charset.

        Each character is drawn independently with a cryptographically secure
        generator. Codes are not checked for uniqueness.

        Args:
            length: Requested length, raised to the minimum of 4 if smaller
            allow_letters: Include the letter alphabet
            allow_numbers: Include the digit alphabet

        Raises:
            InvalidArgumentError: If both alphabets are disabled or empty
        """
        if not allow_letters and not allow_numbers:
            raise InvalidArgumentError(
                "You must allow at least one type of character: letters or numbers"
            )

        length = max(Limits.MIN_CODE_LENGTH, length)

        pool = ""
        if allow_numbers:
            pool += self.config.charset.numbers
        if allow_letters:
            pool += self.config.charset.letters
        if not pool:
            raise InvalidArgumentError("The configured charset is empty")

        return "".join(secrets.choice(pool) for _ in range(length))
