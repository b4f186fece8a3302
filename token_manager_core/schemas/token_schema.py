"""
Pydantic schema for the token domain entity.

A Token is the only thing the lifecycle manager hands out. It is a plain
model detached from storage; repositories convert rows to and from it.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import Limits
from ..enums import TokenBehavior
from ..utils.datetime_utils import ensure_utc, utc_now


class Token(BaseModel):
    """Verification code bound to an owning entity and a purpose."""

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(default=None, description="Assigned by storage on first save")
    entity_name: str = Field(
        ..., min_length=1, max_length=Limits.MAX_ENTITY_NAME_LENGTH, description="Owning domain"
    )
    entity_id: int = Field(..., ge=0, description="Owning record id")
    code: str = Field(..., min_length=1, max_length=Limits.MAX_CODE_LENGTH)
    type: str = Field(..., min_length=1, max_length=Limits.MAX_TYPE_LENGTH)
    behavior: TokenBehavior
    remaining_uses: Optional[int] = Field(
        default=None,
        ge=0,
        le=Limits.MAX_REMAINING_USES,
        description="None means unlimited uses until expiration",
    )
    expiration_at: datetime
    created_at: datetime

    @field_validator("type")
    def normalize_type(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("behavior", mode="before")
    def normalize_behavior(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("expiration_at", "created_at")
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def check_timeline(self) -> "Token":
        if self.created_at > self.expiration_at:
            raise ValueError("created_at must not be later than expiration_at")
        return self

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """A token is expired from its expiration instant onwards."""
        current = ensure_utc(now) if now is not None else utc_now()
        return current >= self.expiration_at

    def to_record(self) -> Dict[str, Any]:
        """Flat mapping of column name to value, as stored."""
        record = self.model_dump()
        record["behavior"] = self.behavior.value
        return record
