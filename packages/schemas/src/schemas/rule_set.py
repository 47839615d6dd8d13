"""Public suffix rule-set model."""

from datetime import datetime, timedelta, UTC
from typing import List
from pydantic import BaseModel, Field, ConfigDict, field_validator

EPOCH = datetime.fromtimestamp(0, UTC)


class PublicSuffixRuleSet(BaseModel):
    """A parsed public suffix list snapshot.

    A snapshot is replaced whole on refresh, never edited in place.
    """

    rules: List[str] = Field(
        default_factory=list,
        description="ASCII-encoded suffix rules in document order (may start with '*.')",
    )
    exception_rules: List[str] = Field(
        default_factory=list,
        description="ASCII-encoded exception rules ('!' stripped) in document order",
    )
    fetched_at: datetime = Field(
        default=EPOCH,
        description="UTC time the rule list was fetched",
    )
    initialized: bool = Field(
        default=False,
        description="False until the first successful fetch",
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "rules": ["com", "uk", "co.uk", "*.kobe.jp"],
                "exception_rules": ["city.kobe.jp"],
                "fetched_at": "2025-10-04T14:23:45.123Z",
                "initialized": True,
            }
        },
    )

    @field_validator("rules", "exception_rules")
    @classmethod
    def _ascii_only(cls, value: List[str]) -> List[str]:
        for rule in value:
            if not rule.isascii():
                raise ValueError(f"Rule is not ASCII-encoded: {rule!r}")
        return value

    @field_validator("fetched_at")
    @classmethod
    def _aware_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def is_stale(self, now: datetime, ttl: timedelta) -> bool:
        """True when the set was never fetched or is older than ``ttl``."""
        return not self.initialized or now - self.fetched_at > ttl
