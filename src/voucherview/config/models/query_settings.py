"""Query engine configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from voucherview.shared.constants import CacheKeys, QueryDefaults


class QuerySettings(BaseModel):
    """Search configuration: debounce delay, result ceiling and searched fields."""

    debounce_delay: float = Field(
        default=QueryDefaults.DEBOUNCE_DELAY,
        ge=0,
        description="Quiet period in seconds before a typed query runs",
    )
    result_ceiling: int = Field(
        default=QueryDefaults.RESULT_CEILING,
        gt=0,
        description="Maximum number of search results",
    )
    search_fields: tuple[str, ...] = Field(
        default=QueryDefaults.SEARCH_FIELDS,
        description="Record fields tested by the substring predicate",
    )
    collection_id: str = Field(
        default=CacheKeys.VOUCHERS,
        min_length=1,
        description="Remote collection backing the record list",
    )

    @field_validator("search_fields")
    @classmethod
    def _require_fields(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            msg = "search_fields must name at least one field"
            raise ValueError(msg)
        return value


__all__ = ["QuerySettings"]
