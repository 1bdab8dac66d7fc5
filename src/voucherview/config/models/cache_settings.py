"""Cache configuration model.

This module contains the cache configuration model for managing
caching behavior including TTL, size limits and the durable mirror.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from voucherview.shared.constants import CacheDefaults, CacheValidationConstants


class CacheSettings(BaseModel):
    """Cache configuration.

    This class manages caching behavior including TTL (time-to-live),
    the entry cap, the durable key namespace and load coalescing.
    """

    ttl: float = Field(
        default=CacheDefaults.TTL,
        ge=CacheValidationConstants.MIN_TTL,
        le=CacheValidationConstants.MAX_TTL,
        description="Default entry time-to-live in seconds",
    )
    max_entries: int = Field(
        default=CacheDefaults.MAX_ENTRIES,
        ge=CacheValidationConstants.MIN_ENTRIES,
        le=CacheValidationConstants.MAX_ENTRIES,
        description="Maximum number of in-memory entries",
    )
    namespace: str = Field(
        default=CacheDefaults.NAMESPACE,
        min_length=1,
        description="Prefix of every durable mirror key owned by this cache",
    )
    durable_dir: str | None = Field(
        default=None,
        description="Directory of the file-backed durable mirror (None keeps it in memory)",
    )
    coalesce_loads: bool = Field(
        default=False,
        description="Share one in-flight load between concurrent get_or_load calls",
    )


__all__ = ["CacheSettings"]
