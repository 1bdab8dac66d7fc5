"""Cache entry dataclass models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = ["CacheEntry", "CacheStats"]


@dataclass
class CacheEntry:
    """In-memory cache entry.

    Attributes:
        key: Cache key
        payload: Cached value, opaque to the cache
        stored_at: Clock reading (seconds) when the entry was stored
        ttl: Time-to-live in seconds
    """

    key: str
    payload: Any
    stored_at: float
    ttl: float

    def __post_init__(self) -> None:
        """Validate CacheEntry fields after initialization."""
        if not self.key:
            msg = "key must be non-empty"
            raise ValueError(msg)

        if self.ttl < 0:
            msg = f"ttl must be non-negative, got {self.ttl}"
            raise ValueError(msg)

    def is_valid(self, now: float) -> bool:
        """An entry is valid while ``now - stored_at <= ttl``."""
        return now - self.stored_at <= self.ttl

    def is_expired(self, now: float) -> bool:
        return not self.is_valid(now)


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache occupancy."""

    size: int
    max_size: int
    keys: list[str] = field(default_factory=list)
