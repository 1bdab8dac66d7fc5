"""Record cache store for VoucherView.

This module provides a time-limited, size-bounded in-memory cache for remote
collections with an optional durable mirror. The in-memory index is
authoritative for the lifetime of the process; the durable mirror is a
best-effort optimization that lets a fresh process start warm.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable
from typing import Any, Callable

import orjson
from pydantic import BaseModel

from voucherview.config.models.cache_settings import CacheSettings
from voucherview.shared.constants import CacheDefaults
from voucherview.shared.errors import (
    DomainError,
    DurableStoreError,
    ErrorCode,
    ErrorContext,
    VoucherViewError,
    create_remote_error,
)
from voucherview.shared.logging import log_operation_error, log_operation_success
from voucherview.shared.models.cache import CacheEntry, CacheStats
from voucherview.shared.protocols import DurableStore

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Any]]


def _to_jsonable(obj: Any) -> Any:
    """orjson fallback for payload types it does not know natively."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    msg = f"Type is not JSON serializable: {type(obj).__name__}"
    raise TypeError(msg)


class CacheStore:
    """Time-bounded, size-bounded cache with a durable mirror.

    Entries are valid while ``now - stored_at <= ttl``; an invalid entry is
    indistinguishable from an absent one. When a ``set`` pushes the cache
    over ``max_entries``, expired entries are evicted first, then the
    oldest-stored ones, until the cache is at its cap.

    Args:
        settings: Cache configuration (TTL, cap, durable namespace).
        durable: Optional durable key-value mirror.
        clock: Time source in seconds; injectable for tests.
    """

    def __init__(
        self,
        settings: CacheSettings | None = None,
        durable: DurableStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or CacheSettings()
        self._durable = durable
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task[Any]] = {}

        logger.debug(
            "Initialized CacheStore (ttl=%ss, max_entries=%d, durable=%s)",
            self.settings.ttl,
            self.settings.max_entries,
            type(durable).__name__ if durable is not None else None,
        )

    @property
    def namespace(self) -> str:
        return self.settings.namespace

    @property
    def max_entries(self) -> int:
        return self.settings.max_entries

    def _durable_key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    # ------------------------------------------------------------------
    # Core contract
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``.

        Args:
            key: Cache key.
            value: Payload, opaque to the cache.
            ttl: Time-to-live in seconds; defaults to ``settings.ttl``.

        Raises:
            DomainError: If ``key`` is empty or ``ttl`` is negative.
        """
        effective_ttl = self.settings.ttl if ttl is None else ttl
        try:
            entry = CacheEntry(key=key, payload=value, stored_at=self._clock(), ttl=effective_ttl)
        except ValueError as e:
            raise DomainError(
                ErrorCode.VALIDATION_ERROR,
                str(e),
                ErrorContext(operation="cache_set", key=key),
                original_error=e,
            ) from e

        # Re-insert so that insertion order follows store order
        self._entries.pop(key, None)
        self._entries[key] = entry

        if len(self._entries) > self.max_entries:
            self._evict(protect=key)

        self._mirror(entry)

        logger.debug("Cached key '%s' (ttl=%ss)", key, effective_ttl)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the payload of a valid entry, or ``default``.

        Falls back to the durable mirror when the key is not in memory.
        """
        entry = self._lookup(key)
        if entry is None:
            return default
        return entry.payload

    def has(self, key: str) -> bool:
        """Same expiry semantics as ``get`` without returning the payload."""
        return self._lookup(key) is not None

    def delete(self, key: str) -> None:
        """Remove the in-memory and durable copies of ``key``. Idempotent."""
        self._entries.pop(key, None)
        self._remove_durable(key)

    def clear(self) -> None:
        """Remove every entry, including durable keys in this cache's namespace."""
        self._entries.clear()
        if self._durable is None:
            return
        try:
            durable_keys = self._durable.keys(self.namespace)
        except (DurableStoreError, OSError) as e:
            self._log_durable_failure("cache_clear", None, e)
            return
        for durable_key in durable_keys:
            try:
                self._durable.remove(durable_key)
            except (DurableStoreError, OSError) as e:
                self._log_durable_failure("cache_clear", durable_key, e)

        logger.debug("Cleared cache namespace '%s'", self.namespace)

    async def get_or_load(self, key: str, loader: Loader, ttl: float | None = None) -> Any:
        """Return the cached value, loading and storing it on a miss.

        The loader is awaited at most once per call. Concurrent calls for the
        same cold key each run their own loader unless ``coalesce_loads`` is
        enabled, in which case they share the first call's in-flight load.

        Raises:
            VoucherViewError: Typed loader failures propagate unchanged.
            RemoteSourceError: Any other loader failure, wrapped.
        """
        entry = self._lookup(key)
        if entry is not None:
            return entry.payload

        if not self.settings.coalesce_loads:
            return await self._load_and_store(key, loader, ttl)

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load_and_store(key, loader, ttl))
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget_inflight(k, done))
        return await asyncio.shield(task)

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        """Occupancy snapshot of the in-memory index."""
        return CacheStats(
            size=len(self._entries),
            max_size=self.max_entries,
            keys=list(self._entries),
        )

    def invalidate_pattern(self, fragment: str) -> int:
        """Delete every key containing ``fragment``, durable-only keys included.

        Returns:
            Number of deleted in-memory keys.
        """
        matching = [key for key in self._entries if fragment in key]
        for key in matching:
            self.delete(key)

        if self._durable is not None:
            try:
                durable_keys = self._durable.keys(self.namespace)
            except (DurableStoreError, OSError) as e:
                self._log_durable_failure("cache_invalidate", fragment, e)
                return len(matching)
            for durable_key in durable_keys:
                if fragment in durable_key[len(self.namespace) :]:
                    self._remove_durable(durable_key[len(self.namespace) :])
        return len(matching)

    async def preload(self, key: str, loader: Loader, ttl: float | None = None) -> Any:
        """Load and store ``key`` unconditionally.

        Unlike ``get_or_load`` a failing loader is logged and ``None`` is
        returned, so warm-up code can fire and forget.
        """
        try:
            value = await loader()
        except Exception as e:  # noqa: BLE001
            logger.warning("Failed to preload '%s': %s", key, e)
            return None
        self.set(key, value, ttl)
        return value

    def purge_expired(self) -> int:
        """Remove every expired in-memory entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            self.delete(key)
        return len(expired)

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if entry.is_valid(now))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lookup(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return self._hydrate(key)
        if entry.is_valid(self._clock()):
            return entry
        self.delete(key)
        return None

    def _evict(self, protect: str | None = None) -> None:
        now = self._clock()
        for key in [k for k, e in self._entries.items() if e.is_expired(now) and k != protect]:
            self.delete(key)

        overflow = len(self._entries) - self.max_entries
        if overflow <= 0:
            return

        # sorted() is stable, so equal timestamps keep insertion order
        oldest = sorted(
            (e for k, e in self._entries.items() if k != protect),
            key=lambda e: e.stored_at,
        )
        for entry in oldest[:overflow]:
            self.delete(entry.key)

        logger.debug("Evicted %d oldest cache entries", overflow)

    def _mirror(self, entry: CacheEntry) -> None:
        if self._durable is None:
            return
        try:
            blob = orjson.dumps(
                {
                    CacheDefaults.FIELD_DATA: entry.payload,
                    CacheDefaults.FIELD_TIMESTAMP: entry.stored_at,
                    CacheDefaults.FIELD_TTL: entry.ttl,
                },
                default=_to_jsonable,
            )
            self._durable.put(self._durable_key(entry.key), blob)
        except (TypeError, DurableStoreError, OSError) as e:
            # orjson.JSONEncodeError is a TypeError
            self._log_durable_failure("cache_mirror", entry.key, e)

    def _hydrate(self, key: str) -> CacheEntry | None:
        if self._durable is None:
            return None

        durable_key = self._durable_key(key)
        try:
            blob = self._durable.get(durable_key)
        except (DurableStoreError, OSError) as e:
            self._log_durable_failure("cache_hydrate", key, e)
            return None
        if blob is None:
            return None

        try:
            stored = orjson.loads(blob)
            entry = CacheEntry(
                key=key,
                payload=stored[CacheDefaults.FIELD_DATA],
                stored_at=float(stored[CacheDefaults.FIELD_TIMESTAMP]),
                ttl=float(stored.get(CacheDefaults.FIELD_TTL, self.settings.ttl)),
            )
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            error = DurableStoreError(
                ErrorCode.CACHE_CORRUPTED,
                f"Discarding corrupt durable entry '{key}'",
                ErrorContext(operation="cache_hydrate", key=key),
                original_error=e,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            self._remove_durable(key)
            return None

        if entry.is_expired(self._clock()):
            self._remove_durable(key)
            return None

        self._entries[key] = entry
        logger.debug("Hydrated key '%s' from durable mirror", key)
        # The hydrated entry keeps its original timestamp and competes for
        # eviction like any other; this caller still receives its payload.
        if len(self._entries) > self.max_entries:
            self._evict()
        return entry

    def _remove_durable(self, key: str) -> None:
        if self._durable is None:
            return
        try:
            self._durable.remove(self._durable_key(key))
        except (DurableStoreError, OSError) as e:
            self._log_durable_failure("cache_remove", key, e)

    async def _load_and_store(self, key: str, loader: Loader, ttl: float | None) -> Any:
        started = time.perf_counter()
        try:
            value = await loader()
        except VoucherViewError as e:
            log_operation_error(logger, e, operation="cache_get_or_load", context={"key": key})
            raise
        except Exception as e:  # noqa: BLE001
            error = create_remote_error(
                f"Loader for '{key}' failed: {e!s}",
                collection_id=key,
                operation="cache_get_or_load",
                original_error=e,
            )
            log_operation_error(logger, error)
            raise error from e

        self.set(key, value, ttl)
        log_operation_success(
            logger,
            operation="cache_get_or_load",
            duration_ms=(time.perf_counter() - started) * 1000,
            context={"key": key},
        )
        return value

    def _forget_inflight(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # Mark the exception retrieved; every awaiter already received it
            task.exception()

    def _log_durable_failure(self, operation: str, key: str | None, error: Exception) -> None:
        if isinstance(error, VoucherViewError):
            wrapped = error
        else:
            wrapped = DurableStoreError(
                ErrorCode.CACHE_SERIALIZATION_ERROR if isinstance(error, TypeError) else ErrorCode.DURABLE_WRITE_FAILED,
                f"Durable mirror operation failed: {error!s}",
                ErrorContext(operation=operation, key=key),
                original_error=error,
            )
        log_operation_error(logger, wrapped, operation=operation, level=logging.WARNING)
