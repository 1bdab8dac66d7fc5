"""VoucherView services: caching and remote data access."""

from .cache_store import CacheStore
from .durable_store import FileDurableStore, MemoryDurableStore
from .remote_source import InMemoryCollectionSource, JsonFileCollectionSource
from .retry import retry_async

__all__ = [
    "CacheStore",
    "FileDurableStore",
    "InMemoryCollectionSource",
    "JsonFileCollectionSource",
    "MemoryDurableStore",
    "retry_async",
]
