"""Shared data models."""

from .cache import CacheEntry, CacheStats
from .record import Record, ingest_records

__all__ = [
    "CacheEntry",
    "CacheStats",
    "Record",
    "ingest_records",
]
