"""
Cache Configuration Constants

Centralized defaults for the record cache store.
"""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE


class CacheDefaults:
    """Defaults for the in-memory record cache."""

    TTL = 5 * BASE_MINUTE  # 5 minutes
    MAX_ENTRIES = 50
    NAMESPACE = "cache_"

    # Durable mirror blob fields
    FIELD_DATA = "data"
    FIELD_TIMESTAMP = "timestamp"
    FIELD_TTL = "ttl"


class CacheKeys:
    """Well-known cache keys used by the record application."""

    VOUCHERS = "vouchers"


class CacheValidationConstants:
    """Cache validation constants."""

    MIN_TTL = BASE_SECOND
    MAX_TTL = 365 * 24 * BASE_HOUR

    MIN_ENTRIES = 1
    MAX_ENTRIES = 100000
