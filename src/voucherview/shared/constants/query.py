"""
Query Engine Constants
"""


class QueryDefaults:
    """Defaults for search and debouncing."""

    DEBOUNCE_DELAY = 0.3  # seconds
    RESULT_CEILING = 100
    SEARCH_FIELDS = ("voucher_number",)


class QueryMessages:
    """Status messages reported through the message sink."""

    LOADING_CACHE = "Loading voucher data..."
    CACHE_READY = "Voucher data ready"
    SEARCHING = "Searching vouchers..."
    NOT_FOUND = 'No voucher matches "{query}"'
    FOUND = "{count} vouchers found"
    FOUND_TRUNCATED = "{ceiling}+ vouchers found (showing first {ceiling})"
    LOAD_FAILED = "Could not load vouchers: {error}"
    RECORD_ADDED = "Voucher added"
    RECORD_UPDATED = "Voucher updated"
    RECORD_DELETED = "Voucher deleted"
