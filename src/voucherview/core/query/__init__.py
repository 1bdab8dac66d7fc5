"""Search and filtering over the cached collection."""

from .debouncer import SearchDebouncer
from .engine import FieldFilter, QueryEngine, SearchResult, normalize_query

__all__ = [
    "FieldFilter",
    "QueryEngine",
    "SearchDebouncer",
    "SearchResult",
    "normalize_query",
]
