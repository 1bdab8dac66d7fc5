"""Query engine: substring search and field filters over the cached collection.

The engine never talks to the remote source on its own behalf: every
collection it scans comes out of the cache store, which loads it once
through the injected source when cold.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from voucherview.config.models.query_settings import QuerySettings
from voucherview.services.cache_store import CacheStore
from voucherview.shared.logging import log_operation_start, log_operation_success
from voucherview.shared.models.record import Record, ingest_records
from voucherview.shared.protocols import RemoteCollectionSource

logger = logging.getLogger(__name__)


def normalize_query(raw_query: str | None) -> str:
    """Trim and case-fold a raw query."""
    if not raw_query:
        return ""
    return raw_query.strip().casefold()


@dataclass(frozen=True)
class FieldFilter:
    """Exact-match predicate on one record field.

    Example:
        >>> FieldFilter("technician_name", "Ko Kyaw").matches(record)
    """

    field: str
    value: Any

    def matches(self, record: Record) -> bool:
        return record.get_field(self.field) == self.value

    def as_predicate(self) -> tuple[str, Any]:
        return Record.field_name(self.field), self.value


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search.

    Attributes:
        records: Matches in collection order, at most the ceiling.
        query: The normalized query.
        active: False when there is no active filter; callers then show the
            unfiltered collection.
        truncated: True when the ceiling was reached.
        match_count: Count for UI feedback.
    """

    records: tuple[Record, ...] = ()
    query: str = ""
    active: bool = False
    truncated: bool = False
    match_count: int = 0
    filters: tuple[FieldFilter, ...] = field(default_factory=tuple)

    @classmethod
    def cleared(cls) -> SearchResult:
        return cls()


class QueryEngine:
    """Search over the cached record collection.

    Args:
        cache: Cache store holding the collection.
        source: Remote source used by the cache loader.
        settings: Ceiling, searched fields and collection id.
    """

    def __init__(
        self,
        cache: CacheStore,
        source: RemoteCollectionSource,
        settings: QuerySettings | None = None,
    ) -> None:
        self.cache = cache
        self.source = source
        self.settings = settings or QuerySettings()

    @property
    def collection_id(self) -> str:
        return self.settings.collection_id

    @property
    def ceiling(self) -> int:
        return self.settings.result_ceiling

    async def load_collection(self) -> list[Record]:
        """Return a working copy of the full collection, loading it once when cold."""
        payload = await self.cache.get_or_load(self.collection_id, self._fetch_collection)
        return ingest_records(payload)

    async def load_subset(self, filters: Sequence[FieldFilter]) -> list[Record]:
        """Return records matching ``filters`` through a separately cached remote query."""
        if not filters:
            return await self.load_collection()
        predicate = dict(f.as_predicate() for f in filters)
        key = self.subset_key(predicate)

        async def _fetch() -> list[Record]:
            documents = await self.source.fetch_filtered(self.collection_id, self._to_remote(predicate))
            return ingest_records(documents)

        payload = await self.cache.get_or_load(key, _fetch)
        return ingest_records(payload)

    def subset_key(self, predicate: dict[str, Any]) -> str:
        parts = "&".join(f"{name}={predicate[name]}" for name in sorted(predicate))
        return f"{self.collection_id}?{parts}"

    @staticmethod
    def _to_remote(predicate: dict[str, Any]) -> dict[str, Any]:
        # The store speaks camelCase
        fields = Record.model_fields
        return {(fields[name].alias or name) if name in fields else name: value for name, value in predicate.items()}

    async def _fetch_collection(self) -> list[Record]:
        documents = await self.source.fetch_all(self.collection_id)
        records = ingest_records(documents)
        logger.info("Loaded %d records from '%s'", len(records), self.collection_id)
        return records

    def search(
        self,
        collection: Iterable[Record],
        raw_query: str | None,
        filters: Sequence[FieldFilter] = (),
    ) -> SearchResult:
        """Scan ``collection`` once, collecting matches up to the ceiling.

        An empty query with no filters means "no active filter".
        """
        query = normalize_query(raw_query)
        if not query and not filters:
            return SearchResult.cleared()

        started = time.perf_counter()
        log_operation_start(logger, "search", {"query": query, "filters": len(filters)})

        matches: list[Record] = []
        truncated = False
        for record in collection:
            if filters and not all(f.matches(record) for f in filters):
                continue
            if query and not self._matches_text(record, query):
                continue
            matches.append(record)
            if len(matches) >= self.ceiling:
                truncated = True
                break

        log_operation_success(
            logger,
            operation="search",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"matches": len(matches), "truncated": truncated},
        )
        return SearchResult(
            records=tuple(matches),
            query=query,
            active=True,
            truncated=truncated,
            match_count=len(matches),
            filters=tuple(filters),
        )

    def filter_records(self, collection: Iterable[Record], filters: Sequence[FieldFilter]) -> list[Record]:
        """All records matching every filter, in collection order, without a ceiling."""
        return [record for record in collection if all(f.matches(record) for f in filters)]

    async def run(self, raw_query: str | None, filters: Sequence[FieldFilter] = ()) -> SearchResult:
        """Load the collection from the cache (once, if cold) and search it."""
        if not normalize_query(raw_query) and not filters:
            return SearchResult.cleared()
        collection = await self.load_collection()
        return self.search(collection, raw_query, filters)

    def _matches_text(self, record: Record, query: str) -> bool:
        for field_name in self.settings.search_fields:
            value = record.get_field(field_name)
            if value is not None and query in str(value).casefold():
                return True
        return False
