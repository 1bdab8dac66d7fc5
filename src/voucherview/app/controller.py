"""
Record List Controller

Wires the cache-backed query engine, the viewport renderer and the search
debouncer together, and reports user-facing status through a message sink.
Components below this layer raise typed errors; this is the only place that
turns them into messages.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from voucherview.core.query import FieldFilter, QueryEngine, SearchDebouncer, SearchResult, normalize_query
from voucherview.core.viewport import ViewportRenderer
from voucherview.shared.constants import QueryDefaults, QueryMessages
from voucherview.shared.errors import ApplicationError, ErrorCode, ErrorContext, VoucherViewError
from voucherview.shared.logging import log_operation_error
from voucherview.shared.models.record import Record, ingest_records
from voucherview.shared.protocols import MessageSink, RecordMutationApi, TaskScheduler

logger = logging.getLogger(__name__)


class ListMode(str, Enum):
    ALL = "all"
    FILTERED = "filtered"


@dataclass(frozen=True)
class ActiveList:
    """The list currently shown by the renderer.

    Attributes:
        records: Rows in display order.
        mode: ``ALL`` for the full collection, ``FILTERED`` otherwise.
        query: Normalized search text that produced the list.
        truncated: True when a search hit the result ceiling.
        match_count: Number of rows, for status feedback.
        sequence: Stamp of the request that produced the list.
    """

    records: tuple[Record, ...] = ()
    mode: ListMode = ListMode.ALL
    query: str = ""
    truncated: bool = False
    match_count: int = 0
    sequence: int = 0

    def __len__(self) -> int:
        return len(self.records)


class RecordListController:
    """Orchestrate search and rendering of the voucher list.

    Every request that replaces the active list takes a new sequence number.
    A response is applied only while its number is still the latest, so a
    slow search can never overwrite a newer one.

    Args:
        engine: Query engine (owns the cache store and remote source).
        renderer: Viewport renderer for the active list.
        messages: Sink for status and error messages.
        scheduler: Timer and background-task facility of the running loop.
        mutations: Remote create/update/delete API; optional for read-only use.
        debounce_delay: Quiet period before a typed query runs.
    """

    def __init__(
        self,
        engine: QueryEngine,
        renderer: ViewportRenderer,
        messages: MessageSink,
        scheduler: TaskScheduler,
        mutations: RecordMutationApi | None = None,
        debounce_delay: float = QueryDefaults.DEBOUNCE_DELAY,
    ) -> None:
        self.engine = engine
        self.cache = engine.cache
        self.renderer = renderer
        self.messages = messages
        self.scheduler = scheduler
        self.mutations = mutations
        self.debouncer = SearchDebouncer(
            scheduler,
            on_query=self._schedule_query,
            on_clear=self.clear_search,
            delay=debounce_delay,
        )

        self._active = ActiveList()
        self._sequence = 0
        self._query_text = ""
        self._filters: tuple[FieldFilter, ...] = ()
        self._destroyed = False

    @property
    def active_list(self) -> ActiveList:
        return self._active

    @property
    def filters(self) -> tuple[FieldFilter, ...]:
        return self._filters

    @property
    def sequence(self) -> int:
        return self._sequence

    # ------------------------------------------------------------------
    # Loading and searching
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Show the full collection, loading it into the cache when cold."""
        sequence = self._next_sequence()
        self.messages.show(QueryMessages.LOADING_CACHE)
        try:
            records = await self.engine.load_collection()
        except VoucherViewError as e:
            self._report_failure(e, "load", sequence)
            return False

        if not self._is_current(sequence):
            return False
        self._apply(ActiveList(records=tuple(records), match_count=len(records), sequence=sequence))
        self.messages.show(QueryMessages.CACHE_READY)
        return True

    def on_search_input(self, text: str) -> None:
        """Keystroke handler for the search box."""
        self._query_text = text
        self.debouncer.input(text)

    def on_search_confirm(self, text: str) -> None:
        """Enter/submit handler; runs the query without waiting."""
        self._query_text = text
        self.debouncer.confirm(text)

    async def apply_query(self, text: str) -> SearchResult | None:
        """Run ``text`` together with the current filters.

        Returns:
            The search outcome, or ``None`` when it failed or was superseded.
        """
        self._query_text = text
        sequence = self._next_sequence()
        query = normalize_query(text)

        if not query:
            return await self._show_unsearched(sequence)

        self.messages.show(QueryMessages.SEARCHING)
        try:
            result = await self.engine.run(text, self._filters)
        except VoucherViewError as e:
            self._report_failure(e, "search", sequence)
            return None

        if not self._is_current(sequence):
            logger.debug("Discarding stale search #%d for %r", sequence, query)
            return None

        self._apply(
            ActiveList(
                records=result.records,
                mode=ListMode.FILTERED,
                query=result.query,
                truncated=result.truncated,
                match_count=result.match_count,
                sequence=sequence,
            )
        )
        self._report_result(result, text)
        return result

    def clear_search(self) -> None:
        """Drop the query and restore the unsearched list.

        Restores synchronously from the cache when the collection is warm;
        otherwise falls back to a background reload.
        """
        self.debouncer.cancel()
        self._query_text = ""
        sequence = self._next_sequence()

        if not self._filters:
            cached = self.cache.get(self.engine.collection_id)
            if cached is not None:
                records = ingest_records(cached)
                self._apply(ActiveList(records=tuple(records), match_count=len(records), sequence=sequence))
                self.messages.show(QueryMessages.FOUND.format(count=len(records)))
                return

        self.scheduler.spawn(self.apply_query(""))

    def set_filters(self, filters: Sequence[FieldFilter]) -> None:
        """Replace the field filters and re-run the current query with them."""
        self._filters = tuple(filters)
        self.debouncer.cancel()
        self.scheduler.spawn(self.apply_query(self._query_text))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_record(self, data: Mapping[str, Any]) -> str | None:
        """Create a record remotely, then reload the list from fresh data."""
        mutations = self._require_mutations("add_record")
        try:
            record_id = await mutations.create_record(self.engine.collection_id, data)
        except VoucherViewError as e:
            self._report_failure(e, "add_record")
            return None
        await self._after_mutation(QueryMessages.RECORD_ADDED)
        return record_id

    async def update_record(self, record_id: str, patch: Mapping[str, Any]) -> bool:
        mutations = self._require_mutations("update_record")
        try:
            await mutations.update_record(self.engine.collection_id, record_id, patch)
        except VoucherViewError as e:
            self._report_failure(e, "update_record")
            return False
        await self._after_mutation(QueryMessages.RECORD_UPDATED)
        return True

    async def delete_record(self, record_id: str) -> bool:
        mutations = self._require_mutations("delete_record")
        try:
            await mutations.delete_record(self.engine.collection_id, record_id)
        except VoucherViewError as e:
            self._report_failure(e, "delete_record")
            return False
        await self._after_mutation(QueryMessages.RECORD_DELETED)
        return True

    def destroy(self) -> None:
        """Cancel pending work and release the renderer. Safe to call twice."""
        if self._destroyed:
            return
        self._destroyed = True
        self.debouncer.cancel()
        # Invalidate anything still in flight
        self._next_sequence()
        self.renderer.destroy()
        logger.debug("RecordListController destroyed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _is_current(self, sequence: int) -> bool:
        return not self._destroyed and sequence == self._sequence

    def _schedule_query(self, text: str) -> None:
        self.scheduler.spawn(self.apply_query(text))

    async def _show_unsearched(self, sequence: int) -> SearchResult | None:
        try:
            if self._filters:
                records = await self.engine.load_subset(self._filters)
            else:
                records = await self.engine.load_collection()
        except VoucherViewError as e:
            self._report_failure(e, "load", sequence)
            return None

        if not self._is_current(sequence):
            return None

        mode = ListMode.FILTERED if self._filters else ListMode.ALL
        self._apply(ActiveList(records=tuple(records), mode=mode, match_count=len(records), sequence=sequence))
        self.messages.show(QueryMessages.FOUND.format(count=len(records)))
        return SearchResult.cleared()

    async def _after_mutation(self, message: str) -> None:
        removed = self.cache.invalidate_pattern(self.engine.collection_id)
        logger.debug("Invalidated %d cache entries after mutation", removed)
        self.messages.show(message)
        await self.apply_query(self._query_text)

    def _apply(self, active: ActiveList) -> None:
        self._active = active
        self.renderer.set_data(active.records)

    def _report_result(self, result: SearchResult, text: str) -> None:
        if result.match_count == 0:
            self.messages.show(QueryMessages.NOT_FOUND.format(query=text.strip()))
        elif result.truncated:
            self.messages.show(QueryMessages.FOUND_TRUNCATED.format(ceiling=self.engine.ceiling))
        else:
            self.messages.show(QueryMessages.FOUND.format(count=result.match_count))

    def _report_failure(self, error: VoucherViewError, operation: str, sequence: int | None = None) -> None:
        log_operation_error(logger, error, operation=operation)
        if sequence is not None and not self._is_current(sequence):
            return
        self.messages.show(QueryMessages.LOAD_FAILED.format(error=error.message), is_error=True)

    def _require_mutations(self, operation: str) -> RecordMutationApi:
        if self.mutations is None:
            raise ApplicationError(
                ErrorCode.APPLICATION_ERROR,
                "No mutation API configured",
                ErrorContext(operation=operation),
            )
        return self.mutations
