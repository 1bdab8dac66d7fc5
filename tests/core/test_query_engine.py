"""Tests for the query engine."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from voucherview.config import CacheSettings, QuerySettings
from voucherview.core.query import FieldFilter, QueryEngine, SearchResult, normalize_query
from voucherview.services import CacheStore, InMemoryCollectionSource
from voucherview.shared.errors import ErrorCode, RemoteSourceError
from voucherview.shared.models import Record, ingest_records


@pytest.fixture
def cache(clock, durable) -> CacheStore:
    return CacheStore(CacheSettings(), durable=durable, clock=clock)


@pytest.fixture
def engine(cache: CacheStore, source: InMemoryCollectionSource) -> QueryEngine:
    return QueryEngine(cache, source)


class TestNormalizeQuery:
    def test_trims_and_casefolds(self) -> None:
        assert normalize_query("  V-00AB  ") == "v-00ab"

    def test_blank_and_none(self) -> None:
        assert normalize_query("   ") == ""
        assert normalize_query(None) == ""


class TestSearch:
    """In-memory scan over a collection."""

    def test_empty_query_means_no_active_filter(self, engine: QueryEngine, documents) -> None:
        result = engine.search(ingest_records(documents), "   ")

        assert result == SearchResult.cleared()
        assert not result.active

    def test_match_is_case_insensitive(self, engine: QueryEngine, documents) -> None:
        result = engine.search(ingest_records(documents), "v-0003")

        assert [r.id for r in result.records] == ["doc-3"]
        assert result.query == "v-0003"
        assert result.active
        assert result.match_count == 1

    def test_matches_keep_collection_order(self, engine: QueryEngine, documents) -> None:
        result = engine.search(ingest_records(documents), "V-001")

        assert [r.voucher_number for r in result.records] == [f"V-{i:04d}" for i in range(10, 20)]

    def test_no_match(self, engine: QueryEngine, documents) -> None:
        result = engine.search(ingest_records(documents), "zzz")

        assert result.records == ()
        assert result.active
        assert not result.truncated

    def test_ceiling_truncates_large_result(self, engine: QueryEngine, document_factory) -> None:
        collection = ingest_records(document_factory(150))

        result = engine.search(collection, "v-")

        assert len(result.records) == 100
        assert result.truncated
        assert result.records[-1].voucher_number == "V-0099"

    def test_below_ceiling_is_not_truncated(self, engine: QueryEngine, document_factory) -> None:
        result = engine.search(ingest_records(document_factory(99)), "v-")

        assert result.match_count == 99
        assert not result.truncated

    def test_record_without_search_field_never_matches(self, engine: QueryEngine) -> None:
        collection = [Record(id="1"), Record(id="2", voucher_number="V-1")]

        result = engine.search(collection, "v")

        assert [r.id for r in result.records] == ["2"]

    def test_configured_search_fields(self, cache: CacheStore, source, documents) -> None:
        engine = QueryEngine(cache, source, QuerySettings(search_fields=("customer_name",)))

        result = engine.search(ingest_records(documents), "customer 1")

        # Customer 1 and Customer 10..19
        assert result.match_count == 11

    def test_filters_alone_activate_search(self, engine: QueryEngine, documents) -> None:
        result = engine.search(
            ingest_records(documents),
            "",
            [FieldFilter("technician_name", "Ko Kyaw")],
        )

        assert result.active
        assert result.match_count == 10
        assert all(r.technician_name == "Ko Kyaw" for r in result.records)

    def test_filters_combine_with_query(self, engine: QueryEngine, documents) -> None:
        result = engine.search(
            ingest_records(documents),
            "V-001",
            [FieldFilter("technicianName", "Ko Kyaw")],
        )

        assert [r.id for r in result.records] == ["doc-11", "doc-13", "doc-15", "doc-17", "doc-19"]

    def test_filter_records_has_no_ceiling(self, engine: QueryEngine, document_factory) -> None:
        collection = ingest_records(document_factory(300))

        filtered = engine.filter_records(collection, [FieldFilter("phone_color", "Black")])

        assert len(filtered) == 300


class TestRun:
    """Cache-backed execution."""

    @pytest.mark.asyncio
    async def test_collection_is_fetched_once(self, engine: QueryEngine, source) -> None:
        await engine.run("V-0001")
        await engine.run("V-0002")

        assert source.fetch_count == 1

    @pytest.mark.asyncio
    async def test_empty_query_does_not_fetch(self, engine: QueryEngine, source) -> None:
        result = await engine.run("  ")

        assert not result.active
        assert source.fetch_count == 0

    @pytest.mark.asyncio
    async def test_load_collection_returns_working_copy(self, engine: QueryEngine) -> None:
        first = await engine.load_collection()
        first.clear()

        second = await engine.load_collection()

        assert len(second) == 20

    @pytest.mark.asyncio
    async def test_collection_mirrored_and_rehydrated(self, engine: QueryEngine, durable, clock) -> None:
        await engine.load_collection()

        restarted = QueryEngine(
            CacheStore(CacheSettings(), durable=durable, clock=clock),
            InMemoryCollectionSource(),
        )
        records = await restarted.load_collection()

        assert len(records) == 20
        assert isinstance(records[0], Record)
        assert records[0].voucher_number == "V-0000"

    @pytest.mark.asyncio
    async def test_remote_failure_propagates(self, cache: CacheStore) -> None:
        failing = InMemoryCollectionSource()
        failing.fetch_all = AsyncMock(side_effect=RemoteSourceError(ErrorCode.NETWORK_ERROR, "offline"))
        engine = QueryEngine(cache, failing)

        with pytest.raises(RemoteSourceError):
            await engine.run("V-1")

        assert not cache.has("vouchers")

    @pytest.mark.asyncio
    async def test_load_subset_uses_remote_filter_and_caches(self, engine: QueryEngine, source, cache) -> None:
        filters = [FieldFilter("technician_name", "Ko Kyaw")]

        first = await engine.load_subset(filters)
        second = await engine.load_subset(filters)

        assert len(first) == len(second) == 10
        assert source.fetch_count == 1
        assert cache.has("vouchers?technician_name=Ko Kyaw")

    @pytest.mark.asyncio
    async def test_load_subset_without_filters_is_full_collection(self, engine: QueryEngine) -> None:
        assert len(await engine.load_subset([])) == 20

    def test_subset_key_is_order_independent(self, engine: QueryEngine) -> None:
        assert engine.subset_key({"b": 2, "a": 1}) == "vouchers?a=1&b=2"
