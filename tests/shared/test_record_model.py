"""Tests for the Record model and ingestion."""

from __future__ import annotations

import logging

import pytest

from voucherview.shared.errors import DomainError, ErrorCode
from voucherview.shared.models import CacheEntry, Record, ingest_records


class TestRecordFromRaw:
    """Validation at ingestion."""

    def test_accepts_camel_case_documents(self) -> None:
        record = Record.from_raw(
            {
                "id": "doc-1",
                "customerName": "Aung Aung",
                "voucherNumber": "V-0001",
                "technicianName": "Ko Kyaw",
                "amount": "15000",
            }
        )

        assert record.customer_name == "Aung Aung"
        assert record.voucher_number == "V-0001"
        assert record.technician_name == "Ko Kyaw"
        assert record.amount == 15000.0

    def test_numeric_voucher_number_becomes_text(self) -> None:
        record = Record.from_raw({"id": 7, "voucherNumber": 1234})

        assert record.id == "7"
        assert record.voucher_number == "1234"

    def test_unparseable_amount_reads_as_missing(self) -> None:
        assert Record.from_raw({"id": "1", "amount": "abc"}).amount is None

    def test_checkbox_on_means_taken(self) -> None:
        assert Record.from_raw({"id": "1", "takenByCustomer": "on"}).taken_by_customer is True
        assert Record.from_raw({"id": "1"}).taken_by_customer is False

    def test_fallback_id_is_used_when_missing(self) -> None:
        assert Record.from_raw({"voucherNumber": "V-1"}, fallback_id="generated").id == "generated"

    def test_missing_id_raises_domain_error(self) -> None:
        with pytest.raises(DomainError) as exc_info:
            Record.from_raw({"voucherNumber": "V-1"})

        assert exc_info.value.code == ErrorCode.INVALID_RECORD

    def test_extra_fields_are_preserved(self) -> None:
        record = Record.from_raw({"id": "1", "notes": "screen cracked"})

        assert record.get_field("notes") == "screen cracked"
        assert record.get_field("unknown") is None


class TestRecordHelpers:
    def test_field_name_resolves_aliases(self) -> None:
        assert Record.field_name("voucherNumber") == "voucher_number"
        assert Record.field_name("voucher_number") == "voucher_number"
        assert Record.field_name("notes") == "notes"

    def test_get_field_accepts_alias(self) -> None:
        record = Record(id="1", voucher_number="V-9")

        assert record.get_field("voucherNumber") == "V-9"

    def test_with_patch_returns_new_record(self) -> None:
        original = Record(id="1", customer_name="Old")

        patched = original.with_patch({"customerName": "New", "amount": 500})

        assert patched.customer_name == "New"
        assert patched.amount == 500.0
        assert original.customer_name == "Old"

    def test_display_values_use_placeholders(self) -> None:
        values = Record(id="1").display_values()

        assert values["customer_name"] == "Unknown"
        assert values["voucher_number"] == "N/A"
        assert values["date"] == "No Date"
        assert values["amount"] == "0 ¥"
        assert values["taken"] == "Not Taken"

    def test_display_amount_is_grouped(self) -> None:
        assert Record(id="1", amount=1234567).display_values()["amount"] == "1,234,567 ¥"


class TestIngestRecords:
    def test_invalid_documents_are_skipped(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            records = ingest_records([{"id": "1"}, {"voucherNumber": "no id"}, {"id": "3"}])

        assert [r.id for r in records] == ["1", "3"]
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_records_pass_through(self) -> None:
        record = Record(id="1")

        assert ingest_records([record])[0] is record


class TestCacheEntry:
    def test_validity_window_is_inclusive(self) -> None:
        entry = CacheEntry(key="k", payload=1, stored_at=100.0, ttl=10)

        assert entry.is_valid(110.0)
        assert entry.is_expired(110.5)

    def test_rejects_empty_key(self) -> None:
        with pytest.raises(ValueError):
            CacheEntry(key="", payload=1, stored_at=0, ttl=1)
