"""Tests for the durable key-value stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from voucherview.services import FileDurableStore, MemoryDurableStore
from voucherview.shared.errors import DurableStoreError, ErrorCode


class TestMemoryDurableStore:
    def test_put_get_remove(self) -> None:
        store = MemoryDurableStore()

        store.put("cache_a", b"1")
        assert store.get("cache_a") == b"1"

        store.remove("cache_a")
        store.remove("cache_a")
        assert store.get("cache_a") is None

    def test_keys_filters_by_prefix(self) -> None:
        store = MemoryDurableStore()
        store.put("cache_a", b"1")
        store.put("cache_b", b"2")
        store.put("other", b"3")

        assert sorted(store.keys("cache_")) == ["cache_a", "cache_b"]
        assert len(store.keys()) == 3

    def test_quota_exceeded_raises(self) -> None:
        store = MemoryDurableStore(quota_bytes=4)
        store.put("a", b"12")

        with pytest.raises(DurableStoreError) as exc_info:
            store.put("b", b"345")

        assert exc_info.value.code == ErrorCode.DURABLE_QUOTA_EXCEEDED
        assert store.get("b") is None

    def test_overwrite_does_not_count_old_value_twice(self) -> None:
        store = MemoryDurableStore(quota_bytes=4)
        store.put("a", b"1234")

        store.put("a", b"abcd")

        assert store.get("a") == b"abcd"


class TestFileDurableStore:
    def test_creates_directory(self, tmp_path: Path) -> None:
        directory = tmp_path / "nested" / "cache"

        FileDurableStore(directory)

        assert directory.is_dir()

    def test_round_trip_and_keys(self, tmp_path: Path) -> None:
        store = FileDurableStore(tmp_path)

        store.put("cache_vouchers", b'{"data": []}')
        store.put("cache_vouchers?technician_name=Ko Kyaw", b"{}")

        assert store.get("cache_vouchers") == b'{"data": []}'
        assert sorted(store.keys("cache_")) == [
            "cache_vouchers",
            "cache_vouchers?technician_name=Ko Kyaw",
        ]

    def test_keys_survive_reopen(self, tmp_path: Path) -> None:
        FileDurableStore(tmp_path).put("cache_a/b", b"1")

        reopened = FileDurableStore(tmp_path)

        assert reopened.keys() == ["cache_a/b"]
        assert reopened.get("cache_a/b") == b"1"

    def test_missing_key_returns_none(self, tmp_path: Path) -> None:
        store = FileDurableStore(tmp_path)

        assert store.get("nope") is None
        store.remove("nope")

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        store = FileDurableStore(tmp_path)

        store.put("cache_a", b"1")

        assert [p.name for p in tmp_path.iterdir()] == ["cache_a.json"]

    def test_unwritable_directory_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(DurableStoreError):
            FileDurableStore(blocker / "cache")
