"""Tests for Settings and load_settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from voucherview.config import QuerySettings, Settings, load_settings
from voucherview.shared.constants import CacheKeys
from voucherview.shared.errors import ConfigurationError, ErrorCode


class TestSettingsDefaults:
    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.cache.ttl == 300
        assert settings.cache.max_entries == 50
        assert settings.cache.namespace == "cache_"
        assert settings.cache.coalesce_loads is False
        assert settings.query.debounce_delay == 0.3
        assert settings.query.result_ceiling == 100
        assert settings.query.search_fields == ("voucher_number",)
        assert settings.viewport.item_height == 60
        assert settings.viewport.buffer_size == 5

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VOUCHERVIEW_CACHE__TTL", "60")
        monkeypatch.setenv("VOUCHERVIEW_VIEWPORT__BUFFER_SIZE", "2")

        settings = Settings()

        assert settings.cache.ttl == 60
        assert settings.viewport.buffer_size == 2

    def test_search_fields_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            QuerySettings(search_fields=())


class TestTomlFiles:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "voucherview.toml"
        original = Settings()
        original.cache.ttl = 120
        original.query.search_fields = ("voucher_number", "customer_name")

        original.to_toml_file(path)
        loaded = load_settings(path)

        assert loaded.cache.ttl == 120
        assert loaded.query.search_fields == ("voucher_number", "customer_name")
        assert loaded.cache.durable_dir is None

    def test_file_values_beat_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "voucherview.toml"
        path.write_text("[cache]\nttl = 30\n", encoding="utf-8")
        monkeypatch.setenv("VOUCHERVIEW_CACHE__TTL", "90")

        assert load_settings(path).cache.ttl == 30

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(tmp_path / "missing.toml")

        assert exc_info.value.code == ErrorCode.CONFIG_ERROR

    def test_malformed_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.toml"
        path.write_text("[cache\nttl = ", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_settings(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "invalid.toml"
        path.write_text("[viewport]\nitem_height = 0\n", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(path)

        assert "invalid.toml" in exc_info.value.message

    def test_no_file_uses_defaults(self) -> None:
        assert load_settings().query.collection_id == "vouchers"

    def test_default_collection_is_vouchers_key(self) -> None:
        assert Settings().query.collection_id == CacheKeys.VOUCHERS
