"""Tests for SearchDebouncer."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from voucherview.core.query import SearchDebouncer


@pytest.fixture
def on_query() -> Mock:
    return Mock()


@pytest.fixture
def on_clear() -> Mock:
    return Mock()


@pytest.fixture
def debouncer(scheduler, on_query: Mock, on_clear: Mock) -> SearchDebouncer:
    return SearchDebouncer(scheduler, on_query=on_query, on_clear=on_clear, delay=0.3)


class TestSearchDebouncer:
    def test_burst_runs_only_last_value(self, debouncer, scheduler, on_query: Mock) -> None:
        # Given: three keystrokes inside the quiet period
        debouncer.input("V")
        debouncer.input("V-")
        debouncer.input("V-1")

        # Then: only one timer is armed
        assert len(scheduler.pending) == 1
        assert scheduler.pending[0].delay == 0.3
        on_query.assert_not_called()

        # When: the quiet period elapses
        scheduler.fire_pending()

        # Then: the query runs once with the final value
        on_query.assert_called_once_with("V-1")
        assert not debouncer.pending

    def test_confirm_runs_immediately_and_drops_timer(self, debouncer, scheduler, on_query: Mock) -> None:
        debouncer.input("V-1")

        debouncer.confirm("V-12")

        on_query.assert_called_once_with("V-12")
        assert scheduler.pending == []

    def test_clearing_input_reverts_immediately(
        self, debouncer, scheduler, on_query: Mock, on_clear: Mock
    ) -> None:
        debouncer.input("V-1")

        debouncer.input("   ")

        on_clear.assert_called_once_with()
        assert scheduler.pending == []
        on_query.assert_not_called()

    def test_confirm_empty_clears(self, debouncer, on_query: Mock, on_clear: Mock) -> None:
        debouncer.confirm("")

        on_clear.assert_called_once_with()
        on_query.assert_not_called()

    def test_cancel_prevents_query(self, debouncer, scheduler, on_query: Mock) -> None:
        debouncer.input("V-1")

        debouncer.cancel()
        scheduler.fire_pending()

        on_query.assert_not_called()
        assert not debouncer.pending
