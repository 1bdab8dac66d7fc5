"""Tests for the PySide6 adapter: scroll surface, scheduler and record list view."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import Qt  # noqa: E402
from PySide6.QtWidgets import QLabel  # noqa: E402

from voucherview.app import RecordListController  # noqa: E402
from voucherview.core.viewport import ViewportRenderer  # noqa: E402
from voucherview.gui import QtScheduler, QtScrollSurface, RecordListView, StatusSink  # noqa: E402
from voucherview.shared.models import ingest_records  # noqa: E402

pytestmark = pytest.mark.gui


@pytest.fixture
def scroll_surface(qtbot) -> QtScrollSurface:
    surface = QtScrollSurface()
    qtbot.addWidget(surface)
    surface.resize(320, 600)
    surface.show()
    qtbot.waitExposed(surface)
    return surface


class TestQtScrollSurface:
    def test_renders_first_window(self, scroll_surface: QtScrollSurface, document_factory) -> None:
        renderer = ViewportRenderer(scroll_surface)

        renderer.set_data(ingest_records(document_factory(1000)))

        assert scroll_surface.spacer.height() == 60000
        assert scroll_surface.items[0].property("recordIndex") == 0
        assert scroll_surface.items[0].text() == "Customer 0 | V-0000 | 0 ¥"
        assert scroll_surface.block_offset == 0

    def test_scrollbar_drives_window(self, scroll_surface: QtScrollSurface, document_factory) -> None:
        renderer = ViewportRenderer(scroll_surface)
        renderer.set_data(ingest_records(document_factory(1000)))

        scroll_surface.set_scroll_top(1200)

        assert scroll_surface.scroll_top == 1200
        assert scroll_surface.items[0].property("recordIndex") == 15
        assert scroll_surface.block_offset == 900

    def test_destroy_detaches_listeners(self, scroll_surface: QtScrollSurface, document_factory) -> None:
        renderer = ViewportRenderer(scroll_surface)
        renderer.set_data(ingest_records(document_factory(100)))

        renderer.destroy()
        scroll_surface.set_scroll_top(600)

        assert scroll_surface.items == []


class TestStatusSink:
    def test_error_messages_are_styled(self, qtbot) -> None:
        label = QLabel()
        qtbot.addWidget(label)
        sink = StatusSink(label)

        sink.show("Search failed", is_error=True)
        assert label.text() == "Search failed"
        assert "color" in label.styleSheet()

        sink.show("3 vouchers found")
        assert label.styleSheet() == ""


class TestQtScheduler:
    def test_call_later_fires(self, qtbot) -> None:
        fired: list[bool] = []
        scheduler = QtScheduler()

        handle = scheduler.call_later(0.01, lambda: fired.append(True))

        qtbot.waitUntil(lambda: fired == [True], timeout=1000)
        assert not handle.active
        handle.cancel()

    def test_cancel_prevents_callback(self, qtbot) -> None:
        fired: list[bool] = []
        scheduler = QtScheduler()

        handle = scheduler.call_later(0.02, lambda: fired.append(True))
        handle.cancel()
        qtbot.wait(60)

        assert fired == []
        assert not handle.active


class TestRecordListView:
    @pytest.fixture
    def view(self, qtbot) -> RecordListView:
        view = RecordListView()
        qtbot.addWidget(view)
        view.show()
        return view

    def test_typing_forwards_to_controller(self, view: RecordListView) -> None:
        controller = Mock(spec=RecordListController)
        view.bind(controller)

        view.search_input.setText("V-1")

        controller.on_search_input.assert_called_with("V-1")

    def test_return_confirms_search(self, qtbot, view: RecordListView) -> None:
        controller = Mock(spec=RecordListController)
        view.bind(controller)
        view.search_input.setText("V-2")

        qtbot.keyClick(view.search_input, Qt.Key.Key_Return)

        controller.on_search_confirm.assert_called_once_with("V-2")

    def test_close_destroys_controller(self, view: RecordListView) -> None:
        controller = Mock(spec=RecordListController)
        view.bind(controller)

        view.close()

        controller.destroy.assert_called_once()

    def test_status_sink_targets_label(self, view: RecordListView) -> None:
        view.messages.show("Loading vouchers")

        assert view.status_label.text() == "Loading vouchers"
