"""
Record List View

Search box, windowed record list and status line. The view only forwards
user input to the controller and displays the messages it reports.
"""

from __future__ import annotations

import logging

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QLabel, QLineEdit, QVBoxLayout, QWidget

from voucherview.app.controller import RecordListController

from .scroll_surface import QtScrollSurface

logger = logging.getLogger(__name__)

ERROR_STYLE = "color: #c0392b;"


class StatusSink:
    """MessageSink that writes to a status label."""

    def __init__(self, label: QLabel) -> None:
        self.label = label

    def show(self, message: str, is_error: bool = False) -> None:
        self.label.setText(message)
        self.label.setStyleSheet(ERROR_STYLE if is_error else "")
        if is_error:
            logger.warning("Status: %s", message)


class RecordListView(QWidget):
    """Voucher list window: search box, windowed list and status line."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("VoucherView")
        self.controller: RecordListController | None = None
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        self.search_input = QLineEdit(self)
        self.search_input.setPlaceholderText("Search by voucher number")
        self.search_input.setClearButtonEnabled(True)
        layout.addWidget(self.search_input)

        self.surface = QtScrollSurface(self)
        layout.addWidget(self.surface, stretch=1)

        self.status_label = QLabel(self)
        self.status_label.setObjectName("statusLabel")
        layout.addWidget(self.status_label)
        self.messages = StatusSink(self.status_label)

    def bind(self, controller: RecordListController) -> None:
        """Connect input signals to ``controller``."""
        self.controller = controller
        self.search_input.textChanged.connect(controller.on_search_input)
        self.search_input.returnPressed.connect(self._on_return_pressed)

    def _on_return_pressed(self) -> None:
        if self.controller is not None:
            self.controller.on_search_confirm(self.search_input.text())

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        if self.controller is not None:
            self.controller.destroy()
        super().closeEvent(event)
