"""
QScrollArea-backed rendering surface.

A fixed-height spacer widget gives the scroll area its full content height.
Mounted rows live in a block widget inside the spacer, moved to the window
offset as a whole.
"""

from __future__ import annotations

import logging
from typing import Any

from PySide6.QtGui import QResizeEvent
from PySide6.QtWidgets import QLabel, QScrollArea, QWidget

from voucherview.shared.protocols import Listener

logger = logging.getLogger(__name__)


class QtScrollSurface(QScrollArea):
    """Rendering surface and resize notifier for the viewport renderer."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("recordListSurface")
        self.setWidgetResizable(False)

        self.spacer = QWidget()
        self.spacer.setObjectName("recordListSpacer")
        self.block = QWidget(self.spacer)
        self.block.setObjectName("recordListBlock")
        self.setWidget(self.spacer)

        self._items: list[QLabel] = []
        self._scroll_listeners: list[Listener] = []
        self._resize_listeners: list[Listener] = []
        self._content_height = 0

        self.verticalScrollBar().valueChanged.connect(self._on_scroll)

    # Geometry ---------------------------------------------------------

    @property
    def scroll_top(self) -> float:
        return float(self.verticalScrollBar().value())

    def set_scroll_top(self, value: float) -> None:
        self.verticalScrollBar().setValue(int(value))

    @property
    def viewport_height(self) -> float:
        return float(self.viewport().height())

    def set_content_height(self, height: float) -> None:
        self._content_height = int(height)
        self.spacer.resize(self.viewport().width(), self._content_height)

    def set_block_offset(self, offset: float) -> None:
        self.block.move(0, int(offset))

    @property
    def block_offset(self) -> int:
        return self.block.y()

    # Items ------------------------------------------------------------

    def create_item(self, index: int, height: float) -> QLabel:
        item = QLabel(self.block)
        item.setObjectName("recordListItem")
        item.setProperty("recordIndex", index)
        width = self.viewport().width()
        item.setGeometry(0, len(self._items) * int(height), width, int(height))
        item.show()
        self._items.append(item)
        self.block.resize(width, len(self._items) * int(height))
        return item

    def set_item_text(self, item: Any, text: str) -> None:
        item.setText(text)

    def clear_items(self) -> None:
        for item in self._items:
            item.hide()
            item.deleteLater()
        self._items = []
        self.block.resize(self.viewport().width(), 0)

    @property
    def items(self) -> list[QLabel]:
        return list(self._items)

    # Listeners --------------------------------------------------------

    def add_scroll_listener(self, listener: Listener) -> None:
        self._scroll_listeners.append(listener)

    def remove_scroll_listener(self, listener: Listener) -> None:
        if listener in self._scroll_listeners:
            self._scroll_listeners.remove(listener)

    def add_resize_listener(self, listener: Listener) -> None:
        self._resize_listeners.append(listener)

    def remove_resize_listener(self, listener: Listener) -> None:
        if listener in self._resize_listeners:
            self._resize_listeners.remove(listener)

    def _on_scroll(self, _value: int) -> None:
        for listener in list(self._scroll_listeners):
            listener()

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        width = self.viewport().width()
        self.spacer.resize(width, self._content_height)
        for item in self._items:
            item.resize(width, item.height())
        self.block.resize(width, self.block.height())
        for listener in list(self._resize_listeners):
            listener()
