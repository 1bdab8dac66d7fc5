"""Viewport renderer: windowed rendering of a large ordered list.

Only the rows intersecting the scroll viewport, plus a symmetric buffer, are
mounted on the rendering surface. A spacer sized to ``len(data) *
item_height`` keeps native scrollbar geometry correct, and the mounted block
is positioned with a single offset of ``start * item_height``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from voucherview.shared.constants import ViewportDefaults
from voucherview.shared.errors import ConfigurationError, ErrorCode, ErrorContext, create_config_error
from voucherview.shared.models.record import Record
from voucherview.shared.protocols import RenderingSurface, ResizeNotifier

from .window import VisibleRange, compute_visible_range

logger = logging.getLogger(__name__)

ItemRenderer = Callable[[Any, Any, int], None]


class RendererState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class ScrollPosition:
    scroll_top: float
    scroll_percentage: float


def describe_item(data: Any) -> str:
    """One-line text for a list item, with placeholders for missing fields."""
    if isinstance(data, Record):
        values = data.display_values()
        return " | ".join(
            [
                values["customer_name"],
                values["voucher_number"],
                values["amount"],
            ]
        )
    if isinstance(data, Mapping):
        return " | ".join(str(value) for value in data.values())
    return str(data)


class ViewportRenderer:
    """Render the visible slice of a list onto a scrollable surface.

    Args:
        surface: Scrollable container to render into.
        render_item: Called as ``render_item(item, data, index)`` to fill a
            freshly mounted item; defaults to plain text via the surface.
        item_height: Fixed row height in pixels.
        buffer_size: Rows rendered beyond each viewport edge.
        resize_notifier: Source of resize events; defaults to the surface
            when it provides resize listeners.

    Raises:
        ConfigurationError: If the surface is missing or the geometry invalid.
    """

    def __init__(
        self,
        surface: RenderingSurface | None,
        render_item: ItemRenderer | None = None,
        item_height: float = ViewportDefaults.ITEM_HEIGHT,
        buffer_size: int = ViewportDefaults.BUFFER_SIZE,
        resize_notifier: ResizeNotifier | None = None,
    ) -> None:
        if surface is None:
            raise create_config_error(
                "Rendering surface not found",
                config_key="surface",
                operation="viewport_init",
                code=ErrorCode.SURFACE_NOT_FOUND,
            )
        self._validate_item_height(item_height)
        if buffer_size < 0:
            raise create_config_error(
                f"buffer_size must be non-negative, got {buffer_size}",
                config_key="buffer_size",
                operation="viewport_init",
                code=ErrorCode.INVALID_VIEWPORT_GEOMETRY,
            )

        self.surface = surface
        self.render_item: ItemRenderer = render_item or self._render_text
        self.item_height = item_height
        self.buffer_size = buffer_size
        self.resize_notifier = resize_notifier
        if self.resize_notifier is None and hasattr(surface, "add_resize_listener"):
            self.resize_notifier = surface  # type: ignore[assignment]

        self.state = RendererState.UNINITIALIZED
        self._data: list[Any] = []
        self._rendered: dict[int, Any] = {}
        self.scroll_top = float(surface.scroll_top)
        self.container_height = float(surface.viewport_height)
        self.total_height = 0.0
        self.visible_range = VisibleRange.empty()

        # Keep the exact callables so destroy() can unregister them
        self._scroll_listener: Callable[[], None] = self.handle_scroll
        self._resize_listener: Callable[[], None] = self.handle_resize
        self.surface.add_scroll_listener(self._scroll_listener)
        if self.resize_notifier is not None:
            self.resize_notifier.add_resize_listener(self._resize_listener)

        logger.debug(
            "ViewportRenderer initialized (item_height=%s, buffer=%d)",
            item_height,
            buffer_size,
        )

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    @property
    def data(self) -> list[Any]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def set_data(self, data: Iterable[Any], render_item: ItemRenderer | None = None) -> None:
        """Replace the whole list and re-window."""
        self._ensure_alive("set_data")
        self._data = list(data)
        if render_item is not None:
            self.render_item = render_item
        self.state = RendererState.READY
        self.scroll_top = float(self.surface.scroll_top)
        self._resize_content()
        self._update_visible_items()

    def update_item(self, index: int, patch: Mapping[str, Any]) -> bool:
        """Merge ``patch`` into the item at ``index``.

        Only that item is re-rendered, and only when it is currently mounted.

        Returns:
            False when ``index`` is out of range.
        """
        self._ensure_alive("update_item")
        if not 0 <= index < len(self._data):
            return False

        current = self._data[index]
        if isinstance(current, Record):
            updated: Any = current.with_patch(patch)
        elif isinstance(current, Mapping):
            updated = {**current, **patch}
        else:
            msg = f"Cannot patch item of type {type(current).__name__}"
            raise TypeError(msg)
        self._data[index] = updated

        item = self._rendered.get(index)
        if item is not None:
            self.render_item(item, updated, index)
        return True

    def add_item(self, data: Any, index: int | None = None) -> None:
        """Insert at ``index`` (append when ``None`` or negative) and re-window."""
        self._ensure_alive("add_item")
        if index is None or index < 0 or index >= len(self._data):
            self._data.append(data)
        else:
            self._data.insert(index, data)
        self.state = RendererState.READY
        self._resize_content()
        self._update_visible_items()

    def remove_item(self, index: int) -> Any | None:
        """Remove the item at ``index`` and re-window; out-of-range is ignored."""
        self._ensure_alive("remove_item")
        if not 0 <= index < len(self._data):
            return None
        removed = self._data.pop(index)
        self._resize_content()
        self._update_visible_items()
        return removed

    def clear(self) -> None:
        self._ensure_alive("clear")
        self._data = []
        self._resize_content()
        self.surface.clear_items()
        self._rendered = {}
        self.visible_range = VisibleRange.empty()

    def visible_items(self) -> list[Any]:
        if self.visible_range.is_empty:
            return []
        return self._data[self.visible_range.start : self.visible_range.end + 1]

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def handle_scroll(self) -> None:
        """Scroll listener; re-renders once the offset moved more than half a row."""
        if self.state is RendererState.DESTROYED:
            return
        new_scroll_top = float(self.surface.scroll_top)
        threshold = self.item_height * ViewportDefaults.SCROLL_THRESHOLD_RATIO
        if abs(new_scroll_top - self.scroll_top) > threshold:
            self.scroll_top = new_scroll_top
            self._update_visible_items()

    def handle_resize(self) -> None:
        """Resize listener; the scroll offset is left untouched."""
        if self.state is RendererState.DESTROYED:
            return
        self.container_height = float(self.surface.viewport_height)
        self._update_visible_items()

    def set_item_height(self, item_height: float) -> None:
        self._ensure_alive("set_item_height")
        self._validate_item_height(item_height)
        self.item_height = item_height
        self._resize_content()
        self._update_visible_items()

    def scroll_to_index(self, index: int) -> None:
        """Jump so that ``index`` is the first row; the scroll handler re-windows."""
        if 0 <= index < len(self._data):
            self.surface.set_scroll_top(index * self.item_height)

    def scroll_to_top(self) -> None:
        self.surface.set_scroll_top(0)

    def scroll_to_bottom(self) -> None:
        self.surface.set_scroll_top(self.total_height)

    def scroll_position(self) -> ScrollPosition:
        percentage = (self.scroll_top / self.total_height) * 100 if self.total_height > 0 else 0.0
        return ScrollPosition(scroll_top=self.scroll_top, scroll_percentage=percentage)

    def destroy(self) -> None:
        """Unregister listeners and unmount everything. Safe to call twice."""
        if self.state is RendererState.DESTROYED:
            return
        self.surface.remove_scroll_listener(self._scroll_listener)
        if self.resize_notifier is not None:
            self.resize_notifier.remove_resize_listener(self._resize_listener)
        self.surface.clear_items()
        self.surface.set_content_height(0)
        self._rendered = {}
        self._data = []
        self.visible_range = VisibleRange.empty()
        self.state = RendererState.DESTROYED
        logger.debug("ViewportRenderer destroyed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resize_content(self) -> None:
        self.total_height = len(self._data) * self.item_height
        self.surface.set_content_height(self.total_height)

    def _update_visible_items(self) -> None:
        self.visible_range = compute_visible_range(
            self.scroll_top,
            self.container_height,
            self.item_height,
            len(self._data),
            self.buffer_size,
        )

        self.surface.clear_items()
        self._rendered = {}
        for index in self.visible_range.indices():
            item = self.surface.create_item(index, self.item_height)
            self.render_item(item, self._data[index], index)
            self._rendered[index] = item

        offset = 0.0 if self.visible_range.is_empty else self.visible_range.start * self.item_height
        self.surface.set_block_offset(offset)

    def _render_text(self, item: Any, data: Any, index: int) -> None:
        self.surface.set_item_text(item, describe_item(data))

    def _ensure_alive(self, operation: str) -> None:
        if self.state is RendererState.DESTROYED:
            raise ConfigurationError(
                ErrorCode.RENDERER_DESTROYED,
                "Renderer has been destroyed",
                ErrorContext(operation=operation),
            )

    @staticmethod
    def _validate_item_height(item_height: float) -> None:
        if item_height <= 0:
            raise create_config_error(
                f"item_height must be positive, got {item_height}",
                config_key="item_height",
                operation="viewport_geometry",
                code=ErrorCode.INVALID_VIEWPORT_GEOMETRY,
            )
