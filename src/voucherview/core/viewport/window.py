"""Windowing math for fixed-height rows."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive index range ``[start, end]``; ``end < start`` means empty."""

    start: int = 0
    end: int = -1

    @classmethod
    def empty(cls) -> VisibleRange:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def __len__(self) -> int:
        return 0 if self.is_empty else self.end - self.start + 1

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index <= self.end

    def indices(self) -> range:
        return range(self.start, self.end + 1)


def compute_visible_range(
    scroll_top: float,
    container_height: float,
    item_height: float,
    item_count: int,
    buffer: int,
) -> VisibleRange:
    """Indices whose rows intersect the viewport, widened by ``buffer`` rows.

    Args:
        scroll_top: Scroll offset in pixels; negative values count as 0.
        container_height: Visible height in pixels.
        item_height: Row height in pixels, must be positive.
        item_count: Length of the list.
        buffer: Extra rows on each side.

    Returns:
        A range within ``[0, item_count - 1]``, empty for an empty list.
    """
    if item_height <= 0:
        msg = f"item_height must be positive, got {item_height}"
        raise ValueError(msg)
    if item_count <= 0:
        return VisibleRange.empty()

    scroll_top = max(0.0, scroll_top)
    container_height = max(0.0, container_height)
    last = item_count - 1

    end = min(last, math.ceil((scroll_top + container_height) / item_height) + buffer)
    start = max(0, math.floor(scroll_top / item_height) - buffer)
    # Scrolled past the end after the list shrank
    start = min(start, end)
    return VisibleRange(start, end)


def total_height(item_count: int, item_height: float) -> float:
    return item_count * item_height
