"""Windowed rendering of the active list."""

from .renderer import ItemRenderer, RendererState, ScrollPosition, ViewportRenderer, describe_item
from .window import VisibleRange, compute_visible_range, total_height

__all__ = [
    "ItemRenderer",
    "RendererState",
    "ScrollPosition",
    "ViewportRenderer",
    "VisibleRange",
    "compute_visible_range",
    "describe_item",
    "total_height",
]
