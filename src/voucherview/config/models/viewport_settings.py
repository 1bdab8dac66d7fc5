"""Viewport renderer configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from voucherview.shared.constants import ViewportDefaults


class ViewportSettings(BaseModel):
    """Windowed rendering geometry."""

    item_height: float = Field(
        default=ViewportDefaults.ITEM_HEIGHT,
        gt=0,
        description="Fixed row height in pixels",
    )
    buffer_size: int = Field(
        default=ViewportDefaults.BUFFER_SIZE,
        ge=0,
        description="Rows rendered above and below the viewport",
    )


__all__ = ["ViewportSettings"]
