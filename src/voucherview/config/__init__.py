"""VoucherView configuration package."""

from .loader import DEFAULT_CONFIG_FILE, load_settings
from .models import (
    AppSettings,
    CacheSettings,
    LoggingSettings,
    QuerySettings,
    Settings,
    ViewportSettings,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "QuerySettings",
    "Settings",
    "ViewportSettings",
    "load_settings",
]
