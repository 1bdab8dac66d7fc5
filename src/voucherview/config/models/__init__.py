"""Configuration models package."""

from .app_settings import AppSettings, LoggingSettings
from .cache_settings import CacheSettings
from .query_settings import QuerySettings
from .settings import Settings
from .viewport_settings import ViewportSettings

__all__ = [
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "QuerySettings",
    "Settings",
    "ViewportSettings",
]
