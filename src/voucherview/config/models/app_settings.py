"""Application and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from voucherview.shared.constants import CLIDefaults


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = Field(default=CLIDefaults.APP_NAME, description="Application name")
    version: str = Field(default=CLIDefaults.VERSION, description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")


class LoggingSettings(BaseModel):
    """Logging configuration.

    Controls level, optional JSON log file and whether the console uses
    the rich handler.
    """

    level: str = Field(default="INFO", description="Logging level")
    file: str | None = Field(default=None, description="JSON log file path")
    rich_console: bool = Field(default=True, description="Use rich console output")


__all__ = [
    "AppSettings",
    "LoggingSettings",
]
