"""Top-level VoucherView settings."""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from voucherview.config.models.app_settings import AppSettings, LoggingSettings
from voucherview.config.models.cache_settings import CacheSettings
from voucherview.config.models.query_settings import QuerySettings
from voucherview.config.models.viewport_settings import ViewportSettings


class Settings(BaseSettings):
    """All configuration sections in one object.

    Values come from defaults and ``VOUCHERVIEW_`` environment variables
    (``VOUCHERVIEW_CACHE__TTL=60``). Sections given in a TOML file loaded
    through ``from_toml_file`` take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="VOUCHERVIEW_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    viewport: ViewportSettings = Field(default_factory=ViewportSettings)

    @classmethod
    def from_toml_file(cls, path: str | Path) -> Settings:
        """Settings from a TOML file, environment filling what the file omits.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            toml.TomlDecodeError: If the file is not valid TOML.
            pydantic.ValidationError: If a value is out of range.
        """
        source = Path(path)
        if not source.is_file():
            msg = f"Configuration file not found: {source}"
            raise FileNotFoundError(msg)
        return cls(**toml.loads(source.read_text(encoding="utf-8")))

    def to_toml_file(self, path: str | Path) -> None:
        """Write every non-empty setting to ``path`` as TOML."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(toml.dumps(self.model_dump(mode="json", exclude_none=True)), encoding="utf-8")
