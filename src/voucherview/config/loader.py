"""Settings loader.

Builds a Settings instance from an optional TOML file plus the environment.
There is no process-wide settings singleton: callers load once and pass the
result to the components they construct.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import ValidationError

from voucherview.config.models.settings import Settings
from voucherview.shared.errors import ErrorCode, create_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "voucherview.toml"


def load_settings(config_file: str | Path | None = None) -> Settings:
    """Load settings from ``config_file`` (if given) and the environment.

    Args:
        config_file: TOML file path; ``None`` uses defaults and environment only.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid.
    """
    if config_file is None:
        try:
            return Settings()
        except ValidationError as e:
            raise create_config_error(
                f"Invalid environment configuration: {e.error_count()} error(s)",
                operation="load_settings",
                code=ErrorCode.CONFIG_ERROR,
                original_error=e,
            ) from e

    path = Path(config_file)
    try:
        settings = Settings.from_toml_file(path)
    except FileNotFoundError as e:
        raise create_config_error(
            f"Configuration file not found: {path}",
            config_key=str(path),
            operation="load_settings",
            original_error=e,
        ) from e
    except toml.TomlDecodeError as e:
        raise create_config_error(
            f"Configuration file is not valid TOML: {path}",
            config_key=str(path),
            operation="load_settings",
            original_error=e,
        ) from e
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration in {path}: {e.error_count()} error(s)",
            config_key=str(path),
            operation="load_settings",
            original_error=e,
        ) from e

    logger.debug("Loaded settings from %s", path)
    return settings
