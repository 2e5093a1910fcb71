"""Settings loading with deterministic precedence.

The cascade is always:
1) CLI/init params
2) Environment variables
3) ~/.config/faultline/faultline.yaml
4) Model defaults

Environment variable format:
- Prefix: ``FAULTLINE_``
- Nested keys: ``__`` separator
- Example: ``FAULTLINE_ERRORS__CAPTURE_LOCATION=false`` ->
  ``errors.capture_location = False``
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar, Mapping

import yaml
from pydantic import ValidationError
from pydantic_settings import SettingsError

from .models import (
    DEFAULT_CONFIG_PATH,
    CollectorSettings,
    ErrorsSettings,
    FaultlineSettings,
    LoggingSettings,
)

logger = logging.getLogger(__name__)


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> FaultlineSettings:
    """Resolve settings from init params, environment, and the YAML file.

    A missing YAML file is not an error; its layer simply contributes nothing.
    Invalid values raise ``pydantic.ValidationError``.
    """
    resolved = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    class _Settings(FaultlineSettings):
        _config_path: ClassVar[Path] = resolved

    return _Settings(**dict(cli_params or {}))


@lru_cache(maxsize=1)
def load_startup_settings() -> FaultlineSettings:
    """Return process settings, resolved once on first use.

    Error construction and rendering read their defaults from here, so they
    must never fail: invalid environment or YAML values are reported once as a
    warning and model defaults are used instead. Changes to the environment
    after the first call have no effect; ``load_startup_settings.cache_clear()``
    forces a re-read.
    """
    try:
        return load_settings()
    except (ValidationError, SettingsError, yaml.YAMLError) as exc:
        logger.warning(
            "Invalid faultline settings; falling back to defaults",
            extra={"settings_error": str(exc)},
        )
        return default_settings()


def default_settings() -> FaultlineSettings:
    """Return model defaults without consulting the environment or YAML file."""
    return FaultlineSettings.model_construct(
        logging=LoggingSettings(),
        errors=ErrorsSettings(),
        collector=CollectorSettings(),
    )
