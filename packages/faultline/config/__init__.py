"""Public API for faultline configuration."""

from .loader import default_settings, load_settings, load_startup_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    CollectorSettings,
    ErrorsSettings,
    FaultlineSettings,
    LoggingSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CollectorSettings",
    "ErrorsSettings",
    "FaultlineSettings",
    "LoggingSettings",
    "default_settings",
    "load_settings",
    "load_startup_settings",
]
