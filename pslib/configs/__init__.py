"""Settings loading and validation."""

from pslib.configs.loader import (
    DEFAULT_CONFIG_PATH,
    DocumentSettings,
    LoggingSettings,
    RotateSettings,
    Settings,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DocumentSettings",
    "LoggingSettings",
    "RotateSettings",
    "Settings",
    "load_config",
]
