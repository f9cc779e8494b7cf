"""Settings loader for pslib.

Loads and validates ``pslib.yaml`` into typed, frozen dataclasses.  The
settings seed document defaults (creator banner, output kind, default
page size / EPS bounding box) and the logging setup of the command-line
tools.  The library itself never reads settings implicitly: callers pass
them to :meth:`DocumentConfig.from_settings
<pslib.document.document.DocumentConfig.from_settings>`.

Usage::

    from pslib.configs.loader import load_config
    cfg = load_config()                      # default path
    cfg = load_config("/custom/pslib.yaml")  # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pslib.errors import ConfigError
from pslib.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "pslib.yaml"

_KINDS = ("ps", "eps")
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_ROTATE_MODES = ("size", "time")


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DocumentSettings:
    """Document defaults.  Sizes in points."""

    kind: str
    page_width: int
    page_height: int


@dataclass(frozen=True)
class RotateSettings:
    """Log file rotation.  ``mode`` is ``"size"`` or ``"time"``."""

    mode: str = "size"
    max_bytes: int = 10_000_000
    backup_count: int = 5
    when: str = "D"
    interval: int = 1


@dataclass(frozen=True)
class LoggingSettings:
    """Arguments forwarded to :func:`pslib.utils.logging_config.setup_logging`."""

    level: str = "INFO"
    json: bool = False
    color: bool = True
    console: bool = True
    file: str | None = None
    rotate: RotateSettings | None = None


@dataclass(frozen=True)
class Settings:
    """Top-level settings object."""

    creator: str
    document: DocumentSettings
    logging: LoggingSettings


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _parse_document(data: dict[str, Any]) -> DocumentSettings:
    return DocumentSettings(
        kind=str(data.get("kind", "ps")).lower(),
        page_width=int(data["page_width"]),
        page_height=int(data["page_height"]),
    )


def _parse_rotate(data: dict[str, Any] | None) -> RotateSettings | None:
    if not data:
        return None
    defaults = RotateSettings()
    return RotateSettings(
        mode=str(data.get("mode", defaults.mode)).lower(),
        max_bytes=int(data.get("max_bytes", defaults.max_bytes)),
        backup_count=int(data.get("backup_count", defaults.backup_count)),
        when=str(data.get("when", defaults.when)),
        interval=int(data.get("interval", defaults.interval)),
    )


def _parse_logging(data: dict[str, Any] | None) -> LoggingSettings:
    if not data:
        return LoggingSettings()
    log_file = data.get("file")
    return LoggingSettings(
        level=str(data.get("level", "INFO")).upper(),
        json=bool(data.get("json", False)),
        color=bool(data.get("color", True)),
        console=bool(data.get("console", True)),
        file=str(log_file) if log_file else None,
        rotate=_parse_rotate(data.get("rotate")),
    )


def _validate_config(cfg: Settings) -> None:
    """Validate field ranges.

    Raises
    ------
    ConfigError
        On any invalid value.
    """
    if not cfg.creator.strip():
        raise ConfigError("creator must be a non-empty string")
    if any(ch in cfg.creator for ch in "\r\n"):
        raise ConfigError("creator must fit on one line")
    try:
        cfg.creator.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise ConfigError(
            f"creator must only use latin-1 characters, got {cfg.creator!r}"
        ) from exc

    doc = cfg.document
    if doc.kind not in _KINDS:
        raise ConfigError(
            f"document.kind must be one of {list(_KINDS)}, got '{doc.kind}'"
        )
    if doc.page_width < 1 or doc.page_height < 1:
        raise ConfigError(
            f"Page size must be at least 1x1 pt, "
            f"got {doc.page_width}x{doc.page_height}"
        )

    log = cfg.logging
    if log.level not in _LEVELS:
        raise ConfigError(
            f"logging.level must be one of {list(_LEVELS)}, "
            f"got '{log.level}'"
        )
    if log.rotate is not None:
        if log.file is None:
            raise ConfigError("logging.rotate requires logging.file")
        if log.rotate.mode not in _ROTATE_MODES:
            raise ConfigError(
                f"logging.rotate.mode must be one of {list(_ROTATE_MODES)}, "
                f"got '{log.rotate.mode}'"
            )
        if log.rotate.max_bytes < 1 or log.rotate.backup_count < 0 or log.rotate.interval < 1:
            raise ConfigError(
                "logging.rotate needs max_bytes >= 1, backup_count >= 0, interval >= 1"
            )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> Settings:
    """Load and validate settings from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to a settings file.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    Settings
        Fully validated, frozen settings object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(str(exc)) from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    try:
        settings = Settings(
            creator=str(data.get("creator", "pslib")),
            document=_parse_document(data["document"]),
            logging=_parse_logging(data.get("logging")),
        )
    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc

    _validate_config(settings)
    return settings
