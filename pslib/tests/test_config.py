"""Tests for settings loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from pslib.configs.loader import DEFAULT_CONFIG_PATH, RotateSettings, Settings, load_config
from pslib.errors import ConfigError, PSLibError


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "pslib.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def _base() -> dict:
    return {
        "creator": "poster-tool",
        "document": {"kind": "eps", "page_width": 500, "page_height": 300},
        "logging": {"level": "debug", "json": True},
    }


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_default(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, Settings)
        assert DEFAULT_CONFIG_PATH.exists()
        assert cfg.creator == "pslib"
        assert cfg.document.kind == "ps"
        assert (cfg.document.page_width, cfg.document.page_height) == (595, 842)
        assert cfg.logging.level == "INFO"
        assert cfg.logging.file is None

    def test_custom(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, _base()))
        assert cfg.creator == "poster-tool"
        assert cfg.document.kind == "eps"
        assert cfg.logging.level == "DEBUG"
        assert cfg.logging.json is True

    def test_logging_section_optional(self, tmp_path: Path) -> None:
        data = _base()
        del data["logging"]
        cfg = load_config(_write(tmp_path, data))
        assert cfg.logging.level == "INFO"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_bad_kind(self, tmp_path: Path) -> None:
        data = _base()
        data["document"]["kind"] = "pdf"
        with pytest.raises(ConfigError, match="document.kind"):
            load_config(_write(tmp_path, data))

    def test_missing_document(self, tmp_path: Path) -> None:
        data = _base()
        del data["document"]
        with pytest.raises(ConfigError, match="Missing required"):
            load_config(_write(tmp_path, data))

    def test_non_numeric_size(self, tmp_path: Path) -> None:
        data = _base()
        data["document"]["page_width"] = "wide"
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            load_config(_write(tmp_path, data))

    def test_zero_size(self, tmp_path: Path) -> None:
        data = _base()
        data["document"]["page_height"] = 0
        with pytest.raises(ConfigError, match="at least 1x1"):
            load_config(_write(tmp_path, data))

    def test_bad_level(self, tmp_path: Path) -> None:
        data = _base()
        data["logging"]["level"] = "chatty"
        with pytest.raises(ConfigError, match="logging.level"):
            load_config(_write(tmp_path, data))

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Empty"):
            load_config(path)

    def test_errors_share_base(self) -> None:
        assert issubclass(ConfigError, PSLibError)

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("document: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)

    def test_creator_outside_latin1(self, tmp_path: Path) -> None:
        data = _base()
        data["creator"] = "poster☃"
        with pytest.raises(ConfigError, match="latin-1"):
            load_config(_write(tmp_path, data))


# ---------------------------------------------------------------------------
# Log rotation
# ---------------------------------------------------------------------------


class TestRotate:
    def test_defaults_off(self) -> None:
        cfg = load_config()
        assert cfg.logging.console is True
        assert cfg.logging.rotate is None

    def test_size_rotation(self, tmp_path: Path) -> None:
        data = _base()
        data["logging"].update(
            file="logs/pslib.log", console=False,
            rotate={"mode": "size", "max_bytes": 2048, "backup_count": 2},
        )
        cfg = load_config(_write(tmp_path, data))
        assert cfg.logging.console is False
        assert isinstance(cfg.logging.rotate, RotateSettings)
        assert cfg.logging.rotate.max_bytes == 2048
        assert cfg.logging.rotate.backup_count == 2
        assert cfg.logging.rotate.mode == "size"

    def test_rotate_needs_file(self, tmp_path: Path) -> None:
        data = _base()
        data["logging"]["rotate"] = {"mode": "time"}
        with pytest.raises(ConfigError, match="requires logging.file"):
            load_config(_write(tmp_path, data))

    def test_bad_mode(self, tmp_path: Path) -> None:
        data = _base()
        data["logging"].update(file="x.log", rotate={"mode": "weekly"})
        with pytest.raises(ConfigError, match="logging.rotate.mode"):
            load_config(_write(tmp_path, data))

    def test_bad_bounds(self, tmp_path: Path) -> None:
        data = _base()
        data["logging"].update(file="x.log", rotate={"max_bytes": 0})
        with pytest.raises(ConfigError, match="max_bytes"):
            load_config(_write(tmp_path, data))
