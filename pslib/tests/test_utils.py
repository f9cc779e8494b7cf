"""Tests for filesystem helpers and logging configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pslib.utils import fs
from pslib.utils.logging_config import (
    ContextFormatter,
    get_context,
    pop_context,
    push_context,
    setup_logging,
)


# ---------------------------------------------------------------------------
# fs
# ---------------------------------------------------------------------------


class TestFs:
    def test_atomic_write_text(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "out.ps"
        fs.atomic_write_text(target, "%!PS\n\xe9\n", encoding="latin-1")
        assert target.read_bytes() == b"%!PS\n\xe9\n"
        assert [p.name for p in target.parent.iterdir()] == ["out.ps"]

    def test_atomic_write_overwrites(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        fs.atomic_write_text(target, "one")
        fs.atomic_write_text(target, "two")
        assert target.read_text() == "two"

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "a.yaml"
        path.write_text("a: 1\nb: [x, y]\n", encoding="utf-8")
        assert fs.load_yaml(path) == {"a": 1, "b": ["x", "y"]}

    def test_load_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            fs.load_yaml(tmp_path / "absent.yaml")

    def test_ensure_dir(self, tmp_path: Path) -> None:
        path = fs.ensure_dir(tmp_path / "a" / "b")
        assert path.is_dir()


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture()
def clean_context():
    pop_context()
    yield
    pop_context()


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord("pslib.test", logging.INFO, __file__, 1, msg, None, None)


class TestLogging:
    def test_context_push_pop(self, clean_context) -> None:
        push_context(app="pslib-render", scene="a.yaml")
        assert get_context() == {"app": "pslib-render", "scene": "a.yaml"}
        pop_context(["scene"])
        assert get_context() == {"app": "pslib-render"}

    def test_json_format(self, clean_context) -> None:
        push_context(app="pslib-render")
        line = ContextFormatter("json").format(_record("hello"))
        data = json.loads(line)
        assert data["msg"] == "hello"
        assert data["lvl"] == "INFO"
        assert data["app"] == "pslib-render"

    def test_human_format(self, clean_context) -> None:
        push_context(page=2)
        line = ContextFormatter("human", use_color=False).format(_record("wrote"))
        assert "| INFO     |" in line
        assert "page=2" in line
        assert line.endswith("wrote")

    def test_file_handler(self, tmp_path: Path, clean_context) -> None:
        root = logging.getLogger()
        before, level = list(root.handlers), root.level
        log_file = tmp_path / "logs" / "pslib.log"
        try:
            result = setup_logging(
                "DEBUG", str(log_file), json=True, console=False,
                rotate={"mode": "size", "max_bytes": 1000, "backup_count": 1},
            )
            logging.getLogger("pslib.test").info("to file")
            for handler in result["handlers"]:
                handler.flush()
        finally:
            for handler in list(root.handlers):
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
            root.setLevel(level)
        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["msg"] == "to file"

    def test_bad_rotation_mode(self, tmp_path: Path) -> None:
        root = logging.getLogger()
        before, level = list(root.handlers), root.level
        try:
            with pytest.raises(ValueError, match="Unknown rotation mode"):
                setup_logging(
                    "INFO", str(tmp_path / "x.log"), console=False,
                    rotate={"mode": "weekly"},
                )
        finally:
            for handler in list(root.handlers):
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)
