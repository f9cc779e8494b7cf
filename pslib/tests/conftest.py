"""Shared fixtures for the pslib test suite."""

from __future__ import annotations

import io
from datetime import datetime, timezone

import pytest

from pslib.procedures.registry import ProcedureRegistry


@pytest.fixture()
def builtin_procedures() -> dict[str, str]:
    """Builtin procedure bodies keyed by name, for the markup checker."""
    return {p.name: p.body for p in ProcedureRegistry.with_builtins().list()}


@pytest.fixture()
def fixed_date() -> datetime:
    return datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture()
def sink() -> io.StringIO:
    return io.StringIO()
