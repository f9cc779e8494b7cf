"""Tests for color spaces and numeric formatting.

Validates channel clamping, paint procedure names, and the number
formatter every emitter relies on.
"""

from __future__ import annotations

import dataclasses
import math

import pytest

from pslib.ir.color import BLACK, Cmyk, ColorMode, Rgb
from pslib.ir.numbers import at_least, clamp, fmt


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------


class TestFmt:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (100.0, "100"),
            (0.5, "0.5"),
            (-0.0, "0"),
            (1 / 3, "0.3333"),
            (-2.25, "-2.25"),
            (0.00001, "0"),
            (-0.00001, "0"),
            (42, "42"),
        ],
    )
    def test_format(self, value: float, expected: str) -> None:
        assert fmt(value) == expected

    def test_clamp_nan_maps_to_low(self) -> None:
        assert clamp(math.nan, 0.0, 1.0) == 0.0

    def test_at_least(self) -> None:
        assert at_least(-5, 0.0) == 0.0
        assert at_least(7, 0.0) == 7.0

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite(self, value: float) -> None:
        assert fmt(value) == "0"
        assert at_least(value, 0.0) == 0.0


# ---------------------------------------------------------------------------
# Clamping
# ---------------------------------------------------------------------------


class TestClamping:
    def test_rgb_channels_clamped(self) -> None:
        color = Rgb(1.5, -0.2, 0.4)
        assert color.channels == (1.0, 0.0, 0.4)

    def test_cmyk_channels_clamped(self) -> None:
        color = Cmyk(2.0, 0.5, -1.0, 1.0)
        assert color.channels == (1.0, 0.5, 0.0, 1.0)

    def test_nan_channel_clamped_to_zero(self) -> None:
        assert Rgb(math.nan, 1, 1).r == 0.0

    @pytest.mark.parametrize("value", [-10.0, -0.001, 0.0, 0.3, 1.0, 1.001, 99.0])
    def test_channels_always_in_unit_range(self, value: float) -> None:
        for color in (Rgb(value, value, value), Cmyk(value, value, value, value)):
            assert all(0.0 <= ch <= 1.0 for ch in color.channels)

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Rgb(0, 0, 0).r = 1.0  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Emission
# ---------------------------------------------------------------------------


class TestEmit:
    def test_rgb_fill(self) -> None:
        assert Rgb(1, 0, 0).emit("fill") == ("fillrgb", "1 0 0")

    def test_cmyk_stroke(self) -> None:
        assert Cmyk(0.5, 1, 0.5, 0).emit("stroke") == ("strokecmyk", "0.5 1 0.5 0")

    def test_setters(self) -> None:
        assert Rgb().setter() == "setrgbcolor"
        assert Cmyk().setter() == "setcmykcolor"

    def test_unknown_paint_rejected(self) -> None:
        with pytest.raises(ValueError, match="fill' or 'stroke"):
            Rgb().emit("clip")  # type: ignore[arg-type]

    def test_black_is_rgb(self) -> None:
        assert isinstance(BLACK, ColorMode)
        assert BLACK.space == "rgb"
        assert BLACK.operands() == "0 0 0"

    def test_abstract_base(self) -> None:
        with pytest.raises(TypeError):
            ColorMode()  # type: ignore[abstract]
