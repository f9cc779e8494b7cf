"""Tests for rotation / scale blocks and origin anchors."""

from __future__ import annotations

import math

import pytest

from pslib.ir.transform import (
    IDENTITY,
    LineOrigin,
    TransformOrigin,
    TransformSpec,
    box_anchor,
    line_anchor,
)


# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------


class TestAnchors:
    @pytest.mark.parametrize(
        "origin, expected",
        [
            (TransformOrigin.CENTER, (60.0, 45.0)),
            (TransformOrigin.TOP_LEFT, (10.0, 70.0)),
            (TransformOrigin.TOP_RIGHT, (110.0, 70.0)),
            (TransformOrigin.BOTTOM_LEFT, (10.0, 20.0)),
            (TransformOrigin.BOTTOM_RIGHT, (110.0, 20.0)),
        ],
    )
    def test_box_anchor(self, origin: TransformOrigin, expected: tuple) -> None:
        assert box_anchor(origin, 10, 20, 100, 50) == expected

    @pytest.mark.parametrize(
        "origin, expected",
        [
            (LineOrigin.LEFT, (100.0, 40.0)),
            (LineOrigin.CENTER, (150.0, 40.0)),
            (LineOrigin.RIGHT, (200.0, 40.0)),
        ],
    )
    def test_line_anchor(self, origin: LineOrigin, expected: tuple) -> None:
        assert line_anchor(origin, 100, 40, 100) == expected


# ---------------------------------------------------------------------------
# Rotation
# ---------------------------------------------------------------------------


class TestRotation:
    @pytest.mark.parametrize("angle, expected", [(720, 360.0), (-1000, -360.0), (45, 45.0)])
    def test_clamped(self, angle: float, expected: float) -> None:
        assert TransformSpec(rotation=angle).rotation == expected

    @pytest.mark.parametrize("angle", [0, 360, -360, 720])
    def test_full_turns_not_emitted(self, angle: float) -> None:
        spec = TransformSpec(rotation=angle)
        assert not spec.rotates
        assert spec.prologue((0, 0)) == ""
        assert spec.epilogue() == ""

    def test_angle_emitted_as_given(self) -> None:
        block = TransformSpec(rotation=-30).prologue((0, 0))
        assert "-30 rotate" in block

    def test_identity_inactive(self) -> None:
        assert not IDENTITY.active
        assert IDENTITY.prologue((5, 5)) == ""


# ---------------------------------------------------------------------------
# Block layout
# ---------------------------------------------------------------------------


class TestBlock:
    def test_order(self) -> None:
        spec = TransformSpec(rotation=45, scale=(1.5, 1))
        assert spec.prologue((205, 205)) == (
            "gsave\n"
            "205 205 translate\n"
            "45 rotate\n"
            "1.5 1 scale\n"
            "-205 -205 translate\n"
        )
        assert spec.epilogue() == "grestore\n"

    def test_unit_scale_still_emitted(self) -> None:
        spec = TransformSpec(scale=(1, 1))
        assert spec.active
        assert "1 1 scale" in spec.prologue((0, 0))

    def test_negative_scale_not_clamped(self) -> None:
        spec = TransformSpec(scale=(-1, 2))
        assert spec.scale == (-1.0, 2.0)
        assert "-1 2 scale" in spec.prologue((0, 0))

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_scale_factor_is_one(self, bad: float) -> None:
        spec = TransformSpec(scale=(bad, 2))
        assert spec.scale == (1.0, 2.0)
        assert "1 2 scale" in spec.prologue((0, 0))

    def test_non_finite_rotation_not_emitted(self) -> None:
        assert "nan" not in TransformSpec(rotation=math.nan, scale=(1, 1)).prologue((0, 0))

    def test_scale_without_rotation_has_no_rotate(self) -> None:
        block = TransformSpec(rotation=360, scale=(2, 2)).prologue((0, 0))
        assert "rotate" not in block
        assert "2 2 scale" in block

    def test_with_helpers_keep_other_field(self) -> None:
        spec = TransformSpec().with_rotation(10).with_scale(2, 3)
        assert spec == TransformSpec(rotation=10, scale=(2, 3))
