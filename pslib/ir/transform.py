"""Rotation / scale around an origin anchor.

The transform block wrapped around a shape always has the same order::

    gsave
    ox oy translate        % move the anchor to the origin
    angle rotate           % only when the rotation is effective
    sx sy scale            % only when a scale is configured
    -ox -oy translate      % move back
    ... shape path and paint ...
    grestore

The anchor ``(ox, oy)`` comes from the shape's own geometry (see
:func:`box_anchor` and :func:`line_anchor`), never from a fixed document
point.  When neither rotation nor scale applies, both :meth:`prologue`
and :meth:`epilogue` are empty, so an unmatched ``gsave`` can never be
emitted.

Rotation convention:
    The emitted angle is the configured angle, counter-clockwise positive
    as native PostScript ``rotate``.  No shape negates it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from pslib.ir.numbers import clamp, fmt

MAX_ROTATION_DEG = 360.0

# ---------------------------------------------------------------------------
# Origin anchors
# ---------------------------------------------------------------------------


class TransformOrigin(Enum):
    """Anchor for box-shaped geometry (rectangles, images)."""

    CENTER = "center"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


class LineOrigin(Enum):
    """Anchor for horizontal lines, measured along the line's own axis."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def box_anchor(
    origin: TransformOrigin, x: float, y: float, width: float, height: float,
) -> tuple[float, float]:
    """Pivot point of a box for *origin* (PostScript y-up coordinates)."""
    if origin is TransformOrigin.TOP_LEFT:
        return x, y + height
    if origin is TransformOrigin.TOP_RIGHT:
        return x + width, y + height
    if origin is TransformOrigin.BOTTOM_LEFT:
        return x, y
    if origin is TransformOrigin.BOTTOM_RIGHT:
        return x + width, y
    if origin is TransformOrigin.CENTER:
        return x + width / 2.0, y + height / 2.0
    raise ValueError(f"Unknown box origin: {origin!r}")


def line_anchor(
    origin: LineOrigin, x: float, y: float, length: float,
) -> tuple[float, float]:
    """Pivot point of a horizontal line for *origin*."""
    if origin is LineOrigin.LEFT:
        return x, y
    if origin is LineOrigin.CENTER:
        return x + length / 2.0, y
    if origin is LineOrigin.RIGHT:
        return x + length, y
    raise ValueError(f"Unknown line origin: {origin!r}")


# ---------------------------------------------------------------------------
# Transform state
# ---------------------------------------------------------------------------


def _finite_factor(value: float) -> float:
    value = float(value)
    return value if math.isfinite(value) else 1.0


@dataclass(frozen=True, slots=True)
class TransformSpec:
    """Optional rotation and optional non-uniform scale.

    Parameters
    ----------
    rotation : float | None
        Angle in degrees, clamped to ``[-360, 360]``.  ``None`` means no
        rotation configured.
    scale : tuple[float, float] | None
        ``(sx, sy)`` factors.  Not clamped -- negative values mirror.
        A non-finite factor is replaced by ``1``.
        ``None`` means no scale configured, which is distinct from
        ``(1, 1)``.
    """

    rotation: float | None = None
    scale: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        if self.rotation is not None:
            object.__setattr__(
                self,
                "rotation",
                clamp(self.rotation, -MAX_ROTATION_DEG, MAX_ROTATION_DEG),
            )
        if self.scale is not None:
            sx, sy = self.scale
            object.__setattr__(self, "scale", (_finite_factor(sx), _finite_factor(sy)))

    @property
    def rotates(self) -> bool:
        """True when a ``rotate`` directive will be emitted."""
        return self.rotation is not None and abs(self.rotation) not in (
            0.0,
            MAX_ROTATION_DEG,
        )

    @property
    def scales(self) -> bool:
        return self.scale is not None

    @property
    def active(self) -> bool:
        """True when the transform block is emitted at all."""
        return self.rotates or self.scales

    def with_rotation(self, angle: float) -> TransformSpec:
        return TransformSpec(rotation=angle, scale=self.scale)

    def with_scale(self, sx: float, sy: float) -> TransformSpec:
        return TransformSpec(rotation=self.rotation, scale=(sx, sy))

    def prologue(self, anchor: tuple[float, float]) -> str:
        """Save state and move the coordinate system around *anchor*."""
        if not self.active:
            return ""
        ox, oy = anchor
        lines = ["gsave", f"{fmt(ox)} {fmt(oy)} translate"]
        if self.rotates:
            lines.append(f"{fmt(self.rotation)} rotate")
        if self.scales:
            sx, sy = self.scale
            lines.append(f"{fmt(sx)} {fmt(sy)} scale")
        lines.append(f"{fmt(-ox)} {fmt(-oy)} translate")
        return "\n".join(lines) + "\n"

    def epilogue(self) -> str:
        """Restore matching :meth:`prologue`."""
        return "grestore\n" if self.active else ""


IDENTITY = TransformSpec()
