"""Shapes -- the drawable vocabulary placed on pages.

Every shape is an immutable, slotted dataclass.  Configuration is
chained: each mutator returns a clamped copy, and the attributes are the
getters::

    rect = (
        Rect(155, 155, 100, 100)
        .fill(Rgb(1, 0, 0))
        .stroke(2, Rgb(0, 0, 0))
        .rotate(45)
        .scale(1.5, 1)
    )
    rect.transform.rotation   # 45.0

Geometry is clamped to ``>= 0`` and colors to ``[0, 1]`` on construction;
nothing here raises on numeric input.

Serialization order
-------------------
1. transform prologue (only if rotation / scale apply)
2. path operator (``rect`` / ``line``)
3. fill procedure (``Rect`` only)
4. stroke procedure (only if ``stroke_width > 0``)
5. transform epilogue
"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from pslib.ir.color import BLACK, ColorMode
from pslib.ir.numbers import at_least, fmt
from pslib.ir.transform import (
    IDENTITY,
    LineOrigin,
    TransformOrigin,
    TransformSpec,
    box_anchor,
    line_anchor,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Shape(ABC):
    """Base class for everything a Page accepts."""

    @abstractmethod
    def serialize(self) -> str:
        """Return the shape's markup, terminated by a newline."""

    def procedure_refs(self) -> tuple[str, ...]:
        """Document-level procedures the markup invokes besides the builtins."""
        return ()

    def rotate(self, angle: float):
        """Copy rotated by *angle* degrees (clamped to ``[-360, 360]``)."""
        return dataclasses.replace(
            self, transform=self.transform.with_rotation(angle),
        )

    def scale(self, sx: float, sy: float):
        """Copy scaled by ``(sx, sy)`` around the origin anchor."""
        return dataclasses.replace(
            self, transform=self.transform.with_scale(sx, sy),
        )

    def _stroke_markup(self, width: float, color: ColorMode) -> str:
        if width <= 0:
            return ""
        name, operands = color.emit("stroke")
        return f"{fmt(width)} {operands} {name}\n"


# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Rect(Shape):
    """Axis-aligned rectangle with optional fill and stroke.

    Parameters
    ----------
    x, y : float
        Bottom-left corner in points.
    width, height : float
        Size in points.
    fill_color : ColorMode | None
        ``None`` means the rectangle is not filled.
    stroke_width : float
        Line width in points; ``0`` means no stroke.
    stroke_color : ColorMode
        Stroke paint.
    transform : TransformSpec
        Rotation / scale configuration.
    origin : TransformOrigin
        Pivot used by the transform.
    """

    x: float
    y: float
    width: float
    height: float
    fill_color: ColorMode | None = None
    stroke_width: float = 0.0
    stroke_color: ColorMode = BLACK
    transform: TransformSpec = IDENTITY
    origin: TransformOrigin = TransformOrigin.CENTER

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height", "stroke_width"):
            object.__setattr__(self, name, at_least(getattr(self, name), 0.0))

    def fill(self, color: ColorMode) -> Rect:
        return dataclasses.replace(self, fill_color=color)

    def stroke(self, width: float, color: ColorMode) -> Rect:
        return dataclasses.replace(self, stroke_width=width, stroke_color=color)

    def set_origin(self, origin: TransformOrigin) -> Rect:
        return dataclasses.replace(self, origin=origin)

    @property
    def anchor(self) -> tuple[float, float]:
        return box_anchor(self.origin, self.x, self.y, self.width, self.height)

    def path(self) -> str:
        w, h = fmt(self.width), fmt(self.height)
        nw, nh = fmt(-self.width), fmt(-self.height)
        return f"{nw} 0 0 {nh} {w} 0 0 {h} {fmt(self.x)} {fmt(self.y)} rect\n"

    def serialize(self) -> str:
        parts = [self.transform.prologue(self.anchor), self.path()]
        if self.fill_color is not None:
            name, operands = self.fill_color.emit("fill")
            parts.append(f"{operands} {name}\n")
        parts.append(self._stroke_markup(self.stroke_width, self.stroke_color))
        parts.append(self.transform.epilogue())
        return "".join(parts)


# ---------------------------------------------------------------------------
# Line
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Line(Shape):
    """Horizontal line starting at ``(x, y)``; rotate it for other angles.

    Lines have no fill.  They stroke 1 pt black unless configured.
    """

    x: float
    y: float
    length: float
    stroke_width: float = 1.0
    stroke_color: ColorMode = BLACK
    transform: TransformSpec = IDENTITY
    origin: LineOrigin = LineOrigin.CENTER

    def __post_init__(self) -> None:
        for name in ("x", "y", "length", "stroke_width"):
            object.__setattr__(self, name, at_least(getattr(self, name), 0.0))

    def stroke(self, width: float, color: ColorMode) -> Line:
        return dataclasses.replace(self, stroke_width=width, stroke_color=color)

    def set_origin(self, origin: LineOrigin) -> Line:
        return dataclasses.replace(self, origin=origin)

    @property
    def anchor(self) -> tuple[float, float]:
        return line_anchor(self.origin, self.x, self.y, self.length)

    def path(self) -> str:
        return f"{fmt(self.length)} 0 {fmt(self.x)} {fmt(self.y)} line\n"

    def serialize(self) -> str:
        return "".join(
            [
                self.transform.prologue(self.anchor),
                self.path(),
                self._stroke_markup(self.stroke_width, self.stroke_color),
                self.transform.epilogue(),
            ]
        )


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------


class ImageFit(Enum):
    """How an image's native size maps into its target box."""

    CONTAIN = "contain"
    STRETCH = "stretch"
    STRETCH_HORIZONTAL = "stretch_horizontal"
    STRETCH_VERTICAL = "stretch_vertical"
    CROP = "crop"


class ImageResolver(Protocol):
    """What :meth:`Image.place` needs from an image registry."""

    def procedure_id(self, file_name: str) -> str | None: ...

    def native_size(self, file_name: str) -> tuple[int, int] | None: ...


def fit_box(
    fit: ImageFit,
    box: tuple[float, float, float, float],
    native: tuple[float, float],
) -> tuple[float, float, float, float]:
    """Placed ``(x, y, width, height)`` of an image inside *box*.

    Parameters
    ----------
    fit : ImageFit
        Placement policy.
    box : tuple
        Target ``(x, y, width, height)``.
    native : tuple
        Source pixel size ``(sw, sh)``.
    """
    bx, by, bw, bh = box
    sw, sh = native
    if sw <= 0 or sh <= 0:
        return bx, by, 0.0, 0.0

    if fit is ImageFit.STRETCH:
        w, h = bw, bh
    elif fit is ImageFit.STRETCH_HORIZONTAL:
        w, h = bw, sh * bw / sw
    elif fit is ImageFit.STRETCH_VERTICAL:
        w, h = sw * bh / sh, bh
    elif fit is ImageFit.CONTAIN:
        s = min(bw / sw, bh / sh)
        w, h = sw * s, sh * s
    elif fit is ImageFit.CROP:
        s = max(bw / sw, bh / sh)
        w, h = sw * s, sh * s
    else:
        raise ValueError(f"Unknown image fit: {fit!r}")

    return bx + (bw - w) / 2.0, by + (bh - h) / 2.0, w, h


_CLIPPED_FITS = (ImageFit.CROP, ImageFit.STRETCH_HORIZONTAL, ImageFit.STRETCH_VERTICAL)


def _comment_text(text: str) -> str:
    """*text* folded onto one latin-1 comment line."""
    text = text.replace("\r", " ").replace("\n", " ")
    return text.encode("latin-1", "replace").decode("latin-1")


@dataclass(frozen=True, slots=True)
class Image(Shape):
    """Raster image drawn from a procedure registered in the document.

    Use :meth:`place` to build one from an image registry; the registry
    assigns the procedure identifier and knows the native pixel size.

    Parameters
    ----------
    x, y, width, height : float
        Target box in points.
    source : str
        File name the image was registered under.
    procedure_id : str | None
        Procedure drawing the bitmap into the unit square, ``None`` when
        the source is not registered.
    native_size : tuple[int, int] | None
        Source pixel size.
    fit : ImageFit
        Placement policy inside the box.
    """

    x: float
    y: float
    width: float
    height: float
    source: str = ""
    procedure_id: str | None = None
    native_size: tuple[int, int] | None = None
    fit: ImageFit = ImageFit.CONTAIN
    transform: TransformSpec = IDENTITY
    origin: TransformOrigin = TransformOrigin.CENTER

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            object.__setattr__(self, name, at_least(getattr(self, name), 0.0))

    @classmethod
    def place(
        cls,
        images: ImageResolver,
        source: str,
        x: float,
        y: float,
        width: float,
        height: float,
        fit: ImageFit = ImageFit.CONTAIN,
    ) -> Image:
        return cls(
            x=x,
            y=y,
            width=width,
            height=height,
            source=source,
            procedure_id=images.procedure_id(source),
            native_size=images.native_size(source),
            fit=fit,
        )

    def with_fit(self, fit: ImageFit) -> Image:
        return dataclasses.replace(self, fit=fit)

    def set_origin(self, origin: TransformOrigin) -> Image:
        return dataclasses.replace(self, origin=origin)

    @property
    def anchor(self) -> tuple[float, float]:
        return box_anchor(self.origin, self.x, self.y, self.width, self.height)

    def procedure_refs(self) -> tuple[str, ...]:
        if self.procedure_id is None or self.native_size is None:
            return ()
        return (self.procedure_id,)

    def serialize(self) -> str:
        if self.procedure_id is None or self.native_size is None:
            logger.warning("Image %r is not registered; skipping", self.source)
            return f"% unregistered image: {_comment_text(self.source)}\n"

        px, py, pw, ph = fit_box(
            self.fit, (self.x, self.y, self.width, self.height), self.native_size,
        )
        lines = ["gsave"]
        if self.fit in _CLIPPED_FITS:
            lines.append(
                f"{fmt(self.x)} {fmt(self.y)} {fmt(self.width)} "
                f"{fmt(self.height)} rectclip"
            )
        lines.append(f"{fmt(px)} {fmt(py)} translate")
        lines.append(f"{fmt(pw)} {fmt(ph)} scale")
        lines.append(self.procedure_id)
        lines.append("grestore")
        body = "\n".join(lines) + "\n"
        return self.transform.prologue(self.anchor) + body + self.transform.epilogue()
