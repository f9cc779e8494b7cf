"""Paint colors -- the two color spaces a shape can fill or stroke with.

A color is an immutable, slotted dataclass tagged by its space: ``Rgb``
(3 channels) or ``Cmyk`` (4 channels).  Channels are clamped to
``[0, 1]`` on construction, so an emitted color can never leave the valid
range no matter what a computed pipeline feeds in.  There is no implicit
conversion between the two spaces.

Emission
--------
Shapes never write ``setrgbcolor`` / ``setcmykcolor`` themselves.  They
call :meth:`emit` which names the registry procedure for the paint
operation (``fillrgb``, ``strokecmyk``, ...) together with the channel
operands.  The procedure wraps the color change in its own graphics-state
frame.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

from pslib.ir.numbers import clamp, fmt

Paint = Literal["fill", "stroke"]


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ColorMode(ABC):
    """Base class for both color spaces."""

    @property
    @abstractmethod
    def space(self) -> str:
        """Procedure suffix for this space: ``"rgb"`` or ``"cmyk"``."""

    @property
    @abstractmethod
    def channels(self) -> tuple[float, ...]:
        """Clamped channel values in space order."""

    @abstractmethod
    def setter(self) -> str:
        """Raw PostScript operator setting this color."""

    def operands(self) -> str:
        """Channel values formatted as PostScript operands."""
        return " ".join(fmt(v) for v in self.channels)

    def emit(self, paint: Paint) -> tuple[str, str]:
        """Return ``(procedure_name, operands)`` for a fill or stroke.

        Parameters
        ----------
        paint : ``"fill"`` | ``"stroke"``
            Paint operation the color is used for.

        Returns
        -------
        tuple[str, str]
            E.g. ``("fillcmyk", "0.5 1 0.5 0")``.
        """
        if paint not in ("fill", "stroke"):
            raise ValueError(f"paint must be 'fill' or 'stroke', got {paint!r}")
        return f"{paint}{self.space}", self.operands()


# ---------------------------------------------------------------------------
# Color spaces
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Rgb(ColorMode):
    """DeviceRGB color.

    Parameters
    ----------
    r, g, b : float
        Red, green, blue fractions.  Clamped to ``[0, 1]``.
    """

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            object.__setattr__(self, name, clamp(getattr(self, name), 0.0, 1.0))

    @property
    def space(self) -> str:
        return "rgb"

    @property
    def channels(self) -> tuple[float, ...]:
        return (self.r, self.g, self.b)

    def setter(self) -> str:
        return "setrgbcolor"


@dataclass(frozen=True, slots=True)
class Cmyk(ColorMode):
    """DeviceCMYK color.

    Parameters
    ----------
    c, m, y, k : float
        Cyan, magenta, yellow, black fractions.  Clamped to ``[0, 1]``.
    """

    c: float = 0.0
    m: float = 0.0
    y: float = 0.0
    k: float = 0.0

    def __post_init__(self) -> None:
        for name in ("c", "m", "y", "k"):
            object.__setattr__(self, name, clamp(getattr(self, name), 0.0, 1.0))

    @property
    def space(self) -> str:
        return "cmyk"

    @property
    def channels(self) -> tuple[float, ...]:
        return (self.c, self.m, self.y, self.k)

    def setter(self) -> str:
        return "setcmykcolor"


BLACK = Rgb(0.0, 0.0, 0.0)
