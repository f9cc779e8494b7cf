"""Numeric helpers shared by every markup emitter.

PostScript accepts integers and reals in plain decimal notation.  All
numbers written by pslib go through :func:`fmt` so the output is stable
(idempotent) and compact::

    fmt(100.0)   -> "100"
    fmt(0.5)     -> "0.5"
    fmt(-0.0)    -> "0"
    fmt(1 / 3)   -> "0.3333"
"""

from __future__ import annotations

import math

PRECISION = 4
"""Decimal places kept in emitted reals."""


def fmt(value: float, precision: int = PRECISION) -> str:
    """Format a number for PostScript output.  inf / NaN become ``0``."""
    if not math.isfinite(value):
        return "0"
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* into ``[lo, hi]``.  NaN maps to *lo*."""
    value = float(value)
    if math.isnan(value):
        return lo
    return max(lo, min(hi, value))


def at_least(value: float, lo: float) -> float:
    """Clamp *value* to ``>= lo``.  inf and NaN map to *lo*."""
    value = float(value)
    if not math.isfinite(value):
        return lo
    return max(lo, value)
