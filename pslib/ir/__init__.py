"""
Shape Intermediate Representation module.

Defines colors, transforms and shapes as immutable dataclasses. This
vocabulary is the contract between callers and the document writer.

All coordinates are in PostScript points, bottom-left origin.
"""

from pslib.ir.color import Cmyk, ColorMode, Rgb
from pslib.ir.shapes import Image, ImageFit, Line, Rect, Shape, fit_box
from pslib.ir.transform import LineOrigin, TransformOrigin, TransformSpec

__all__ = [
    "ColorMode",
    "Rgb",
    "Cmyk",
    "TransformSpec",
    "TransformOrigin",
    "LineOrigin",
    "Shape",
    "Rect",
    "Line",
    "Image",
    "ImageFit",
    "fit_box",
]
