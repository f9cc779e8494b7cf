"""
Document writing module.

Frames pages of shape markup into PostScript / EPS documents with header,
procedure preamble and trailer.
"""

from pslib.document.document import (
    Document,
    DocumentConfig,
    DocumentKind,
    open_document,
)
from pslib.document.images import ImageRegistry, RawImage
from pslib.document.page import Page

__all__ = [
    "Document",
    "DocumentConfig",
    "DocumentKind",
    "ImageRegistry",
    "Page",
    "RawImage",
    "open_document",
]
