"""
pslib -- PostScript / EPS document emitter.

Build shapes, place them on pages, and write pages into a document::

    from pslib import Cmyk, DocumentConfig, DocumentKind, Page, Rect

    page = Page(500, 300).add(Rect(50, 100, 400, 100).fill(Cmyk(0.5, 1, 0.5, 0)))
    with DocumentConfig(kind=DocumentKind.EPS, sink=fh, bounding_box=(500, 300)).build() as doc:
        doc.add(page)

Subpackages:
    ir: Colors, transforms and shapes
    procedures: Named markup procedures written into the header
    document: Pages, image registry, document writer
    configs: Settings loading and validation
    utils: Logging, filesystem helpers, scene schemas, markup checker
    scripts: Command-line entry points
"""

from pslib._version import __version__
from pslib.document import (
    Document,
    DocumentConfig,
    DocumentKind,
    ImageRegistry,
    Page,
    open_document,
)
from pslib.errors import (
    ConfigError,
    DocumentConfigError,
    DocumentStateError,
    PSLibError,
    SceneError,
)
from pslib.ir import (
    Cmyk,
    ColorMode,
    Image,
    ImageFit,
    Line,
    LineOrigin,
    Rect,
    Rgb,
    Shape,
    TransformOrigin,
    TransformSpec,
)
from pslib.procedures import Procedure, ProcedureRegistry

__all__ = [
    "__version__",
    "Cmyk",
    "ColorMode",
    "ConfigError",
    "Document",
    "DocumentConfig",
    "DocumentConfigError",
    "DocumentKind",
    "DocumentStateError",
    "Image",
    "ImageFit",
    "ImageRegistry",
    "Line",
    "LineOrigin",
    "PSLibError",
    "Page",
    "Procedure",
    "ProcedureRegistry",
    "Rect",
    "Rgb",
    "SceneError",
    "Shape",
    "TransformOrigin",
    "TransformSpec",
    "open_document",
]
