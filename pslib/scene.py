"""Scene files -> pages -> documents.

Converts a validated :class:`~pslib.utils.validators.SceneV1` into
:class:`~pslib.document.page.Page` objects and writes them through a
:class:`~pslib.document.document.Document`.  Colors, geometry and
rotation go through the regular shape constructors, so the usual
clamping applies to scene files too.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from pslib.configs.loader import Settings
from pslib.document.document import DocumentConfig, DocumentKind
from pslib.document.images import ImageRegistry
from pslib.document.page import Page
from pslib.errors import SceneError
from pslib.ir.color import Cmyk, ColorMode, Rgb
from pslib.ir.shapes import Image, ImageFit, Line, Rect, Shape
from pslib.ir.transform import LineOrigin, TransformOrigin
from pslib.utils import validators
from pslib.utils.validators import (
    ColorSpec,
    ImageSpec,
    LineSpec,
    RectSpec,
    SceneV1,
)

logger = logging.getLogger(__name__)


def load_scene(path: str | Path) -> SceneV1:
    """Load and validate a scene file, raising :class:`SceneError`."""
    try:
        return validators.load_scene_file(path)
    except (FileNotFoundError, ValueError) as exc:
        raise SceneError(str(exc)) from exc


def _color(spec: ColorSpec | None) -> ColorMode | None:
    if spec is None:
        return None
    if spec.rgb is not None:
        return Rgb(*spec.rgb)
    return Cmyk(*spec.cmyk)


def _transformed(shape: Shape, spec) -> Shape:
    if spec.rotate is not None:
        shape = shape.rotate(spec.rotate)
    if spec.scale is not None:
        shape = shape.scale(*spec.scale)
    return shape


def build_shape(spec, images: ImageRegistry) -> Shape:
    """Convert one shape spec into a shape."""
    if isinstance(spec, RectSpec):
        shape = Rect(spec.x, spec.y, spec.width, spec.height).set_origin(
            TransformOrigin(spec.origin)
        )
        fill = _color(spec.fill)
        if fill is not None:
            shape = shape.fill(fill)
        if spec.stroke is not None:
            shape = shape.stroke(spec.stroke.width, _color(spec.stroke))
    elif isinstance(spec, LineSpec):
        shape = Line(spec.x, spec.y, spec.length).set_origin(LineOrigin(spec.origin))
        if spec.stroke is not None:
            shape = shape.stroke(spec.stroke.width, _color(spec.stroke))
    elif isinstance(spec, ImageSpec):
        if spec.source not in images:
            raise SceneError(f"Image '{spec.source}' is not listed under 'images'")
        shape = Image.place(
            images, spec.source, spec.x, spec.y, spec.width, spec.height,
            fit=ImageFit(spec.fit),
        ).set_origin(TransformOrigin(spec.origin))
    else:
        raise SceneError(f"Unsupported shape spec: {type(spec).__name__}")
    return _transformed(shape, spec)


def register_images(scene: SceneV1, base_dir: Path) -> ImageRegistry:
    images = ImageRegistry()
    for source in scene.images:
        path = Path(source.path)
        if not path.is_absolute():
            path = base_dir / path
        try:
            images.add(path)
        except OSError as exc:
            # missing file or one Pillow cannot decode
            raise SceneError(f"Cannot load image '{source.path}': {exc}") from exc
    return images


def build_pages(scene: SceneV1, images: ImageRegistry) -> list[Page]:
    pages = []
    for page_spec in scene.pages:
        page = Page(page_spec.width, page_spec.height)
        page.extend(build_shape(spec, images) for spec in page_spec.shapes)
        pages.append(page)
    return pages


def render_scene(
    scene: SceneV1,
    sink: TextIO,
    settings: Settings,
    base_dir: str | Path = ".",
    kind: DocumentKind | None = None,
) -> int:
    """Write *scene* to *sink* as a complete document.

    Parameters
    ----------
    scene : SceneV1
        Validated scene.
    sink : TextIO
        Output stream; flushed but not closed.
    settings : Settings
        Creator banner and default kind / bounding box.
    base_dir : str | Path
        Directory image paths are resolved against.
    kind : DocumentKind | None
        Overrides both the scene and the settings.

    Returns
    -------
    int
        Number of pages written.
    """
    images = register_images(scene, Path(base_dir))
    pages = build_pages(scene, images)

    overrides = {"sink": sink, "images": images}
    if kind is not None:
        overrides["kind"] = kind
    elif scene.kind is not None:
        overrides["kind"] = DocumentKind(scene.kind)
    if scene.bounding_box is not None:
        overrides["bounding_box"] = tuple(scene.bounding_box)
    elif pages:
        overrides["bounding_box"] = (pages[0].width, pages[0].height)

    config = DocumentConfig.from_settings(settings, **overrides)
    if config.kind is DocumentKind.EPS and len(pages) != 1:
        raise SceneError(f"EPS output needs exactly 1 page, scene has {len(pages)}")

    with config.build() as doc:
        for page in pages:
            doc.add(page)
        count = doc.page_count
    logger.info("Rendered %d page(s) as %s", count, config.kind.value)
    return count
