"""Image registry -- file name to image procedure identifier.

Each registered bitmap becomes a data array plus one procedure in the
document header that paints the image into the unit square::

    /image1data [
    <ffeedd...
     ...>
    ] def
    /image1 {
      /image1idx 0 def
      64 48 8 [64 0 0 -48 0 48]
      { image1data image1idx get /image1idx image1idx 1 add def }
      false 3 colorimage
    } bind def

The pixel bytes are split into strings of at most
:data:`STRING_CHUNK_BYTES` so no literal exceeds the 65535-byte string
limit of PostScript interpreters; the data procedure hands them to
``colorimage`` one after another.

``Image`` shapes then only translate / scale the unit square into their
target box and invoke ``image1``.  Identifiers are assigned from a
counter in registration order, so they are stable for a given sequence
of :meth:`ImageRegistry.add` calls.  Registering a file name again
replaces its pixels but keeps its identifier.

The registry is frozen once a document writes its header; later
registrations raise :class:`~pslib.errors.DocumentStateError` because
their procedures could no longer be defined.

Pixel data is decoded with Pillow.  CMYK sources keep four components,
every other mode is converted to RGB.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from pslib.errors import DocumentStateError
from pslib.procedures.registry import Procedure

logger = logging.getLogger(__name__)

HEX_LINE_BYTES = 36
"""Bytes per hex line in the emitted image data (72 characters)."""

STRING_CHUNK_BYTES = 65532
"""Largest data string; a multiple of 3 and 4 so pixels never straddle strings."""


@dataclass(frozen=True, slots=True)
class RawImage:
    """Registered image record.

    Parameters
    ----------
    file_name : str
        Lookup key (base name of the source file).
    procedure_name : str
        Identifier invoked by ``Image`` shapes.
    width, height : int
        Native size in pixels.
    path : Path | None
        Source file, ``None`` for in-memory images.
    """

    file_name: str
    procedure_name: str
    width: int
    height: int
    path: Path | None = None


class ImageRegistry:
    """Maps image file names to procedure identifiers and pixel data."""

    def __init__(self, prefix: str = "image") -> None:
        self._prefix = prefix
        self._images: dict[str, RawImage] = {}
        self._pixels: dict[str, PILImage.Image] = {}
        self._count = 0
        self._frozen = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(self, path: str | Path) -> RawImage:
        """Register an image file under its base name.

        Raises
        ------
        FileNotFoundError
            If *path* does not exist.
        PIL.UnidentifiedImageError
            If Pillow cannot decode the file.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")
        with PILImage.open(path) as img:
            img.load()
            return self._register(path.name, img.copy(), path)

    def add_image(self, file_name: str, image: PILImage.Image) -> RawImage:
        """Register an in-memory Pillow image under *file_name*."""
        return self._register(file_name, image.copy(), None)

    def _register(
        self, file_name: str, image: PILImage.Image, path: Path | None,
    ) -> RawImage:
        if self._frozen:
            raise DocumentStateError(
                f"Cannot register image {file_name!r}: the document header "
                "defining image procedures is already written"
            )
        previous = self._images.get(file_name)
        if previous is not None:
            name = previous.procedure_name
            logger.debug("Re-registering image %r, keeping %s", file_name, name)
        else:
            self._count += 1
            name = f"{self._prefix}{self._count}"
        raw = RawImage(
            file_name=file_name,
            procedure_name=name,
            width=image.width,
            height=image.height,
            path=path,
        )
        self._images[file_name] = raw
        self._pixels[file_name] = image
        logger.debug(
            "Registered image %r as %s (%dx%d)",
            file_name, raw.procedure_name, raw.width, raw.height,
        )
        return raw

    def freeze(self) -> None:
        """Reject further registrations; called when a document header is written."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, file_name: str) -> RawImage | None:
        return self._images.get(file_name)

    def procedure_id(self, file_name: str) -> str | None:
        raw = self._images.get(file_name)
        return raw.procedure_name if raw is not None else None

    def native_size(self, file_name: str) -> tuple[int, int] | None:
        raw = self._images.get(file_name)
        return (raw.width, raw.height) if raw is not None else None

    def names(self) -> list[str]:
        """Procedure identifiers in registration order."""
        return [raw.procedure_name for raw in self._images.values()]

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._images

    def __len__(self) -> int:
        return len(self._images)

    # ------------------------------------------------------------------
    # Header procedures
    # ------------------------------------------------------------------

    def procedures(self) -> list[Procedure]:
        """One data array and painting procedure per registered image."""
        return [
            self._procedure(raw, self._pixels[name])
            for name, raw in self._images.items()
        ]

    def preamble(self) -> str:
        return "".join(proc.body for proc in self.procedures())

    @staticmethod
    def _procedure(raw: RawImage, image: PILImage.Image) -> Procedure:
        if image.mode != "CMYK":
            image = image.convert("RGB")
        pixels = np.asarray(image, dtype=np.uint8)
        components = 1 if pixels.ndim == 2 else pixels.shape[2]

        data = pixels.reshape(-1).tobytes()
        strings = [
            _hex_string(data[i:i + STRING_CHUNK_BYTES])
            for i in range(0, len(data), STRING_CHUNK_BYTES)
        ] or ["<>"]
        name = raw.procedure_name
        w, h = raw.width, raw.height
        body = (
            f"/{name}data [\n" + "\n".join(strings) + "\n] def\n"
            f"/{name} {{\n"
            f"  /{name}idx 0 def\n"
            f"  {w} {h} 8 [{w} 0 0 -{h} 0 {h}]\n"
            f"  {{ {name}data {name}idx get /{name}idx {name}idx 1 add def }}\n"
            f"  false {components} colorimage\n"
            "} bind def\n"
        )
        return Procedure(name=name, body=body)


def _hex_string(chunk: bytes) -> str:
    """Hex literal for *chunk*, wrapped at :data:`HEX_LINE_BYTES` per line."""
    lines = [
        chunk[i:i + HEX_LINE_BYTES].hex()
        for i in range(0, len(chunk), HEX_LINE_BYTES)
    ]
    return "<" + "\n ".join(lines) + ">"
