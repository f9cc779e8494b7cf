"""Document writer -- header, framed pages, trailer.

Two output kinds share one writer:

``DocumentKind.PS``
    Multi-page PostScript.  The page count is deferred
    (``%%Pages: (atend)``) and declared in the trailer; every page is
    prefixed with ``%%Page: n n``.

``DocumentKind.EPS``
    Single-page Encapsulated PostScript.  The header carries an explicit
    ``%%BoundingBox`` supplied by the caller (independent of the page's
    own size) and ``%%Pages: 1``; the page is never numbered and a
    second page raises :class:`~pslib.errors.DocumentStateError`.

Lifecycle::

    config = DocumentConfig(kind=DocumentKind.EPS, sink=fh, bounding_box=(500, 300))
    with config.build() as doc:   # header written here
        doc.add(page)             # framed page written through
                                  # trailer written, sink flushed on exit

Configuration is an immutable :class:`DocumentConfig` validated once in
:meth:`DocumentConfig.build`.  Missing preconditions raise
:class:`~pslib.errors.DocumentConfigError` instead of producing
malformed markup.  Sink write errors propagate unchanged.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from pslib._version import __version__
from pslib.document.images import ImageRegistry
from pslib.document.page import Page
from pslib.errors import DocumentConfigError, DocumentStateError
from pslib.procedures.registry import BUILTIN_NAMES, ProcedureRegistry

if TYPE_CHECKING:
    from pslib.configs.loader import Settings

logger = logging.getLogger(__name__)


class DocumentKind(Enum):
    """Target output kind."""

    PS = "ps"
    EPS = "eps"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DocumentConfig:
    """Everything needed to open a document.

    Parameters
    ----------
    kind : DocumentKind
        PS (multi-page) or EPS (single page with bounding box).
    sink : TextIO | None
        Text stream the markup is written to.  Required.
    bounding_box : tuple[int, int] | None
        ``(width, height)`` of the EPS bounding box.  Required for EPS,
        ignored for PS.
    procedures : ProcedureRegistry | None
        Procedure set written into the header.  ``None`` uses
        :meth:`ProcedureRegistry.with_builtins`.
    images : ImageRegistry | None
        Registered bitmaps; their procedures follow the builtin ones.
    creator : str
        Tool name in the ``%%Creator`` comment.
    creation_date : datetime | None
        Timestamp for ``%%CreationDate``; ``None`` means now (UTC).
    owns_sink : bool
        Close the sink in :meth:`Document.close`.
    """

    kind: DocumentKind = DocumentKind.PS
    sink: TextIO | None = None
    bounding_box: tuple[int, int] | None = None
    procedures: ProcedureRegistry | None = None
    images: ImageRegistry | None = None
    creator: str = "pslib"
    creation_date: datetime | None = None
    owns_sink: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> DocumentConfig:
        """Seed kind, creator and EPS bounding box from loaded settings."""
        doc = settings.document
        values: dict[str, Any] = {
            "kind": DocumentKind(doc.kind),
            "creator": settings.creator,
            "bounding_box": (doc.page_width, doc.page_height),
        }
        values.update(overrides)
        return cls(**values)

    def replace(self, **changes: Any) -> DocumentConfig:
        return dataclasses.replace(self, **changes)

    def build(self) -> Document:
        """Validate the configuration and write the document header.

        Raises
        ------
        DocumentConfigError
            If no sink is set, the creator is not latin-1 text, an EPS
            document has no bounding box, or the procedure registry lacks a
            builtin the shapes invoke.
        """
        if self.sink is None:
            raise DocumentConfigError("A sink must be set before building a document")
        try:
            self.creator.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise DocumentConfigError(
                f"Creator must only use latin-1 characters, got {self.creator!r}"
            ) from exc

        bbox = None
        if self.kind is DocumentKind.EPS:
            if self.bounding_box is None:
                raise DocumentConfigError("EPS documents require a bounding box")
            w, h = self.bounding_box
            bbox = (max(1, int(w)), max(1, int(h)))

        procedures = self.procedures
        if procedures is None:
            procedures = ProcedureRegistry.with_builtins()
        missing = procedures.missing(BUILTIN_NAMES)
        if missing:
            raise DocumentConfigError(
                f"Procedure registry is missing required procedures: {', '.join(missing)}"
            )

        return Document(
            kind=self.kind,
            sink=self.sink,
            procedures=procedures,
            images=self.images,
            bounding_box=bbox,
            creator=self.creator,
            creation_date=self.creation_date or datetime.now(timezone.utc),
            owns_sink=self.owns_sink,
        )


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class Document:
    """Open document writing to an exclusively owned sink.

    Build instances through :meth:`DocumentConfig.build` or
    :func:`open_document`; the header is written on construction.
    """

    def __init__(
        self,
        kind: DocumentKind,
        sink: TextIO,
        procedures: ProcedureRegistry,
        images: ImageRegistry | None,
        bounding_box: tuple[int, int] | None,
        creator: str,
        creation_date: datetime,
        owns_sink: bool = False,
    ) -> None:
        self._kind = kind
        self._sink = sink
        self._procedures = procedures
        self._images = images
        self._bounding_box = bounding_box
        self._owns_sink = owns_sink
        self._page_count = 0
        self._closed = False
        self._defined: set[str] = set()
        self._write_header(creator, creation_date)
        logger.debug("Opened %s document (%d procedures)", kind.value, len(procedures))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def kind(self) -> DocumentKind:
        return self._kind

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def procedures(self) -> ProcedureRegistry:
        return self._procedures

    def add(self, page: Page) -> None:
        """Write *page* and consume it.

        Raises
        ------
        DocumentStateError
            If the document is closed or the page was already written,
            an EPS document already holds its page, or the page invokes
            an image procedure the header does not define.
        """
        if self._closed:
            raise DocumentStateError("Cannot add a page to a closed document")
        if page.consumed:
            raise DocumentStateError("Page has already been written to a document")
        if self._kind is DocumentKind.EPS and self._page_count == 1:
            raise DocumentStateError("EPS documents hold exactly one page")
        undefined = sorted(page.procedure_refs - self._defined)
        if undefined:
            raise DocumentStateError(
                "Page invokes procedures missing from the document header: "
                + ", ".join(undefined)
            )

        if self._kind is DocumentKind.PS:
            n = self._page_count + 1
            self._sink.write(f"%%Page: {n} {n}\n")
        self._sink.write(page.frame())
        page.consume()
        self._page_count += 1
        logger.debug("Wrote page %d (%r)", self._page_count, page)

    def close(self) -> None:
        """Write the trailer and flush.  Closing twice is a no-op."""
        if self._closed:
            return
        if self._kind is DocumentKind.PS:
            self._sink.write("%%Trailer\n")
            self._sink.write(f"%%Pages: {self._page_count}\n")
        self._sink.write("%%EOF\n")
        self._sink.flush()
        if self._owns_sink:
            self._sink.close()
        self._closed = True
        logger.debug("Closed document after %d page(s)", self._page_count)

    def __enter__(self) -> Document:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def _write_header(self, creator: str, creation_date: datetime) -> None:
        stamp = creation_date.isoformat()
        if self._kind is DocumentKind.EPS:
            w, h = self._bounding_box
            lines = [
                "%!PS-Adobe-3.0 EPSF-3.0",
                f"%%BoundingBox: 0 0 {w} {h}",
                f"%%Creator: {creator} {__version__}",
                f"%%CreationDate: {stamp}",
                "%%Pages: 1",
                "%%EndComments",
            ]
        else:
            lines = [
                "%!PS-Adobe-3.0",
                f"%%Creator: {creator} {__version__}",
                f"%%CreationDate: {stamp}",
                "%%Pages: (atend)",
                "%%EndComments",
            ]
        self._sink.write("\n".join(lines) + "\n")
        self._sink.write(self._procedures.preamble())
        self._defined.update(self._procedures.names())
        if self._images is not None:
            self._sink.write(self._images.preamble())
            self._images.freeze()
            self._defined.update(self._images.names())


def open_document(path: str | Path, **config: Any) -> Document:
    """Open *path* for writing and build a document that owns the file.

    Keyword arguments are :class:`DocumentConfig` fields.  The file is
    closed if building fails.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    sink = open(path, "w", encoding="latin-1", newline="\n")
    try:
        return DocumentConfig(sink=sink, owns_sink=True, **config).build()
    except Exception:
        sink.close()
        raise
