"""Page -- an append-only buffer of serialized shapes.

A page is owned by its caller until it is handed to
:meth:`Document.add <pslib.document.document.Document.add>`, which writes
the framed page and marks it consumed.  A consumed page rejects further
shapes so the same content cannot silently become a second page.
"""

from __future__ import annotations

import logging

from pslib.errors import DocumentStateError
from pslib.ir.numbers import at_least
from pslib.ir.shapes import Shape

logger = logging.getLogger(__name__)


class Page:
    """Page dimensions plus the ordered markup of its shapes.

    Parameters
    ----------
    width, height : int
        Page size in points, clamped to ``>= 1``.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(at_least(width, 1))
        self.height = int(at_least(height, 1))
        self._buffer: list[str] = []
        self._refs: set[str] = set()
        self._consumed = False

    def add(self, shape: Shape) -> Page:
        """Append *shape*'s markup.  Returns the page for chaining."""
        if self._consumed:
            raise DocumentStateError("Cannot add shapes to a page already written to a document")
        self._buffer.append(shape.serialize())
        self._refs.update(shape.procedure_refs())
        return self

    def extend(self, shapes) -> Page:
        for shape in shapes:
            self.add(shape)
        return self

    @property
    def procedure_refs(self) -> frozenset[str]:
        """Non-builtin procedures the page's shapes invoke (image procedures)."""
        return frozenset(self._refs)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> None:
        """Mark the page as written; called by the owning Document."""
        if self._consumed:
            raise DocumentStateError("Page has already been written to a document")
        self._consumed = True

    def markup(self) -> str:
        """Raw shape markup in insertion order."""
        return "".join(self._buffer)

    def frame(self) -> str:
        """Page bounding box, page size, shapes, ``showpage`` -- always in that order."""
        return (
            f"%%PageBoundingBox: 0 0 {self.width} {self.height}\n"
            f"<< /PageSize [{self.width} {self.height}] >> setpagedevice\n"
            f"{self.markup()}"
            "showpage\n"
        )

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        return f"Page({self.width}x{self.height}, shapes={len(self._buffer)})"
