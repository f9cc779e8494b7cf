"""Procedure registry -- named markup snippets defined once per document.

Shapes reference procedures by operator name (``rect``, ``fillcmyk``...)
instead of inlining their bodies.  The Document writes every registered
definition into its header, so a registry is an explicitly passed value
owned by one Document.  There is no process-wide registry: two documents
in the same process can carry different procedure sets.

Built-in procedures
-------------------
``rect``        ``-w 0 0 -h w 0 0 h x y rect``  closed five-point path
``line``        ``dx 0 x y line``                open two-point path
``fillrgb``     ``r g b fillrgb``
``fillcmyk``    ``c m y k fillcmyk``
``strokergb``   ``w r g b strokergb``
``strokecmyk``  ``w c m y k strokecmyk``

The four paint procedures run inside ``gsave`` / ``grestore`` so the
current path survives and color or line width never leak to siblings.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BUILTIN_NAMES: tuple[str, ...] = (
    "rect",
    "line",
    "fillrgb",
    "fillcmyk",
    "strokergb",
    "strokecmyk",
)


@dataclass(frozen=True, slots=True)
class Procedure:
    """Immutable named markup fragment.

    Parameters
    ----------
    name : str
        Operator name the shapes invoke.
    body : str
        Complete, self-contained definition (``/name { ... } bind def``).
    """

    name: str
    body: str

    def __post_init__(self) -> None:
        if not self.name or any(ch.isspace() for ch in self.name):
            raise ValueError(
                f"Procedure name must be a non-empty token, got {self.name!r}"
            )

    @classmethod
    def define(cls, name: str, *operators: str) -> Procedure:
        """Build a procedure whose body is one operator per line."""
        inner = "\n".join(f"  {op}" for op in operators)
        return cls(name=name, body=f"/{name} {{\n{inner}\n}} bind def\n")


def _paint(name: str, setter: str, paint: str, width: bool) -> Procedure:
    ops = ["gsave", setter]
    if width:
        ops.append("setlinewidth")
    ops.extend([paint, "grestore"])
    return Procedure.define(name, *ops)


class ProcedureRegistry:
    """Mapping of procedure name to :class:`Procedure`.

    Names are unique; :meth:`add` overwrites on collision (last write
    wins).  Iteration order is not part of the contract -- every
    definition is order independent in the emitted header.
    """

    def __init__(self, procedures: Iterable[Procedure] = ()) -> None:
        self._procedures: dict[str, Procedure] = {}
        for proc in procedures:
            self.add(proc)

    @classmethod
    def with_builtins(cls) -> ProcedureRegistry:
        """Registry holding the operators the shape serializers rely on."""
        return cls(
            [
                Procedure.define(
                    "rect",
                    "newpath",
                    "moveto",
                    "rlineto",
                    "rlineto",
                    "rlineto",
                    "rlineto",
                    "closepath",
                ),
                Procedure.define("line", "newpath", "moveto", "rlineto"),
                _paint("fillrgb", "setrgbcolor", "fill", width=False),
                _paint("fillcmyk", "setcmykcolor", "fill", width=False),
                _paint("strokergb", "setrgbcolor", "stroke", width=True),
                _paint("strokecmyk", "setcmykcolor", "stroke", width=True),
            ]
        )

    # ------------------------------------------------------------------
    # Mutation / lookup
    # ------------------------------------------------------------------

    def add(self, procedure: Procedure) -> None:
        if procedure.name in self._procedures:
            logger.debug("Overwriting procedure %r", procedure.name)
        self._procedures[procedure.name] = procedure

    def get(self, name: str) -> Procedure | None:
        return self._procedures.get(name)

    def list(self) -> list[Procedure]:
        return list(self._procedures.values())

    def names(self) -> set[str]:
        return set(self._procedures)

    def missing(self, required: Iterable[str] = BUILTIN_NAMES) -> list[str]:
        """Names from *required* that are not registered."""
        return [name for name in required if name not in self._procedures]

    def preamble(self) -> str:
        """All definitions, ready for the document header."""
        return "".join(proc.body for proc in self._procedures.values())

    def copy(self) -> ProcedureRegistry:
        return ProcedureRegistry(self._procedures.values())

    def __contains__(self, name: object) -> bool:
        return name in self._procedures

    def __len__(self) -> int:
        return len(self._procedures)

    def __iter__(self) -> Iterator[Procedure]:
        return iter(self.list())
