"""Offline markup checker for emitted PostScript.

Provides:
    - Graphics-state balance: every ``gsave`` matched by one ``grestore``
    - Page discipline: the stack is empty at every ``showpage``
    - Procedure expansion: ``/name { ... } def`` bodies are recorded and
      expanded where the name is invoked, so balance is checked through
      ``fillrgb`` / ``strokecmyk`` and friends
    - Operand capture: rotate angles, color channels, line widths
    - DSC comments: ``%%Page:`` entries and ``%%BoundingBox``

This is a structural scanner, not an interpreter.  Operands are tracked
only for the operators pslib emits; any other operator clears the
operand stack.

Used by:
    - Tests: balance and clamp properties over serialized shapes
    - CLI: ``pslib-render check out.ps``

Public API:
    vm = MarkupVM()
    vm.load_string(markup)
    result = vm.run()  # -> {final_depth, max_depth, violations, ...}
"""

from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging
import re

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(
    r"""
      (?P<comment>%[^\n]*)
    | (?P<dict><<|>>)
    | (?P<hex><[0-9A-Fa-f\s]*>)
    | (?P<string>\([^)]*\))
    | (?P<brace>[{}\[\]])
    | (?P<word>/?[^\s{}\[\]()<>/%]+)
    """,
    re.VERBOSE,
)

NUMBER_RE = re.compile(r'^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?$')

# Operand counts of the operators pslib emits
ARITY = {
    'moveto': 2,
    'rlineto': 2,
    'lineto': 2,
    'translate': 2,
    'scale': 2,
    'rotate': 1,
    'setlinewidth': 1,
    'setrgbcolor': 3,
    'setcmykcolor': 4,
    'rectclip': 4,
    'gsave': 0,
    'grestore': 0,
    'newpath': 0,
    'closepath': 0,
    'fill': 0,
    'stroke': 0,
}

MAX_EXPANSION_DEPTH = 32


# ============================================================================
# MARKUP VM
# ============================================================================

class MarkupVM:
    """Graphics-state stack checker.

    Parameters
    ----------
    procedures : Dict[str, str], optional
        Extra procedure definitions (name -> ``/name {...} def`` body),
        e.g. from ``ProcedureRegistry.list()``, for checking shape
        markup without a document header.

    Attributes
    ----------
    depth : int
        Current gsave depth
    max_depth : int
        Deepest nesting seen
    violations : List[str]
        Balance violations found so far
    """

    def __init__(self, procedures: Optional[Dict[str, str]] = None):
        self.text = ""
        self._preload = dict(procedures or {})
        self.reset()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_file(self, path: Union[str, Path]) -> None:
        """Load a PostScript file.

        Raises
        ------
        FileNotFoundError
            If file doesn't exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Markup file not found: {path}")
        self.text = path.read_text(encoding='latin-1')
        logger.debug(f"Loaded {len(self.text)} characters from {path}")

    def load_string(self, markup: str) -> None:
        self.text = markup

    def reset(self) -> None:
        self.depth = 0
        self.max_depth = 0
        self.violations: List[str] = []
        self.procedures: Dict[str, List[str]] = {}
        self.operators: Counter = Counter()
        self.rotations: List[float] = []
        self.colors: List[tuple] = []
        self.line_widths: List[float] = []
        self.pages: List[str] = []
        self.bounding_box: Optional[str] = None
        self.showpages = 0
        self._stack: List[float] = []
        for source in self._preload.values():
            self._define_from(tokenize(source))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self) -> Dict:
        """Scan the loaded markup.

        Returns
        -------
        dict
            ``final_depth``, ``max_depth``, ``violations``, ``operators``,
            ``rotations``, ``colors``, ``line_widths``, ``pages``,
            ``bounding_box``, ``showpages``, ``balanced``
        """
        self.reset()
        self._execute(tokenize(self.text), level=0)

        if self.depth != 0:
            self._violate(f"{self.depth} gsave(s) left open at end of markup")

        return {
            'final_depth': self.depth,
            'max_depth': self.max_depth,
            'violations': list(self.violations),
            'operators': dict(self.operators),
            'rotations': list(self.rotations),
            'colors': list(self.colors),
            'line_widths': list(self.line_widths),
            'pages': list(self.pages),
            'bounding_box': self.bounding_box,
            'showpages': self.showpages,
            'balanced': not self.violations,
        }

    def _violate(self, msg: str) -> None:
        self.violations.append(msg)
        logger.warning(msg)

    def _execute(self, tokens: List[str], level: int) -> None:
        i = 0
        while i < len(tokens):
            tok = tokens[i]

            if tok.startswith('%'):
                self._comment(tok)
            elif tok.startswith('/') and i + 1 < len(tokens) and tokens[i + 1] == '{':
                body, i = _read_block(tokens, i + 2)
                # "/name { ... } bind def" or "/name { ... } def"
                j = i + 1
                if j < len(tokens) and tokens[j] == 'bind':
                    j += 1
                if j < len(tokens) and tokens[j] == 'def':
                    self.procedures[tok[1:]] = body
                    i = j
            elif NUMBER_RE.match(tok):
                self._stack.append(float(tok))
            elif tok in self.procedures:
                if level >= MAX_EXPANSION_DEPTH:
                    self._violate(f"Procedure expansion too deep at '{tok}'")
                else:
                    self.operators[tok] += 1
                    self._execute(self.procedures[tok], level + 1)
            elif tok[0] in '/<([{]}' or tok == '>>':
                pass
            else:
                self._operator(tok)
            i += 1

    def _define_from(self, tokens: List[str]) -> None:
        self._execute(tokens, level=0)
        self._stack.clear()

    def _comment(self, tok: str) -> None:
        if tok.startswith('%%Page:'):
            self.pages.append(tok[len('%%Page:'):].strip())
        elif tok.startswith('%%BoundingBox:'):
            self.bounding_box = tok[len('%%BoundingBox:'):].strip()

    def _operator(self, op: str) -> None:
        self.operators[op] += 1

        if op == 'gsave':
            self.depth += 1
            self.max_depth = max(self.max_depth, self.depth)
        elif op == 'grestore':
            if self.depth == 0:
                self._violate("grestore without matching gsave")
            else:
                self.depth -= 1
        elif op == 'showpage':
            self.showpages += 1
            if self.depth != 0:
                self._violate(f"showpage at gsave depth {self.depth}")

        arity = ARITY.get(op)
        if arity is None:
            self._stack.clear()
            return
        if arity == 0:
            return
        operands = self._stack[-arity:] if len(self._stack) >= arity else []
        del self._stack[-arity:]

        if not operands:
            return
        if op == 'rotate':
            self.rotations.append(operands[0])
        elif op in ('setrgbcolor', 'setcmykcolor'):
            self.colors.append(tuple(operands))
        elif op == 'setlinewidth':
            self.line_widths.append(operands[0])


# ============================================================================
# HELPERS
# ============================================================================

def tokenize(text: str) -> List[str]:
    """Split markup into tokens; comments are kept as single tokens."""
    return [m.group(0) for m in TOKEN_RE.finditer(text)]


def _read_block(tokens: List[str], start: int):
    """Return (body tokens, index of the closing brace)."""
    nesting = 1
    i = start
    while i < len(tokens):
        if tokens[i] == '{':
            nesting += 1
        elif tokens[i] == '}':
            nesting -= 1
            if nesting == 0:
                return tokens[start:i], i
        i += 1
    return tokens[start:], len(tokens) - 1


def check_markup(markup: str, procedures: Optional[Dict[str, str]] = None) -> Dict:
    """Run a fresh :class:`MarkupVM` over *markup*."""
    vm = MarkupVM(procedures)
    vm.load_string(markup)
    return vm.run()
