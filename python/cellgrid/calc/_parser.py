"""Formula parser: splits ``=term+term`` sums into numeric and reference terms."""

from __future__ import annotations

import re
from dataclasses import dataclass

from cellgrid._errors import EmptyFormulaError, InvalidReferenceError
from cellgrid._utils import ref_to_rowcol

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Numeric literal: 42, -3.5, .5, 1e3, 2.5E-1 (no inf/nan, no underscores).
# Leading whitespace is skipped before matching, as strtod does; trailing
# whitespace makes the text non-numeric.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_number(text: str) -> bool:
    """True when *text*, after leading whitespace, is a numeric literal."""
    return _NUMBER_RE.fullmatch(text.lstrip()) is not None


def format_value(value: float) -> str:
    """Render a value the way the grid displays it: one decimal place."""
    return f"{value:.1f}"


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NumberTerm:
    value: float


@dataclass(frozen=True)
class ReferenceTerm:
    row: int
    col: int
    text: str  # as written in the formula

    @property
    def coord(self) -> tuple[int, int]:
        return (self.row, self.col)


Term = NumberTerm | ReferenceTerm


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_reference(text: str, rows: int, cols: int) -> tuple[int, int]:
    """Resolve ``"B3"`` to zero-based ``(2, 1)`` inside a rows x cols grid.

    Raises InvalidReferenceError for malformed text or a cell off the grid.
    """
    try:
        row, col = ref_to_rowcol(text)
    except ValueError:
        raise InvalidReferenceError(text) from None
    if not 0 <= col < cols:
        raise InvalidReferenceError(text, f"column outside A-{chr(ord('A') + cols - 1)}")
    if not 0 <= row < rows:
        raise InvalidReferenceError(text, f"row outside 1-{rows}")
    return row, col


def split_terms(formula: str) -> list[str]:
    """Split a formula body on ``+``, dropping the ``=`` and empty pieces.

    ``"=1++2"`` gives ``["1", "2"]``; ``"="`` gives ``[]``.
    """
    if not formula.startswith("="):
        raise ValueError(f"Not a formula: {formula!r}")
    return [t.strip() for t in formula[1:].split("+") if t.strip()]


def parse_formula(formula: str, rows: int, cols: int) -> list[Term]:
    """Parse a formula into its terms.

    Each piece is tried as a numeric literal first; anything else must be a
    cell reference inside the grid.
    """
    pieces = split_terms(formula)
    if not pieces:
        raise EmptyFormulaError(formula)
    terms: list[Term] = []
    for piece in pieces:
        if is_number(piece):
            terms.append(NumberTerm(float(piece)))
        else:
            row, col = parse_reference(piece, rows, cols)
            terms.append(ReferenceTerm(row, col, piece.upper()))
    return terms


def parse_references(formula: str, rows: int, cols: int) -> list[tuple[int, int]]:
    """Unique cells a formula reads directly, in first-seen order."""
    refs: list[tuple[int, int]] = []
    seen: set[tuple[int, int]] = set()
    for term in parse_formula(formula, rows, cols):
        if isinstance(term, ReferenceTerm) and term.coord not in seen:
            refs.append(term.coord)
            seen.add(term.coord)
    return refs
