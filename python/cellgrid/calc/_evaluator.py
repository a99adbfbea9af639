"""FormulaEvaluator: evaluation of ``=term+term`` sums.

Referenced formula cells are re-evaluated from their stored source on every
call; no computed value is trusted across evaluations. Within one call each
cell is derived once and memoized, so shared inputs are not re-walked.

Evaluation walks the reference chain with an explicit frame stack rather
than Python recursion, so chain length is bounded only by the grid. The
cells on that stack form the current path; reaching one of them again
raises :class:`CircularReferenceError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cellgrid._cell import CellKind
from cellgrid._errors import CircularReferenceError
from cellgrid._utils import format_coord
from cellgrid.calc._parser import NumberTerm, Term, parse_formula

if TYPE_CHECKING:
    from cellgrid._grid import Grid

logger = logging.getLogger(__name__)

Coord = tuple[int, int]


@dataclass(frozen=True)
class Evaluation:
    """Result of evaluating one formula."""

    value: float
    references: frozenset[Coord]  # cells the formula reads directly


@dataclass
class _Frame:
    """A formula cell whose terms are partly summed."""

    coord: Coord
    terms: list[Term]
    index: int = 0
    total: float = 0.0


@dataclass
class _Walk:
    """State shared by every reference resolved during one ``evaluate`` call."""

    root: Coord
    memo: dict[Coord, float] = field(default_factory=dict)


class FormulaEvaluator:
    """Evaluates formulas against the cells of a :class:`Grid`.

    Usage::

        evaluator = FormulaEvaluator(grid)
        result = evaluator.evaluate("=A1+5", 0, 1)
        result.value, result.references
    """

    def __init__(self, grid: Grid) -> None:
        self._grid = grid

    def evaluate(self, formula: str, row: int, col: int) -> Evaluation:
        """Evaluate *formula* as if it were stored at ``(row, col)``.

        The grid is only read. The cell at ``(row, col)`` is the root of every
        path, so a formula that reaches back to its own cell fails even when
        the new formula has not been stored yet.
        """
        rows, cols = self._grid.shape
        walk = _Walk(root=(row, col))
        references: set[Coord] = set()
        value = 0.0
        for term in parse_formula(formula, rows, cols):
            if isinstance(term, NumberTerm):
                value += term.value
                continue
            references.add(term.coord)
            value += self._resolve(term.coord, walk)
        logger.debug("%s %s = %r", format_coord((row, col)), formula, value)
        return Evaluation(value=value, references=frozenset(references))

    # ------------------------------------------------------------------
    # Reference resolution
    # ------------------------------------------------------------------

    def _resolve(self, coord: Coord, walk: _Walk) -> float:
        """Value of the cell at *coord*, descending through formula cells."""
        path: list[Coord] = [walk.root]
        on_path: set[Coord] = {walk.root}
        frames: list[_Frame] = []

        value = self._enter(coord, path, on_path, frames, walk)
        while frames:
            frame = frames[-1]
            if value is not None:
                # a child just finished
                frame.total += value
                value = None
            if frame.index < len(frame.terms):
                term = frame.terms[frame.index]
                frame.index += 1
                if isinstance(term, NumberTerm):
                    frame.total += term.value
                else:
                    value = self._enter(term.coord, path, on_path, frames, walk)
                continue
            frames.pop()
            path.pop()
            on_path.discard(frame.coord)
            walk.memo[frame.coord] = frame.total
            value = frame.total
        assert value is not None
        return value

    def _enter(
        self,
        coord: Coord,
        path: list[Coord],
        on_path: set[Coord],
        frames: list[_Frame],
        walk: _Walk,
    ) -> float | None:
        """Resolve *coord* directly, or push a frame and return None."""
        if coord in on_path:
            start = path.index(coord)
            raise CircularReferenceError(path[start:] + [coord])
        if coord in walk.memo:
            return walk.memo[coord]
        cell = self._grid.get(*coord)
        if cell.kind is CellKind.NUMBER:
            return cell.value if cell.value is not None else 0.0
        if cell.kind is CellKind.FORMULA and cell.formula is not None:
            rows, cols = self._grid.shape
            frames.append(_Frame(coord, parse_formula(cell.formula, rows, cols)))
            path.append(coord)
            on_path.add(coord)
            return None
        # Text never contributes
        return 0.0
