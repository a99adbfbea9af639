"""RecalcPropagator: pushes a cell change through its dependents."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cellgrid._errors import FormulaError
from cellgrid._utils import format_coord
from cellgrid.calc._parser import format_value
from cellgrid.calc._protocol import CellUpdate, RecalcWarning

if TYPE_CHECKING:
    from cellgrid._grid import Grid
    from cellgrid.calc._evaluator import FormulaEvaluator
    from cellgrid.calc._graph import DependencyGraph
    from cellgrid.calc._protocol import DisplayNotifier

logger = logging.getLogger(__name__)

Coord = tuple[int, int]


class RecalcPropagator:
    """Recomputes formula cells downstream of a change and notifies the display.

    Each propagation pass recomputes every reachable formula cell exactly
    once, in topological order. A cell that fails to evaluate keeps its
    previous value and is reported as a :class:`RecalcWarning`.
    """

    def __init__(
        self,
        grid: Grid,
        graph: DependencyGraph,
        evaluator: FormulaEvaluator,
        display: DisplayNotifier,
    ) -> None:
        self._grid = grid
        self._graph = graph
        self._evaluator = evaluator
        self._display = display

    def on_cell_changed(
        self, row: int, col: int,
    ) -> tuple[list[CellUpdate], list[RecalcWarning]]:
        """Recompute everything that reads ``(row, col)``, transitively."""
        order, cyclic = self._graph.affected_cells(row, col)
        warnings = [
            RecalcWarning(r, c, f"{format_coord((r, c))} is part of a circular reference")
            for r, c in cyclic
        ]
        for w in warnings:
            logger.warning("Skipped %s: %s", format_coord((w.row, w.col)), w.message)
        updates, failed = self._recompute(order)
        logger.debug(
            "Change at %s recomputed %d cell(s)", format_coord((row, col)), len(updates),
        )
        return updates, warnings + failed

    def recalculate_all(self) -> tuple[list[CellUpdate], list[RecalcWarning]]:
        """Re-evaluate every formula cell in the grid."""
        try:
            order = self._graph.topological_order()
        except ValueError as e:
            logger.warning("Full recalculation found a cycle: %s", e)
            order = [(r, c) for r, c, cell in self._grid.iter_cells() if cell.is_formula]
        return self._recompute(order)

    def _recompute(
        self, order: list[Coord],
    ) -> tuple[list[CellUpdate], list[RecalcWarning]]:
        updates: list[CellUpdate] = []
        warnings: list[RecalcWarning] = []
        for r, c in order:
            cell = self._grid.get(r, c)
            if not cell.is_formula or cell.formula is None:
                continue
            try:
                result = self._evaluator.evaluate(cell.formula, r, c)
            except FormulaError as e:
                logger.warning("Skipped %s: %s", format_coord((r, c)), e)
                warnings.append(RecalcWarning(r, c, str(e)))
                continue
            old_text = cell.display_text
            new_text = format_value(result.value)
            self._grid.update(r, c, value=result.value, display_text=new_text)
            self._display.notify(r, c, new_text)
            updates.append(CellUpdate(r, c, old_text, new_text, cell.formula))
        return updates, warnings
