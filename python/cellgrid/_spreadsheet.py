"""Spreadsheet: the mutation API over a grid, its formulas and their dependents.

``set_cell_value`` and ``clear_cell`` are the only mutators. Each runs to
completion under one lock, including the recomputation cascade, so a host
with several threads never observes a half-propagated grid.
"""

from __future__ import annotations

import logging
import threading

from cellgrid._cell import Cell, CellKind
from cellgrid._config import GridConfig
from cellgrid._grid import Grid
from cellgrid._utils import format_coord, ref_to_rowcol
from cellgrid.calc._evaluator import FormulaEvaluator
from cellgrid.calc._graph import DependencyGraph
from cellgrid.calc._parser import format_value, is_number
from cellgrid.calc._protocol import DisplayNotifier, NullDisplay, RecalcResult
from cellgrid.calc._recalc import RecalcPropagator

logger = logging.getLogger(__name__)


class Spreadsheet:
    """A fixed-size grid of cells with sum formulas and change propagation.

    Usage::

        sheet = Spreadsheet(display=my_display)
        sheet.set_cell_value(0, 0, "3")        # A1
        sheet.set_cell_value(0, 1, "=A1+5")    # B1 -> display "8.0"
        sheet["A1"] = "10"                     # B1 -> display "15.0"
        sheet.get_display_text(0, 1)           # "=A1+5"
    """

    def __init__(
        self,
        config: GridConfig | None = None,
        display: DisplayNotifier | None = None,
    ) -> None:
        self._config = config or GridConfig()
        self._grid = Grid.from_config(self._config)
        self._display: DisplayNotifier = display if display is not None else NullDisplay()
        self._graph = DependencyGraph(self._grid)
        self._evaluator = FormulaEvaluator(self._grid)
        self._recalc = RecalcPropagator(
            self._grid, self._graph, self._evaluator, self._display,
        )
        self._lock = threading.RLock()

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_cell_value(self, row: int, col: int, text: str) -> RecalcResult:
        """Store *text* at ``(row, col)`` and propagate the change.

        Text starting with ``=`` is a formula, a numeric literal is a number,
        anything else is opaque text. Raises OutOfBoundsError or a
        FormulaError subclass; on error nothing is stored or notified.
        """
        with self._lock:
            old = self._grid.get(row, col)

            if text.startswith("="):
                evaluation = self._evaluator.evaluate(text, row, col)
                new = Cell(
                    kind=CellKind.FORMULA,
                    raw_text=text,
                    display_text=format_value(evaluation.value),
                    formula=text,
                    value=evaluation.value,
                )
                refs = evaluation.references
            elif is_number(text):
                value = float(text)
                new = Cell(
                    kind=CellKind.NUMBER,
                    raw_text=text,
                    display_text=format_value(value),
                    value=value,
                )
                refs = frozenset()
            else:
                new = Cell(kind=CellKind.TEXT, raw_text=text, display_text=text)
                refs = frozenset()

            self._replace(row, col, old, new, refs)
            logger.debug("Set %s to %r (%s)", format_coord((row, col)), text, new.kind.value)
            return self._publish(row, col, new.display_text)

    def clear_cell(self, row: int, col: int) -> RecalcResult:
        """Empty ``(row, col)``.

        Cells that reference it keep their edge and now read it as zero.
        """
        with self._lock:
            old = self._grid.get(row, col)
            self._replace(row, col, old, Cell(), frozenset())
            logger.debug("Cleared %s", format_coord((row, col)))
            return self._publish(row, col, "")

    def recalculate(self) -> RecalcResult:
        """Re-evaluate every formula cell and notify the display for each."""
        with self._lock:
            updates, warnings = self._recalc.recalculate_all()
            return RecalcResult(
                row=None,
                col=None,
                display_text="",
                updates=tuple(updates),
                warnings=tuple(warnings),
            )

    def _replace(
        self, row: int, col: int, old: Cell, new: Cell, refs: frozenset[tuple[int, int]],
    ) -> None:
        # Cells that read this one keep reading it whatever it now holds.
        new.dependents = old.dependents
        new.precedents = old.precedents
        self._grid.set(row, col, new)
        self._graph.set_precedents(row, col, refs)

    def _publish(self, row: int, col: int, display_text: str) -> RecalcResult:
        self._display.notify(row, col, display_text)
        updates, warnings = self._recalc.on_cell_changed(row, col)
        return RecalcResult(
            row=row,
            col=col,
            display_text=display_text,
            updates=tuple(updates),
            warnings=tuple(warnings),
            max_chain_depth=self._graph.max_depth(row, col),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_display_text(self, row: int, col: int) -> str:
        """Editable text of a cell: the source for formulas, else the display."""
        with self._lock:
            return self._grid.get(row, col).edit_text()

    def get_computed_text(self, row: int, col: int) -> str:
        """What the display currently shows for ``(row, col)``."""
        with self._lock:
            return self._grid.get(row, col).display_text

    def cell(self, row: int, col: int) -> Cell:
        with self._lock:
            return self._grid.get(row, col)

    def dependents_of(self, row: int, col: int) -> set[tuple[int, int]]:
        with self._lock:
            return self._graph.dependents_of(row, col)

    # ------------------------------------------------------------------
    # A1-style access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Cell:
        """``sheet['A1']`` -> Cell."""
        return self.cell(*ref_to_rowcol(key))

    def __setitem__(self, key: str, value: str) -> None:
        """``sheet['A1'] = '42'``. An empty string clears the cell."""
        row, col = ref_to_rowcol(key)
        if value == "":
            self.clear_cell(row, col)
        else:
            self.set_cell_value(row, col, value)

    def __delitem__(self, key: str) -> None:
        self.clear_cell(*ref_to_rowcol(key))

    def __repr__(self) -> str:
        return f"<Spreadsheet {self._config.rows}x{self._config.cols}>"
