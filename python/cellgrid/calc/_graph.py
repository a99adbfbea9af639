"""Dependency graph over grid cells with topological ordering.

Edges live on the cells themselves: ``cell.dependents`` are the reverse edges
("who reads me") and ``cell.precedents`` the forward edges ("whom do I read").
This class is the policy that keeps the two in step.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from typing import TYPE_CHECKING

from cellgrid._utils import format_coord

if TYPE_CHECKING:
    from cellgrid._grid import Grid

logger = logging.getLogger(__name__)

Coord = tuple[int, int]


class DependencyGraph:
    """Tracks which formula cells read which cells."""

    __slots__ = ("_grid",)

    def __init__(self, grid: Grid) -> None:
        self._grid = grid

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_dependent(
        self, target_row: int, target_col: int, dependent_row: int, dependent_col: int,
    ) -> None:
        """Record that ``(dependent_row, dependent_col)`` reads the target cell.

        A no-op when the edge already exists.
        """
        target = (target_row, target_col)
        dependent = (dependent_row, dependent_col)
        self._grid.get(*target).dependents.add(dependent)
        self._grid.get(*dependent).precedents.add(target)

    def remove_dependent(
        self, target_row: int, target_col: int, dependent_row: int, dependent_col: int,
    ) -> None:
        target = (target_row, target_col)
        dependent = (dependent_row, dependent_col)
        self._grid.get(*target).dependents.discard(dependent)
        self._grid.get(*dependent).precedents.discard(target)

    def dependents_of(self, row: int, col: int) -> set[Coord]:
        return set(self._grid.get(row, col).dependents)

    def precedents_of(self, row: int, col: int) -> set[Coord]:
        return set(self._grid.get(row, col).precedents)

    def set_precedents(self, row: int, col: int, refs: Iterable[Coord]) -> None:
        """Make *refs* the exact set of cells ``(row, col)`` reads.

        Edges from cells no longer referenced are dropped, so an edited or
        cleared formula stops receiving updates from its old inputs.
        """
        new = set(refs)
        old = self.precedents_of(row, col)
        for target in sorted(old - new):
            self.remove_dependent(*target, row, col)
        for target in sorted(new - old):
            self.add_dependent(*target, row, col)
        if old != new:
            logger.debug(
                "%s now reads [%s]",
                format_coord((row, col)),
                ", ".join(format_coord(c) for c in sorted(new)),
            )

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def affected_cells(self, row: int, col: int) -> tuple[list[Coord], list[Coord]]:
        """Formula cells reachable from ``(row, col)`` through dependents.

        Uses BFS with a visited set, then Kahn's algorithm restricted to the
        affected cells. Returns ``(order, cyclic)``: ``order`` is the
        evaluation order (ties broken by coordinate), ``cyclic`` the cells
        that could not be ordered because they sit on a cycle.
        """
        root = (row, col)
        affected: set[Coord] = set()
        visited: set[Coord] = {root}
        queue: deque[Coord] = deque([root])

        while queue:
            cell = queue.popleft()
            for dep in sorted(self._grid.get(*cell).dependents):
                if dep not in visited:
                    visited.add(dep)
                    queue.append(dep)
                    if self._grid.get(*dep).is_formula:
                        affected.add(dep)

        order = self._topological(affected)
        cyclic = sorted(affected - set(order))
        return order, cyclic

    def topological_order(self) -> list[Coord]:
        """All formula cells in evaluation order.

        Raises ValueError if a circular reference is detected.
        """
        formula_cells = {(r, c) for r, c, cell in self._grid.iter_cells() if cell.is_formula}
        order = self._topological(formula_cells)
        if len(order) != len(formula_cells):
            missing = sorted(formula_cells - set(order))
            raise ValueError(
                "Circular reference detected involving: "
                + ", ".join(format_coord(c) for c in missing)
            )
        return order

    def _topological(self, cells: set[Coord]) -> list[Coord]:
        """Kahn's algorithm over *cells*, counting only edges inside *cells*."""
        in_degree: dict[Coord, int] = {
            cell: len(self._grid.get(*cell).precedents & cells) for cell in cells
        }
        ready = sorted(cell for cell, degree in in_degree.items() if degree == 0)
        queue: deque[Coord] = deque(ready)

        order: list[Coord] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in sorted(self._grid.get(*cell).dependents):
                if dep in in_degree:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)
        return order

    def max_depth(self, row: int, col: int) -> int:
        """Longest dependency chain from ``(row, col)`` through formula cells."""
        depth: dict[Coord, int] = {(row, col): 0}
        queue: deque[Coord] = deque([(row, col)])
        max_d = 0
        # Bounded by the cell count so a cycle cannot keep deepening forever.
        limit = self._grid.rows * self._grid.cols

        while queue:
            cell = queue.popleft()
            current_depth = depth[cell]
            for dep in self._grid.get(*cell).dependents:
                if not self._grid.get(*dep).is_formula:
                    continue
                new_depth = current_depth + 1
                if new_depth > limit:
                    continue
                if dep not in depth or new_depth > depth[dep]:
                    depth[dep] = new_depth
                    max_d = max(max_d, new_depth)
                    queue.append(dep)

        return max_d
