"""Grid: fixed-size storage for every Cell."""

from __future__ import annotations

from collections.abc import Iterator

from cellgrid._cell import Cell
from cellgrid._config import GridConfig
from cellgrid._errors import OutOfBoundsError


class Grid:
    """Owns the R x C cells. Cell writes go through :meth:`set` and :meth:`update`."""

    __slots__ = ("_rows", "_cols", "_cells")

    def __init__(self, rows: int = 10, cols: int = 10) -> None:
        config = GridConfig(rows=rows, cols=cols)
        self._rows = config.rows
        self._cols = config.cols
        self._cells: list[list[Cell]] = [
            [Cell() for _ in range(self._cols)] for _ in range(self._rows)
        ]

    @classmethod
    def from_config(cls, config: GridConfig) -> Grid:
        return cls(rows=config.rows, cols=config.cols)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBoundsError(row, col, self.shape)

    def get(self, row: int, col: int) -> Cell:
        """Return the cell at zero-based ``(row, col)``."""
        self._check(row, col)
        return self._cells[row][col]

    def set(self, row: int, col: int, cell: Cell) -> None:
        """Replace the cell at ``(row, col)``."""
        self._check(row, col)
        if cell.display_text is None:
            raise ValueError("display_text must be a string, not None")
        self._cells[row][col] = cell

    def update(self, row: int, col: int, *, value: float | None, display_text: str) -> Cell:
        """Store a recomputed result on the existing cell."""
        cell = self.get(row, col)
        if display_text is None:
            raise ValueError("display_text must be a string, not None")
        cell.value = value
        cell.display_text = display_text
        return cell

    def iter_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield ``(row, col, cell)`` in row-major order."""
        for r, row in enumerate(self._cells):
            for c, cell in enumerate(row):
                yield r, c, cell

    def __repr__(self) -> str:
        return f"<Grid {self._rows}x{self._cols}>"
