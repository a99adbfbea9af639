"""Exception types raised by the grid and the formula engine."""

from __future__ import annotations

from cellgrid._utils import format_coord


class CellGridError(Exception):
    """Base class for every error raised by cellgrid."""


class OutOfBoundsError(CellGridError, IndexError):
    """A coordinate lies outside the configured grid."""

    def __init__(self, row: int, col: int, shape: tuple[int, int]) -> None:
        self.row = row
        self.col = col
        self.shape = shape
        super().__init__(
            f"Cell ({row}, {col}) is outside the {shape[0]}x{shape[1]} grid"
        )


class FormulaError(CellGridError, ValueError):
    """A formula could not be parsed or evaluated."""


class InvalidReferenceError(FormulaError):
    """A formula term is neither a number nor a cell reference inside the grid."""

    def __init__(self, term: str, reason: str = "malformed reference") -> None:
        self.term = term
        super().__init__(f"Invalid reference {term!r}: {reason}")


class EmptyFormulaError(FormulaError):
    """A formula has no terms after the leading ``=``."""

    def __init__(self, formula: str) -> None:
        self.formula = formula
        super().__init__(f"Formula {formula!r} has no terms")


class CircularReferenceError(FormulaError):
    """Evaluation reached a cell that is already on the evaluation stack.

    ``path`` lists the cells from the start of the cycle back to the
    repeated cell, e.g. ``[(0, 0), (0, 1), (0, 0)]``.
    """

    def __init__(self, path: list[tuple[int, int]]) -> None:
        self.path = list(path)
        chain = " -> ".join(format_coord(c) for c in self.path)
        super().__init__(f"Circular reference: {chain}")
