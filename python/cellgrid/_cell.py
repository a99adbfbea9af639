"""Cell: the state stored at one grid coordinate."""

from __future__ import annotations

from enum import Enum

Coord = tuple[int, int]


class CellKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    FORMULA = "formula"


class Cell:
    """One cell of the grid.

    ``display_text`` is what the display shows; ``value`` keeps the full
    precision float behind it for NUMBER and FORMULA cells. ``dependents``
    holds the cells whose formula reads this one, ``precedents`` the cells
    this cell's formula reads.
    """

    __slots__ = (
        "kind", "raw_text", "display_text", "formula", "value",
        "dependents", "precedents",
    )

    def __init__(
        self,
        kind: CellKind = CellKind.TEXT,
        raw_text: str = "",
        display_text: str = "",
        formula: str | None = None,
        value: float | None = None,
    ) -> None:
        self.kind = kind
        self.raw_text = raw_text
        self.display_text = display_text
        self.formula = formula
        self.value = value
        self.dependents: set[Coord] = set()
        self.precedents: set[Coord] = set()

    @property
    def is_formula(self) -> bool:
        return self.kind is CellKind.FORMULA

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.TEXT and self.raw_text == ""

    def edit_text(self) -> str:
        """Text shown when the cell is opened for editing.

        Formula cells give back their source, everything else its display text.
        """
        if self.kind is CellKind.FORMULA:
            return self.formula or ""
        return self.display_text

    def __repr__(self) -> str:
        return f"<Cell {self.kind.value} {self.raw_text!r} -> {self.display_text!r}>"
