"""DisplayNotifier protocol and recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CellUpdate:
    """A cell whose displayed text was (re)computed."""

    row: int
    col: int
    old_text: str
    new_text: str
    formula: str | None = None  # the formula that produced new_text

    @property
    def changed(self) -> bool:
        return self.old_text != self.new_text


@dataclass(frozen=True)
class RecalcWarning:
    """A cascade branch that was skipped; the cell kept its previous value."""

    row: int
    col: int
    message: str


@dataclass(frozen=True)
class RecalcResult:
    """Outcome of one edit: the edited cell plus its propagation pass.

    ``row``/``col`` are None for a whole-grid recalculation.
    """

    row: int | None
    col: int | None
    display_text: str
    updates: tuple[CellUpdate, ...] = ()  # dependents recomputed, in order
    warnings: tuple[RecalcWarning, ...] = ()
    max_chain_depth: int = 0  # longest dependents chain from the edited cell

    @property
    def recomputed_cells(self) -> int:
        return len(self.updates)

    @property
    def propagated_cells(self) -> int:
        """Dependents whose displayed text actually changed."""
        return sum(1 for u in self.updates if u.changed)

    @property
    def ok(self) -> bool:
        return not self.warnings


@runtime_checkable
class DisplayNotifier(Protocol):
    """External collaborator told what each cell now displays."""

    def notify(self, row: int, col: int, text: str) -> None:
        """Cell ``(row, col)`` now displays *text*."""
        ...


class NullDisplay:
    """DisplayNotifier that discards every notification."""

    def notify(self, row: int, col: int, text: str) -> None:
        return None
