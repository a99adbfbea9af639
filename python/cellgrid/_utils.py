"""Cell reference helpers: ``"B3"`` <-> zero-based ``(row, col)``."""

from __future__ import annotations

import re

# One column letter, then the 1-based row
CELL_REF_RE = re.compile(r"([A-Z])(\d+)", re.IGNORECASE)


def ref_to_rowcol(ref: str) -> tuple[int, int]:
    """Convert ``"B3"`` to ``(2, 1)``.

    Only the syntax is checked here; bounds are the grid's concern.
    Raises ValueError on anything that is not one letter plus digits.
    """
    m = CELL_REF_RE.fullmatch(ref.strip())
    if not m:
        raise ValueError(f"Invalid cell reference: {ref!r}")
    col = ord(m.group(1).upper()) - ord("A")
    row = int(m.group(2)) - 1
    return row, col


def rowcol_to_ref(row: int, col: int) -> str:
    """Convert zero-based ``(2, 1)`` to ``"B3"``."""
    if not 0 <= col < 26 or row < 0:
        raise ValueError(f"No A1 form for ({row}, {col})")
    return f"{chr(ord('A') + col)}{row + 1}"


def format_coord(coord: tuple[int, int]) -> str:
    """Best-effort label for logs and error messages."""
    try:
        return rowcol_to_ref(*coord)
    except ValueError:
        return f"({coord[0]}, {coord[1]})"
