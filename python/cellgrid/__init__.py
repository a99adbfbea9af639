"""cellgrid — the computational core of a small grid spreadsheet.

Usage::

    from cellgrid import Spreadsheet

    sheet = Spreadsheet()
    sheet["A1"] = "3"
    sheet["B1"] = "=A1+5"
    print(sheet["B1"].display_text)     # 8.0
    print(sheet.get_display_text(0, 1)) # =A1+5
"""

from cellgrid._cell import Cell, CellKind
from cellgrid._config import GridConfig
from cellgrid._errors import (
    CellGridError,
    CircularReferenceError,
    EmptyFormulaError,
    FormulaError,
    InvalidReferenceError,
    OutOfBoundsError,
)
from cellgrid._grid import Grid
from cellgrid._spreadsheet import Spreadsheet
from cellgrid.calc import DisplayNotifier, NullDisplay, RecalcResult

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Cell",
    "CellGridError",
    "CellKind",
    "CircularReferenceError",
    "DisplayNotifier",
    "EmptyFormulaError",
    "FormulaError",
    "Grid",
    "GridConfig",
    "InvalidReferenceError",
    "NullDisplay",
    "OutOfBoundsError",
    "RecalcResult",
    "Spreadsheet",
]
