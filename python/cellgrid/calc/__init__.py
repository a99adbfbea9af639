"""cellgrid.calc - Formula evaluation and change propagation for cellgrid grids."""

from cellgrid.calc._evaluator import Evaluation, FormulaEvaluator
from cellgrid.calc._graph import DependencyGraph
from cellgrid.calc._parser import (
    NumberTerm,
    ReferenceTerm,
    format_value,
    is_number,
    parse_formula,
    parse_reference,
    parse_references,
)
from cellgrid.calc._protocol import (
    CellUpdate,
    DisplayNotifier,
    NullDisplay,
    RecalcResult,
    RecalcWarning,
)
from cellgrid.calc._recalc import RecalcPropagator

__all__ = [
    "CellUpdate",
    "DependencyGraph",
    "DisplayNotifier",
    "Evaluation",
    "FormulaEvaluator",
    "NullDisplay",
    "NumberTerm",
    "RecalcPropagator",
    "RecalcResult",
    "RecalcWarning",
    "ReferenceTerm",
    "format_value",
    "is_number",
    "parse_formula",
    "parse_reference",
    "parse_references",
]
