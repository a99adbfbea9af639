"""Tests for cellgrid.calc FormulaEvaluator."""

from __future__ import annotations

import pytest

from cellgrid import (
    Cell,
    CellKind,
    CircularReferenceError,
    EmptyFormulaError,
    Grid,
    InvalidReferenceError,
)
from cellgrid._utils import rowcol_to_ref
from cellgrid.calc import _evaluator
from cellgrid.calc._evaluator import FormulaEvaluator
from cellgrid.calc._parser import Term


def _number(grid: Grid, row: int, col: int, value: float) -> None:
    grid.set(row, col, Cell(CellKind.NUMBER, str(value), f"{value:.1f}", value=value))


def _formula(grid: Grid, row: int, col: int, formula: str, shown: str = "") -> None:
    grid.set(row, col, Cell(CellKind.FORMULA, formula, shown, formula=formula))


def _text(grid: Grid, row: int, col: int, text: str) -> None:
    grid.set(row, col, Cell(CellKind.TEXT, text, text))


class TestEvaluate:
    def test_literals(self) -> None:
        ev = FormulaEvaluator(Grid())
        result = ev.evaluate("=2+3", 0, 0)
        assert result.value == 5.0
        assert result.references == frozenset()

    def test_number_reference(self) -> None:
        g = Grid()
        _number(g, 0, 0, 3.0)
        result = FormulaEvaluator(g).evaluate("=A1+5", 0, 1)
        assert result.value == 8.0
        assert result.references == {(0, 0)}

    def test_text_contributes_zero(self) -> None:
        g = Grid()
        _text(g, 0, 0, "hello")
        assert FormulaEvaluator(g).evaluate("=A1+1", 1, 0).value == 1.0

    def test_empty_cell_contributes_zero(self) -> None:
        assert FormulaEvaluator(Grid()).evaluate("=C3+1", 0, 0).value == 1.0

    def test_formula_reference_is_evaluated_recursively(self) -> None:
        g = Grid()
        _formula(g, 0, 0, "=2+3")
        result = FormulaEvaluator(g).evaluate("=A1+1", 0, 1)
        assert result.value == 6.0

    def test_stale_display_is_not_trusted(self) -> None:
        """A referenced formula is re-derived from source, not its shown text."""
        g = Grid()
        _number(g, 0, 0, 10.0)
        _formula(g, 0, 1, "=A1+1", shown="2.0")
        assert FormulaEvaluator(g).evaluate("=B1", 0, 2).value == 11.0

    def test_only_direct_references_reported(self) -> None:
        g = Grid()
        _number(g, 0, 0, 1.0)
        _formula(g, 0, 1, "=A1")
        result = FormulaEvaluator(g).evaluate("=B1+B1", 0, 2)
        assert result.value == 2.0
        assert result.references == {(0, 1)}

    def test_full_precision_kept(self) -> None:
        g = Grid()
        _number(g, 0, 0, 0.04)
        _number(g, 0, 1, 0.04)
        result = FormulaEvaluator(g).evaluate("=A1+B1", 0, 2)
        assert result.value == pytest.approx(0.08)


class TestEvaluateErrors:
    def test_empty_formula(self) -> None:
        with pytest.raises(EmptyFormulaError):
            FormulaEvaluator(Grid()).evaluate("=", 0, 0)

    def test_reference_off_grid(self) -> None:
        with pytest.raises(InvalidReferenceError):
            FormulaEvaluator(Grid()).evaluate("=Z1", 0, 0)

    def test_self_reference(self) -> None:
        with pytest.raises(CircularReferenceError) as exc:
            FormulaEvaluator(Grid()).evaluate("=A1+1", 0, 0)
        assert exc.value.path == [(0, 0), (0, 0)]

    def test_two_cell_cycle_through_stored_formula(self) -> None:
        """B1 reads A1, and A1's stored formula reads B1."""
        g = Grid()
        _formula(g, 0, 0, "=B1+1")
        with pytest.raises(CircularReferenceError, match="B1 -> A1 -> B1"):
            FormulaEvaluator(g).evaluate("=A1+1", 0, 1)

    def test_cycle_not_involving_evaluating_cell(self) -> None:
        g = Grid()
        _formula(g, 0, 0, "=B1")
        _formula(g, 0, 1, "=A1")
        with pytest.raises(CircularReferenceError) as exc:
            FormulaEvaluator(g).evaluate("=A1", 5, 5)
        assert exc.value.path == [(0, 0), (0, 1), (0, 0)]

    def test_diamond_is_not_a_cycle(self) -> None:
        g = Grid()
        _number(g, 0, 0, 1.0)
        _formula(g, 1, 0, "=A1")
        _formula(g, 1, 1, "=A1")
        assert FormulaEvaluator(g).evaluate("=A2+B2", 2, 0).value == 2.0

    def test_grid_is_unchanged_on_error(self) -> None:
        g = Grid()
        _number(g, 0, 0, 1.0)
        with pytest.raises(InvalidReferenceError):
            FormulaEvaluator(g).evaluate("=A1+Q1", 0, 1)
        assert g.get(0, 0).dependents == set()
        assert g.get(0, 1).is_empty


class TestLongChains:
    def test_chain_longer_than_recursion_limit(self) -> None:
        """A1=1, A2=A1+1, ..., A1500=A1499+1 in a single tall column."""
        n = 1500
        g = Grid(rows=n + 1, cols=1)
        _number(g, 0, 0, 1.0)
        for r in range(1, n):
            _formula(g, r, 0, f"=A{r}+1")
        result = FormulaEvaluator(g).evaluate(f"=A{n}", n, 0)
        assert result.value == float(n)
        assert result.references == {(n - 1, 0)}

    def test_long_cycle_is_circular_not_recursion(self) -> None:
        n = 1500
        g = Grid(rows=n, cols=1)
        for r in range(1, n):
            _formula(g, r, 0, f"=A{r}+1")
        with pytest.raises(CircularReferenceError) as exc:
            FormulaEvaluator(g).evaluate(f"=A{n}", 0, 0)
        assert len(exc.value.path) == n + 1
        assert exc.value.path[0] == exc.value.path[-1] == (0, 0)

    def test_shared_inputs_derived_once_per_call(
        self, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Doubling chain: each cell reads the previous one twice."""
        g = Grid()
        coords = [(i // 10, i % 10) for i in range(21)]
        _number(g, *coords[0], 1.0)
        for prev, cur in zip(coords, coords[1:]):
            ref = rowcol_to_ref(*prev)
            _formula(g, *cur, f"={ref}+{ref}")

        calls: list[str] = []
        real_parse = _evaluator.parse_formula

        def counting_parse(formula: str, rows: int, cols: int) -> list[Term]:
            calls.append(formula)
            return real_parse(formula, rows, cols)

        monkeypatch.setattr(_evaluator, "parse_formula", counting_parse)
        last = rowcol_to_ref(*coords[-1])
        result = FormulaEvaluator(g).evaluate(f"={last}", 9, 9)
        assert result.value == float(2 ** 20)
        # the new formula plus each of the 20 chain formulas, once
        assert len(calls) == 21

    def test_memo_does_not_outlive_the_call(self) -> None:
        g = Grid()
        _number(g, 0, 0, 1.0)
        _formula(g, 0, 1, "=A1+A1")
        ev = FormulaEvaluator(g)
        assert ev.evaluate("=B1", 0, 2).value == 2.0
        _number(g, 0, 0, 5.0)
        assert ev.evaluate("=B1", 0, 2).value == 10.0
