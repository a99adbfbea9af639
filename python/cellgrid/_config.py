"""Grid configuration."""

from __future__ import annotations

from dataclasses import dataclass

MAX_COLS = 26  # one column letter, A-Z


@dataclass(frozen=True)
class GridConfig:
    """Fixed grid dimensions. The default matches a 10 x 10 sheet."""

    rows: int = 10
    cols: int = 10

    def __post_init__(self) -> None:
        if self.rows < 1:
            raise ValueError(f"rows must be >= 1, got {self.rows}")
        if not 1 <= self.cols <= MAX_COLS:
            raise ValueError(f"cols must be between 1 and {MAX_COLS}, got {self.cols}")
