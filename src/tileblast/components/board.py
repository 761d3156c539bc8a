from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from tileblast.components.tile import Cell, TilePos

Snapshot = Tuple[Tuple[Optional[Cell], ...], ...]


@dataclass(slots=True)
class Board:
    """Fixed rows x cols grid stored row-major; None marks an empty cell.

    Dimensions never change after construction. Collaborators outside the core
    only ever see ``snapshot()`` copies.
    """
    rows: int
    cols: int
    cells: List[Optional[Cell]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [None] * (self.rows * self.cols)
        elif len(self.cells) != self.rows * self.cols:
            raise ValueError(f"Expected {self.rows * self.cols} cells, got {len(self.cells)}")

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> Optional[Cell]:
        if not self.in_bounds(row, col):
            return None
        return self.cells[row * self.cols + col]

    def set(self, row: int, col: int, cell: Optional[Cell]) -> None:
        if not self.in_bounds(row, col):
            return
        self.cells[row * self.cols + col] = cell

    def color_at(self, row: int, col: int) -> Optional[str]:
        cell = self.get(row, col)
        return cell.color if cell is not None else None

    def positions(self) -> Iterator[TilePos]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def snapshot(self) -> Snapshot:
        return tuple(
            tuple(self.cells[row * self.cols:(row + 1) * self.cols])
            for row in range(self.rows)
        )
