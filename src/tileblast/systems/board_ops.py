"""Grid algorithms over a ``Board``: grouping, gravity, refill, swap, clear.

These functions know nothing about score, boosters or turns. Coordinates
outside the board are ignored rather than raising.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Set

from esper import World

from tileblast.components.board import Board
from tileblast.components.tile import Cell, TilePos


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: TilePos
    target: TilePos
    color: str

    def as_payload(self) -> Dict[str, object]:
        return {"from": self.source, "to": self.target, "color": self.color}


@dataclass(frozen=True, slots=True)
class RefillInfo:
    pos: TilePos
    color: str

    def as_payload(self) -> Dict[str, object]:
        return {"pos": self.pos, "color": self.color}


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def new_board(rows: int, cols: int, colors: Sequence[str], rng: random.Random) -> Board:
    board = Board(rows=rows, cols=cols)
    random_fill(board, colors, rng)
    return board


def random_fill(board: Board, colors: Sequence[str], rng: random.Random) -> None:
    """Give every cell an independent uniform color and clear special flags."""
    board.cells = [Cell(color=rng.choice(colors)) for _ in range(board.rows * board.cols)]


def find_group(board: Board, pos: TilePos) -> Set[TilePos]:
    """Return the 4-connected same-color region containing ``pos``.

    Uses an explicit stack so large boards cannot exhaust recursion depth.
    """
    row, col = pos
    start_color = board.color_at(row, col)
    if start_color is None:
        return set()
    group: Set[TilePos] = set()
    stack: List[TilePos] = [(row, col)]
    while stack:
        r, c = stack.pop()
        if (r, c) in group:
            continue
        if board.color_at(r, c) != start_color:
            continue
        group.add((r, c))
        stack.append((r - 1, c))
        stack.append((r + 1, c))
        stack.append((r, c - 1))
        stack.append((r, c + 1))
    return group


def remove_group(board: Board, cells: Iterable[TilePos]) -> None:
    for row, col in cells:
        board.set(row, col, None)


def apply_gravity(board: Board) -> List[GravityMove]:
    """Compact every column downward, preserving the order of survivors.

    Row 0 is the top of the board. Only tiles that actually moved are reported;
    the board already holds the final layout when the list is returned.
    """
    moves: List[GravityMove] = []
    for col in range(board.cols):
        write_row = board.rows - 1
        for row in range(board.rows - 1, -1, -1):
            cell = board.get(row, col)
            if cell is None:
                continue
            if row != write_row:
                board.set(write_row, col, cell)
                board.set(row, col, None)
                moves.append(GravityMove(source=(row, col), target=(write_row, col), color=cell.color))
            write_row -= 1
        for row in range(write_row, -1, -1):
            board.set(row, col, None)
    return moves


def refill_empty_cells(board: Board, colors: Sequence[str], rng: random.Random) -> List[RefillInfo]:
    spawned: List[RefillInfo] = []
    for row, col in board.positions():
        if board.get(row, col) is not None:
            continue
        color = rng.choice(colors)
        board.set(row, col, Cell(color=color))
        spawned.append(RefillInfo(pos=(row, col), color=color))
    return spawned


def has_any_moves(board: Board, min_group_size: int) -> bool:
    """Return True if a removable group exists.

    Only looks for an equal-colored right or down neighbour, so for
    ``min_group_size > 2`` a pair is accepted as a witness even though the
    group might be too small to remove.
    """
    if min_group_size <= 1:
        return True
    for row, col in board.positions():
        color = board.color_at(row, col)
        if color is None:
            continue
        if board.color_at(row + 1, col) == color:
            return True
        if board.color_at(row, col + 1) == color:
            return True
    return False


def swap_tiles(board: Board, a: TilePos, b: TilePos) -> bool:
    """Exchange the full contents of two cells. Adjacency is the caller's concern."""
    if not board.in_bounds(*a) or not board.in_bounds(*b):
        return False
    cell_a = board.get(*a)
    board.set(a[0], a[1], board.get(*b))
    board.set(b[0], b[1], cell_a)
    return True


def clear_all_tiles(board: Board) -> List[TilePos]:
    removed = [pos for pos in board.positions() if board.get(*pos) is not None]
    remove_group(board, removed)
    return removed


def count_non_empty_tiles(board: Board) -> int:
    return sum(1 for cell in board.cells if cell is not None)


def occupied_in_square(board: Board, center: TilePos, radius: int) -> List[TilePos]:
    """Occupied cells within Chebyshev distance ``radius`` of ``center``."""
    row0, col0 = center
    cells: List[TilePos] = []
    for row in range(row0 - radius, row0 + radius + 1):
        for col in range(col0 - radius, col0 + radius + 1):
            if board.get(row, col) is None:
                continue
            cells.append((row, col))
    return cells
