from __future__ import annotations

import random
from typing import Iterable, Sequence

from esper import World

from tileblast.components.board import Board
from tileblast.components.tile import Cell, TileSpecial
from tileblast.config import GameConfig
from tileblast.constants import MEGA_BOMB_COLOR
from tileblast.events.bus import EventBus, EVENT_ANIMATION_COMPLETE, EVENT_ANIMATION_START
from tileblast.systems.turn_system import TurnSystem
from tileblast.world import create_world

LETTERS = {
    "G": "green",
    "B": "blue",
    "P": "purple",
    "R": "red",
    "Y": "yellow",
    "M": MEGA_BOMB_COLOR,
}
COLOR_LETTERS = {color: letter for letter, color in LETTERS.items()}


def board_from_layout(layout: Sequence[str]) -> Board:
    """Build a Board from rows of letters; '.' marks an empty cell."""
    rows = len(layout)
    cols = len(layout[0])
    board = Board(rows=rows, cols=cols)
    for row, line in enumerate(layout):
        assert len(line) == cols, "Layout rows must have equal length"
        for col, ch in enumerate(line):
            if ch == ".":
                continue
            if ch == "M":
                board.set(row, col, Cell(color=MEGA_BOMB_COLOR, special=TileSpecial.MEGA_BOMB))
            else:
                board.set(row, col, Cell(color=LETTERS[ch]))
    return board


def layout_of(board: Board) -> list[str]:
    lines = []
    for row in range(board.rows):
        line = ""
        for col in range(board.cols):
            color = board.color_at(row, col)
            line += "." if color is None else COLOR_LETTERS[color]
        lines.append(line)
    return lines


def load_layout(world: World, layout: Sequence[str]) -> Board:
    board = board_from_layout(layout)
    world.add_component(world.board_entity, board)
    return board


def pairless_layout(rows: int = 9, cols: int = 9) -> list[str]:
    """Layout without any equal neighbours and without red tiles."""
    letters = "GBPY"
    return ["".join(letters[(r + 2 * c) % 4] for c in range(cols)) for r in range(rows)]


def with_cells(layout: Sequence[str], cells: Iterable[tuple[int, int]], letter: str) -> list[str]:
    grid = [list(line) for line in layout]
    for row, col in cells:
        grid[row][col] = letter
    return ["".join(line) for line in grid]


class ScriptedRandom(random.Random):
    """Random whose ``choice`` follows a letter script before falling back to chance."""

    def __init__(self, script: str = "", seed: int = 0):
        super().__init__(seed)
        self.script = [LETTERS[ch] for ch in script if not ch.isspace()]
        self.index = 0

    def choice(self, seq):
        if self.index < len(self.script):
            value = self.script[self.index]
            self.index += 1
            if value in seq:
                return value
        return super().choice(seq)


class EventRecorder:
    def __init__(self, bus: EventBus, names: Iterable[str]):
        self.events: list[tuple[str, dict]] = []
        for name in names:
            bus.subscribe(name, self._make_handler(name))

    def _make_handler(self, name: str):
        def handler(sender, **payload):
            self.events.append((name, payload))
        return handler

    def of(self, name: str) -> list[dict]:
        return [payload for event, payload in self.events if event == name]

    def clear(self) -> None:
        self.events.clear()


class AnimationAcker:
    """Stands in for the view layer's animation playback.

    With ``auto=True`` every request is acknowledged synchronously inside the
    emit call; otherwise requests queue until ``ack_next``/``ack_all``.
    """

    def __init__(self, bus: EventBus, *, auto: bool = False):
        self.bus = bus
        self.auto = auto
        self.started: list[dict] = []
        self.pending: list[dict] = []
        bus.subscribe(EVENT_ANIMATION_START, self.on_start)

    def on_start(self, sender, **payload):
        self.started.append(payload)
        if self.auto:
            self.bus.emit(EVENT_ANIMATION_COMPLETE, kind=payload["kind"], token=payload["token"])
        else:
            self.pending.append(payload)

    def ack_next(self) -> dict:
        payload = self.pending.pop(0)
        self.bus.emit(EVENT_ANIMATION_COMPLETE, kind=payload["kind"], token=payload["token"])
        return payload

    def ack_all(self, limit: int = 20) -> None:
        while self.pending and limit > 0:
            self.ack_next()
            limit -= 1

    def of_kind(self, kind: str) -> list[dict]:
        return [payload for payload in self.started if payload["kind"] == kind]


def start_game(
    config: GameConfig | None = None,
    *,
    rng: random.Random | None = None,
    auto_ack: bool = False,
    record: Iterable[str] = (),
):
    """Create bus, world and a started TurnSystem wired to an animation acker."""
    bus = EventBus()
    world = create_world(bus, config or GameConfig(), rng=rng or random.Random(1234))
    acker = AnimationAcker(bus, auto=auto_ack)
    recorder = EventRecorder(bus, record)
    system = TurnSystem(world, bus)
    return bus, world, system, acker, recorder
