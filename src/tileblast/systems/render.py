from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from esper import World

from tileblast.components.animation import TimedAnimation
from tileblast.components.tile import Cell, TilePos, TileSpecial
from tileblast.constants import MEGA_BOMB_COLOR, TILE_RGB
from tileblast.events.bus import (
    EventBus,
    EVENT_ANIMATION_START,
    EVENT_BOARD_RESET,
    EVENT_BOMBS_CHANGED,
    EVENT_BOOSTER_MODE_CHANGED,
    EVENT_GAME_LOST,
    EVENT_GAME_WON,
    EVENT_MEGA_BOMB_CREATED,
    EVENT_NO_MOVES,
    EVENT_NO_MOVES_CONFIRMED,
    EVENT_RESTART_REQUEST,
    EVENT_SCORE_CHANGED,
    EVENT_TELEPORTS_CHANGED,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILES_SWAPPED,
)
from tileblast.ui.layout import compute_board_geometry

PADDING = 3
SHAKE_AMPLITUDE = 6.0


class RenderSystem:
    """View-side mirror of the board plus HUD values, drawn with arcade.

    Keeps its own mutable copy of the latest snapshot; the core's board is
    never touched from here.
    """

    def __init__(self, world: World, event_bus: EventBus, window, rows: int, cols: int) -> None:
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.rows = rows
        self.cols = cols
        self.grid: List[List[Optional[Cell]]] = [[None] * cols for _ in range(rows)]
        self.fading: set[TilePos] = set()
        # target -> source for tiles currently falling.
        self.falling: Dict[TilePos, TilePos] = {}
        self.spawning: set[TilePos] = set()
        self.selected: Optional[TilePos] = None
        self.hud: Dict[str, int] = {"score": 0, "moves_left": 0, "target_score": 0, "bombs": 0, "teleports": 0}
        self.teleport_active = False
        self.bomb_active = False
        self.banner: Optional[str] = None
        event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_TILE_SELECTED, self.on_tile_selected)
        event_bus.subscribe(EVENT_TILE_DESELECTED, self.on_tile_deselected)
        event_bus.subscribe(EVENT_TILES_SWAPPED, self.on_tiles_swapped)
        event_bus.subscribe(EVENT_MEGA_BOMB_CREATED, self.on_mega_bomb_created)
        event_bus.subscribe(EVENT_SCORE_CHANGED, self.on_score_changed)
        event_bus.subscribe(EVENT_BOMBS_CHANGED, self.on_bombs_changed)
        event_bus.subscribe(EVENT_TELEPORTS_CHANGED, self.on_teleports_changed)
        event_bus.subscribe(EVENT_BOOSTER_MODE_CHANGED, self.on_booster_mode_changed)
        event_bus.subscribe(EVENT_NO_MOVES, self.on_no_moves)
        event_bus.subscribe(EVENT_NO_MOVES_CONFIRMED, self.on_banner_dismissed)
        event_bus.subscribe(EVENT_RESTART_REQUEST, self.on_banner_dismissed)
        event_bus.subscribe(EVENT_GAME_WON, self.on_game_won)
        event_bus.subscribe(EVENT_GAME_LOST, self.on_game_lost)

    # Board events

    def _load_snapshot(self, grid) -> None:
        self.grid = [list(row) for row in grid]

    def on_board_reset(self, sender, **payload) -> None:
        grid = payload.get("grid")
        if grid is None:
            return
        self._load_snapshot(grid)
        self.fading.clear()
        self.falling.clear()
        self.spawning.clear()
        self.selected = None

    def on_animation_start(self, sender, **payload) -> None:
        kind = payload.get("kind")
        if kind == "remove":
            self.fading = set(payload.get("items", []))
        elif kind == "settle":
            self.fading.clear()
            grid = payload.get("grid")
            if grid is not None:
                self._load_snapshot(grid)
            self.falling = {tuple(m["to"]): tuple(m["from"]) for m in payload.get("moves", [])}
            self.spawning = {tuple(r["pos"]) for r in payload.get("refills", [])}

    def on_tile_selected(self, sender, **payload) -> None:
        self.selected = (payload.get("row"), payload.get("col"))

    def on_tile_deselected(self, sender, **payload) -> None:
        if self.selected == (payload.get("row"), payload.get("col")):
            self.selected = None

    def on_tiles_swapped(self, sender, **payload) -> None:
        src = payload.get("src")
        dst = payload.get("dst")
        if not src or not dst:
            return
        (r1, c1), (r2, c2) = src, dst
        self.grid[r1][c1], self.grid[r2][c2] = self.grid[r2][c2], self.grid[r1][c1]

    def on_mega_bomb_created(self, sender, **payload) -> None:
        row = payload.get("row")
        col = payload.get("col")
        if row is None or col is None:
            return
        self.grid[row][col] = Cell(color=MEGA_BOMB_COLOR, special=TileSpecial.MEGA_BOMB)

    # HUD events

    def on_score_changed(self, sender, **payload) -> None:
        for key in ("score", "moves_left", "target_score"):
            if key in payload:
                self.hud[key] = payload[key]

    def on_bombs_changed(self, sender, **payload) -> None:
        self.hud["bombs"] = payload.get("count", 0)

    def on_teleports_changed(self, sender, **payload) -> None:
        self.hud["teleports"] = payload.get("count", 0)

    def on_booster_mode_changed(self, sender, **payload) -> None:
        self.teleport_active = bool(payload.get("teleport_active"))
        self.bomb_active = bool(payload.get("bomb_active"))

    def on_no_moves(self, sender, **payload) -> None:
        self.banner = f"No moves! Reshuffles left: {payload.get('reshuffles_left', 0)} (Enter)"

    def on_banner_dismissed(self, sender, **payload) -> None:
        self.banner = None

    def on_game_won(self, sender, **payload) -> None:
        self.banner = "VICTORY! (R to restart)"

    def on_game_lost(self, sender, **payload) -> None:
        self.banner = "DEFEAT (R to restart)"

    # Drawing

    def _progress(self, kind: str) -> float:
        for _, anim in self.world.get_component(TimedAnimation):
            if anim.kind == kind:
                return anim.progress
        return 1.0

    def _shake_offset(self) -> Tuple[float, float]:
        for _, anim in self.world.get_component(TimedAnimation):
            if anim.kind == "effect:shake":
                strength = SHAKE_AMPLITUDE * (1.0 - anim.progress)
                sign = 1 if int(anim.elapsed * 60) % 2 == 0 else -1
                return sign * strength, -sign * strength / 2
        return 0.0, 0.0

    def process(self) -> None:
        # Local import keeps tests headless without creating a window.
        import arcade

        tile_size, start_x, start_y = compute_board_geometry(self.window.width, self.window.height, self.rows, self.cols)
        dx, dy = self._shake_offset()
        fade_alpha = 1.0 - self._progress("remove")
        settle = self._progress("settle")

        def cell_origin(row: float, col: float) -> Tuple[float, float]:
            return start_x + col * tile_size + dx, start_y + (self.rows - 1 - row) * tile_size + dy

        for row in range(self.rows):
            for col in range(self.cols):
                cell = self.grid[row][col]
                if cell is None:
                    continue
                draw_row: float = row
                alpha = 255
                if (row, col) in self.fading:
                    alpha = int(255 * fade_alpha)
                elif (row, col) in self.falling:
                    src_row = self.falling[(row, col)][0]
                    draw_row = src_row + (row - src_row) * settle
                elif (row, col) in self.spawning:
                    draw_row = row - (1.0 - settle) * self.rows
                    if draw_row < 0 and settle < 1.0:
                        alpha = int(255 * settle)
                left, bottom = cell_origin(draw_row, col)
                rgb = TILE_RGB.get(cell.color, (128, 128, 128))
                arcade.draw_lrbt_rectangle_filled(
                    left + PADDING,
                    left + tile_size - PADDING,
                    bottom + PADDING,
                    bottom + tile_size - PADDING,
                    (*rgb, alpha),
                )
                if cell.is_mega_bomb:
                    arcade.draw_circle_filled(left + tile_size / 2, bottom + tile_size / 2, tile_size / 3, (240, 120, 20, alpha))
        if self.selected is not None:
            left, bottom = cell_origin(*self.selected)
            arcade.draw_lrbt_rectangle_outline(left, left + tile_size, bottom, bottom + tile_size, arcade.color.WHITE, 3)
        for _, anim in self.world.get_component(TimedAnimation):
            if anim.kind != "effect:flash":
                continue
            center = anim.payload.get("center")
            radius = anim.payload.get("radius", 1)
            if center is None:
                continue
            left, bottom = cell_origin(*center)
            arcade.draw_circle_filled(
                left + tile_size / 2,
                bottom + tile_size / 2,
                tile_size * (radius + 0.5),
                (255, 240, 200, int(160 * (1.0 - anim.progress))),
            )
        self._draw_hud(arcade, start_y + self.rows * tile_size)

    def _draw_hud(self, arcade, board_top: float) -> None:
        hud = self.hud
        modes = []
        if self.teleport_active:
            modes.append("TELEPORT")
        if self.bomb_active:
            modes.append("BOMB")
        text = (
            f"Score {hud['score']}/{hud['target_score']}   Moves {hud['moves_left']}   "
            f"[T]eleports {hud['teleports']}   [B]ombs {hud['bombs']}   {' '.join(modes)}"
        )
        arcade.draw_text(text, 20, board_top + 20, arcade.color.WHITE, 14)
        if self.banner:
            arcade.draw_text(self.banner, 20, self.window.height - 30, arcade.color.YELLOW, 18)
