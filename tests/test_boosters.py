import random

import pytest

from tileblast.components.tile import Cell, TileSpecial
from tileblast.config import GameConfig
from tileblast.constants import MEGA_BOMB_COLOR
from tileblast.events.bus import EventBus
from tileblast.systems.board_ops import count_non_empty_tiles, get_board
from tileblast.systems.boosters import (
    BombController,
    MegaBombController,
    TeleportController,
    TeleportResultKind,
)
from tileblast.world import create_world

from helpers import layout_of, load_layout


@pytest.fixture
def world():
    return create_world(EventBus(), GameConfig(rows=3, cols=3), rng=random.Random(5))


LAYOUT = [
    "RGB",
    "YPR",
    "GBY",
]


def test_get_board_without_board_raises(world):
    with pytest.raises(RuntimeError):
        get_board(world)


def test_teleport_inactive_ignores_clicks(world):
    load_layout(world, LAYOUT)
    teleport = TeleportController(world)
    assert teleport.handle_click((0, 0)) is None
    assert teleport.selected is None


def test_teleport_select_deselect(world):
    load_layout(world, LAYOUT)
    teleport = TeleportController(world)
    assert teleport.toggle() is True
    result = teleport.handle_click((1, 1))
    assert result.kind is TeleportResultKind.SELECT
    assert teleport.selected == (1, 1)
    result = teleport.handle_click((1, 1))
    assert result.kind is TeleportResultKind.DESELECT
    assert teleport.selected is None
    assert teleport.is_active()


def test_teleport_non_adjacent_reselects(world):
    load_layout(world, LAYOUT)
    teleport = TeleportController(world)
    teleport.toggle()
    teleport.handle_click((0, 0))
    # Diagonal is not adjacent.
    result = teleport.handle_click((1, 1))
    assert result.kind is TeleportResultKind.RESELECT
    assert result.source == (0, 0)
    assert teleport.selected == (1, 1)
    assert layout_of(get_board(world)) == LAYOUT


def test_teleport_adjacent_swaps_and_deactivates(world):
    load_layout(world, LAYOUT)
    teleport = TeleportController(world)
    teleport.toggle()
    teleport.handle_click((0, 0))
    result = teleport.handle_click((0, 1))
    assert result.kind is TeleportResultKind.SWAP
    assert (result.source, result.target) == ((0, 0), (0, 1))
    assert layout_of(get_board(world))[0] == "GRB"
    assert not teleport.is_active()
    assert teleport.selected is None


def test_teleport_toggle_off_clears_selection(world):
    load_layout(world, LAYOUT)
    teleport = TeleportController(world)
    teleport.toggle()
    teleport.handle_click((2, 2))
    assert teleport.toggle() is False
    assert teleport.selected is None


def test_bomb_returns_occupied_square_once(world):
    load_layout(world, ["R.B", "YPR", "GBY"])
    bomb = BombController(world)
    assert bomb.radius == 1
    assert bomb.handle_click((0, 0)) == []
    bomb.toggle()
    cells = bomb.handle_click((0, 0))
    assert sorted(cells) == [(0, 0), (1, 0), (1, 1)]
    assert not bomb.is_active()
    # Controller never touches the board itself.
    assert count_non_empty_tiles(get_board(world)) == 8


def test_bomb_radius_comes_from_config():
    world = create_world(EventBus(), GameConfig(rows=5, cols=5, bomb_radius=2))
    assert BombController(world).radius == 2


def test_mega_bomb_creation_requires_threshold(world):
    load_layout(world, ["RRR", "RGB", "YPG"])
    mega = MegaBombController(world, 5)
    assert not mega.create_from_group({(0, 0), (0, 1), (0, 2), (1, 0)}, (0, 0)).created
    assert layout_of(get_board(world)) == ["RRR", "RGB", "YPG"]


def test_mega_bomb_creation_keeps_center(world):
    load_layout(world, ["RRR", "RRB", "YPG"])
    mega = MegaBombController(world, 5)
    group = {(0, 0), (0, 1), (0, 2), (1, 0), (1, 1)}
    creation = mega.create_from_group(group, (1, 1))
    assert creation.created
    assert creation.center == (1, 1)
    assert sorted(creation.removed_cells) == [(0, 0), (0, 1), (0, 2), (1, 0)]
    board = get_board(world)
    assert board.get(1, 1).special is TileSpecial.MEGA_BOMB
    assert layout_of(board) == ["...", ".MB", "YPG"]
    assert mega.is_mega_bomb((1, 1))
    assert not mega.is_mega_bomb((1, 2))


def test_mega_bomb_center_outside_group_is_refused(world):
    load_layout(world, ["RRR", "RRB", "YPG"])
    mega = MegaBombController(world, 5)
    group = {(0, 0), (0, 1), (0, 2), (1, 0), (1, 1)}
    assert not mega.create_from_group(group, (2, 2)).created


def test_mega_bomb_explosion_clears_board(world):
    load_layout(world, ["R.B", "YMR", "G.Y"])
    mega = MegaBombController(world, 5)
    assert mega.explode((0, 0)) is None
    explosion = mega.explode((1, 1))
    assert explosion.total_tiles == 7
    assert len(explosion.removed_cells) == 7
    assert count_non_empty_tiles(get_board(world)) == 0


def test_mega_bomb_marker_and_flag_stay_in_sync():
    assert Cell(color=MEGA_BOMB_COLOR).special is TileSpecial.MEGA_BOMB
    flagged = Cell(color="red", special=TileSpecial.MEGA_BOMB)
    assert flagged.color == MEGA_BOMB_COLOR
    assert flagged.is_mega_bomb
    assert not Cell(color="red").is_mega_bomb


def test_mega_bomb_detected_from_special_flag(world):
    board = load_layout(world, LAYOUT)
    board.set(2, 2, Cell(color="green", special=TileSpecial.MEGA_BOMB))
    mega = MegaBombController(world, 5)
    assert mega.is_mega_bomb((2, 2))
    assert not mega.is_mega_bomb((0, 0))
    assert not mega.is_mega_bomb((7, 7))
