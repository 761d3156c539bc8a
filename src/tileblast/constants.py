GRID_ROWS = 9
GRID_COLS = 9

# Regular tile colors used for random generation.
TILE_COLORS = ("green", "blue", "purple", "red", "yellow")
# Logical color of a mega bomb tile; never spawned by fills.
MEGA_BOMB_COLOR = "mega_bomb"

MIN_GROUP_SIZE = 2
SCORE_PER_TILE = 10
START_MOVES = 20
TARGET_SCORE = 500

RESHUFFLE_LIMIT = 3
START_TELEPORTS = 5
START_BOMBS = 3
BOMB_RADIUS = 1
MEGA_BOMB_MIN_GROUP_SIZE = 5

# View layer
BOTTOM_MARGIN = 20
HUD_HEIGHT = 60
BOARD_MAX_WIDTH_PCT = 0.90
BOARD_MAX_HEIGHT_PCT = 0.85

REMOVE_DURATION = 0.2
SETTLE_DURATION = 0.25
EFFECT_DURATION = 0.3

TILE_RGB = {
    "green": (63, 160, 80),
    "blue": (70, 110, 200),
    "purple": (140, 80, 180),
    "red": (200, 60, 60),
    "yellow": (220, 190, 70),
    MEGA_BOMB_COLOR: (30, 30, 30),
}
