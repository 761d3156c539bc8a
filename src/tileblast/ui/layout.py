from tileblast.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    HUD_HEIGHT,
)


def compute_board_geometry(window_width: int, window_height: int, rows: int, cols: int):
    """Return (tile_size, start_x, start_y) for a board centred horizontally.

    Shared by rendering and input mapping so clicks land on the drawn tiles.
    Row 0 is drawn at the top of the board.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN - HUD_HEIGHT) * BOARD_MAX_HEIGHT_PCT
    tile_size = int(min(max_board_w / cols, max_board_h / rows))
    if tile_size < 16:
        tile_size = 16
    start_x = (window_width - cols * tile_size) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def tile_at_point(x: float, y: float, window_width: int, window_height: int, rows: int, cols: int):
    """Map window coordinates to (row, col), or None outside the board."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, rows, cols)
    if x < start_x or x >= start_x + cols * tile_size:
        return None
    if y < start_y or y >= start_y + rows * tile_size:
        return None
    col = int((x - start_x) // tile_size)
    row = rows - 1 - int((y - start_y) // tile_size)
    return row, col


def tile_center(row: int, col: int, window_width: int, window_height: int, rows: int, cols: int):
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, rows, cols)
    x = start_x + (col + 0.5) * tile_size
    y = start_y + (rows - 1 - row + 0.5) * tile_size
    return x, y
