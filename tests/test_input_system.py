from tileblast.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_TILE_CLICK
from tileblast.systems.input import InputSystem
from tileblast.ui.layout import compute_board_geometry, tile_at_point, tile_center


class DummyWindow:
    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height


def test_mouse_press_translates_to_tile_click():
    bus = EventBus()
    window = DummyWindow()
    InputSystem(bus, window, 9, 9)
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe(EVENT_TILE_CLICK, handler)
    tile_size, start_x, start_y = compute_board_geometry(window.width, window.height, 9, 9)
    # Bottom-left tile on screen is the last row.
    x = start_x + tile_size / 2
    y = start_y + tile_size / 2
    bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=1)
    assert received == {"row": 8, "col": 0}


def test_clicks_outside_board_or_other_buttons_ignored():
    bus = EventBus()
    window = DummyWindow()
    InputSystem(bus, window, 9, 9)
    clicks = []
    bus.subscribe(EVENT_TILE_CLICK, lambda sender, **kw: clicks.append(kw))
    x, y = tile_center(4, 4, window.width, window.height, 9, 9)
    bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=4)
    bus.emit(EVENT_MOUSE_PRESS, x=1, y=1, button=1)
    bus.emit(EVENT_MOUSE_PRESS, x=x, button=1)
    assert clicks == []


def test_tile_center_round_trips_through_hit_test():
    for row, col in [(0, 0), (0, 8), (4, 5), (8, 8)]:
        x, y = tile_center(row, col, 800, 600, 9, 9)
        assert tile_at_point(x, y, 800, 600, 9, 9) == (row, col)
