from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT (view layer -> core)
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_BOOSTER_TELEPORT_TOGGLE = "booster_teleport_toggle"  # payload: None
EVENT_BOOSTER_BOMB_TOGGLE = "booster_bomb_toggle"          # payload: None
EVENT_NO_MOVES_CONFIRMED = "no_moves_confirmed"    # payload: None
EVENT_RESTART_REQUEST = "restart_request"          # payload: None


# ============================================================================
# BOARD RENDERING (core -> view layer)
# ============================================================================
EVENT_BOARD_RESET = "board_reset"                  # payload: grid=snapshot, reason=str
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: row, col, reason=str
EVENT_TILES_SWAPPED = "tiles_swapped"              # payload: src=(r,c), dst=(r,c)
EVENT_MEGA_BOMB_CREATED = "mega_bomb_created"      # payload: row, col
EVENT_BOARD_EFFECT = "board_effect"                # payload: effect=str, center=(r,c), radius=int


# ============================================================================
# ANIMATION (awaited render requests and their acknowledgement)
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind='remove', items=[(r,c)], token | kind='settle', moves, refills, grid, token
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, token=int


# ============================================================================
# HUD & BOOSTERS
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score, moves_left, target_score
EVENT_BOMBS_CHANGED = "bombs_changed"              # payload: count=int
EVENT_TELEPORTS_CHANGED = "teleports_changed"      # payload: count=int
EVENT_BOOSTER_MODE_CHANGED = "booster_mode_changed"  # payload: teleport_active=bool, bomb_active=bool


# ============================================================================
# GAME FLOW
# ============================================================================
EVENT_NO_MOVES = "no_moves"                        # payload: reshuffles_left=int
EVENT_GAME_WON = "game_won"                        # payload: score=int
EVENT_GAME_LOST = "game_lost"                      # payload: score=int
