"""Entry point for the Tile Blast puzzle.

Sets up the ECS world, event bus, systems, and Arcade window.
"""
import logging

from arcade import Window, run, set_background_color, color, key

from tileblast.config import GameConfig
from tileblast.events.bus import (
    EventBus,
    EVENT_BOOSTER_BOMB_TOGGLE,
    EVENT_BOOSTER_TELEPORT_TOGGLE,
    EVENT_MOUSE_PRESS,
    EVENT_NO_MOVES_CONFIRMED,
    EVENT_RESTART_REQUEST,
    EVENT_TICK,
)
from tileblast.systems.animation import AnimationSystem
from tileblast.systems.input import InputSystem
from tileblast.systems.render import RenderSystem
from tileblast.systems.turn_system import TurnSystem
from tileblast.world import create_world

KEY_EVENTS = {
    key.T: EVENT_BOOSTER_TELEPORT_TOGGLE,
    key.B: EVENT_BOOSTER_BOMB_TOGGLE,
    key.ENTER: EVENT_NO_MOVES_CONFIRMED,
    key.R: EVENT_RESTART_REQUEST,
}


class TileBlastWindow(Window):
    def __init__(self, config: GameConfig | None = None):
        super().__init__(640, 720, "Tile Blast")
        self.set_update_rate(1/60)
        self.config = config or GameConfig()
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, self.config)
        rows, cols = self.config.rows, self.config.cols

        # View-side systems subscribe first so they see the opening board.
        self.render_system = RenderSystem(self.world, self.event_bus, self, rows, cols)
        self.animation_system = AnimationSystem(self.world, self.event_bus)
        self.input_system = InputSystem(self.event_bus, self, rows, cols)
        self.turn_system = TurnSystem(self.world, self.event_bus)

        set_background_color(color.BLACK)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        event = KEY_EVENTS.get(symbol)
        if event is not None:
            self.event_bus.emit(event)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    TileBlastWindow()
    run()

if __name__ == "__main__":
    main()
