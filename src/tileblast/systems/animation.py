from __future__ import annotations

from esper import World

from tileblast.components.animation import TimedAnimation
from tileblast.constants import EFFECT_DURATION, REMOVE_DURATION, SETTLE_DURATION
from tileblast.events.bus import (
    EventBus,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_EFFECT,
    EVENT_BOARD_RESET,
    EVENT_TICK,
)


class AnimationSystem:
    """Plays back render requests over time and acknowledges them.

    Each EVENT_ANIMATION_START becomes a TimedAnimation entity advanced by
    EVENT_TICK; when it finishes the matching EVENT_ANIMATION_COMPLETE is
    emitted with the original kind and token. Board effects are timed the same
    way but nobody waits on them.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        remove_duration: float = REMOVE_DURATION,
        settle_duration: float = SETTLE_DURATION,
        effect_duration: float = EFFECT_DURATION,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.durations = {
            "remove": remove_duration,
            "settle": settle_duration,
        }
        self.effect_duration = effect_duration
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_BOARD_EFFECT, self.on_board_effect)
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)

    def on_animation_start(self, sender, **payload) -> None:
        kind = payload.pop("kind", None)
        token = payload.pop("token", None)
        if kind is None:
            return
        self.world.create_entity(
            TimedAnimation(
                kind=kind,
                duration=self.durations.get(kind, 0.0),
                token=token,
                payload=payload,
            )
        )

    def on_board_effect(self, sender, **payload) -> None:
        effect = payload.get("effect")
        if effect is None:
            return
        self.world.create_entity(
            TimedAnimation(kind=f"effect:{effect}", duration=self.effect_duration, payload=payload)
        )

    def on_board_reset(self, sender, **payload) -> None:
        # A new game drops whatever the previous one was still playing.
        if payload.get("reason") != "new_game":
            return
        for ent, _ in list(self.world.get_component(TimedAnimation)):
            self.world.delete_entity(ent, immediate=True)

    def on_tick(self, sender, **payload) -> None:
        dt = payload.get("dt", 1 / 60)
        finished: list[tuple[int, TimedAnimation]] = []
        for ent, anim in list(self.world.get_component(TimedAnimation)):
            anim.elapsed += dt
            if anim.elapsed >= anim.duration:
                finished.append((ent, anim))
        for ent, _ in finished:
            self.world.delete_entity(ent, immediate=True)
        # Emit after cleanup: acknowledgements may start the next animation.
        for _, anim in finished:
            if anim.token is not None:
                self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=anim.kind, token=anim.token)

    def active(self, kind: str | None = None) -> list[TimedAnimation]:
        return [
            anim
            for _, anim in self.world.get_component(TimedAnimation)
            if kind is None or anim.kind == kind
        ]
