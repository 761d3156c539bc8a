from esper import World

from tileblast.events.bus import (
    EventBus,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_EFFECT,
    EVENT_BOARD_RESET,
    EVENT_TICK,
)
from tileblast.systems.animation import AnimationSystem


def drive(bus, ticks, dt=0.05):
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


def make_system():
    bus = EventBus()
    world = World()
    system = AnimationSystem(world, bus, remove_duration=0.1, settle_duration=0.2, effect_duration=0.1)
    done = []
    bus.subscribe(EVENT_ANIMATION_COMPLETE, lambda sender, **kw: done.append(kw))
    return bus, system, done


def test_animation_completes_with_matching_token():
    bus, system, done = make_system()
    bus.emit(EVENT_ANIMATION_START, kind="remove", token=7, items=[(0, 0)])
    assert len(system.active("remove")) == 1
    drive(bus, 1)
    assert done == []
    assert 0.0 < system.active("remove")[0].progress < 1.0
    drive(bus, 2)
    assert done == [{"kind": "remove", "token": 7}]
    assert system.active() == []


def test_effects_expire_without_acknowledgement():
    bus, system, done = make_system()
    bus.emit(EVENT_BOARD_EFFECT, effect="shake", center=(1, 1), radius=1)
    assert [anim.kind for anim in system.active()] == ["effect:shake"]
    drive(bus, 3)
    assert system.active() == []
    assert done == []


def test_unknown_kind_finishes_on_next_tick():
    bus, system, done = make_system()
    bus.emit(EVENT_ANIMATION_START, kind="sparkle", token=3)
    drive(bus, 1)
    assert done == [{"kind": "sparkle", "token": 3}]


def test_new_game_drops_animations_from_previous_game():
    bus, system, done = make_system()
    bus.emit(EVENT_ANIMATION_START, kind="remove", token=4, items=[(0, 0)])
    bus.emit(EVENT_BOARD_EFFECT, effect="flash", center=(0, 0), radius=1)
    drive(bus, 1)

    bus.emit(EVENT_BOARD_RESET, grid=(), reason="new_game")

    assert system.active() == []
    drive(bus, 5)
    assert done == []


def test_reshuffle_keeps_running_effects():
    bus, system, done = make_system()
    bus.emit(EVENT_BOARD_EFFECT, effect="shake", center=(0, 0), radius=1)
    bus.emit(EVENT_BOARD_RESET, grid=(), reason="reshuffle")
    assert [anim.kind for anim in system.active()] == ["effect:shake"]
