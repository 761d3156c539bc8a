from __future__ import annotations

import logging
from typing import Iterable, List

from esper import World

from tileblast.components.board import Board
from tileblast.components.game_state import GameState, PendingAnimation, TurnPhase
from tileblast.components.tile import TilePos
from tileblast.components.turn_state import GameOverReason, TurnState
from tileblast.config import GameConfig
from tileblast.events.bus import (
    EventBus,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_EFFECT,
    EVENT_BOARD_RESET,
    EVENT_BOMBS_CHANGED,
    EVENT_BOOSTER_BOMB_TOGGLE,
    EVENT_BOOSTER_MODE_CHANGED,
    EVENT_BOOSTER_TELEPORT_TOGGLE,
    EVENT_GAME_LOST,
    EVENT_GAME_WON,
    EVENT_MEGA_BOMB_CREATED,
    EVENT_NO_MOVES,
    EVENT_NO_MOVES_CONFIRMED,
    EVENT_RESTART_REQUEST,
    EVENT_SCORE_CHANGED,
    EVENT_TELEPORTS_CHANGED,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILES_SWAPPED,
)
from tileblast.systems.board_ops import (
    apply_gravity,
    find_group,
    get_board,
    has_any_moves,
    new_board,
    refill_empty_cells,
    remove_group,
)
from tileblast.systems.boosters import (
    BombController,
    MegaBombController,
    TeleportClickResult,
    TeleportController,
    TeleportResultKind,
)
from tileblast.systems.state_utils import get_game_state, get_state_entity, get_turn_state

logger = logging.getLogger(__name__)

ANIMATION_REMOVE = "remove"
ANIMATION_SETTLE = "settle"


class TurnSystem:
    """Interprets player input and resolves each turn.

    Flow:
      - A tile click goes to the teleport booster, the bomb booster, an existing
        mega bomb or normal group removal; the first that applies wins.
      - Any board change enters ANIMATING and asks the view layer to animate the
        removal, then gravity + refill. Each request carries a token and the
        pipeline resumes only on an EVENT_ANIMATION_COMPLETE echoing it.
      - After the last acknowledgement the move check and win/lose evaluation
        run and the phase returns to IDLE, or GAME_OVER.
    """

    def __init__(self, world: World, event_bus: EventBus, *, start: bool = True) -> None:
        self.world = world
        self.event_bus = event_bus
        self.config: GameConfig = world.config
        self.teleport = TeleportController(world)
        self.bomb = BombController(world)
        self.mega_bomb = MegaBombController(world, self.config.mega_bomb_min_group_size)
        event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        event_bus.subscribe(EVENT_BOOSTER_TELEPORT_TOGGLE, self.on_teleport_toggle)
        event_bus.subscribe(EVENT_BOOSTER_BOMB_TOGGLE, self.on_bomb_toggle)
        event_bus.subscribe(EVENT_NO_MOVES_CONFIRMED, self.on_no_moves_confirmed)
        event_bus.subscribe(EVENT_RESTART_REQUEST, self.on_restart_request)
        event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        if start:
            self.start_new_game()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_new_game(self) -> None:
        """Replace board, counters and phase wholesale and announce the new game."""
        config = self.config
        state_entity = get_state_entity(self.world)
        previous = get_game_state(self.world)
        board = new_board(config.rows, config.cols, config.colors, self.world.random)
        self.world.add_component(self.world.board_entity, board)
        self.world.add_component(state_entity, TurnState.from_config(config))
        # Tokens keep counting so acknowledgements from the old game stay stale.
        self.world.add_component(state_entity, GameState(next_token=previous.next_token))
        self.teleport.reset()
        self.bomb.reset()
        turn = self._turn_state()
        logger.info(
            "New game: %dx%d, moves=%d, target=%d",
            board.rows,
            board.cols,
            turn.moves_left,
            turn.target_score,
        )
        self.event_bus.emit(EVENT_BOARD_RESET, grid=board.snapshot(), reason="new_game")
        self._emit_score()
        self.event_bus.emit(EVENT_BOMBS_CHANGED, count=turn.bombs_left)
        self.event_bus.emit(EVENT_TELEPORTS_CHANGED, count=turn.teleports_left)
        self._emit_booster_modes()
        self._ensure_has_moves()
        self._check_game_over()

    def is_interactive(self) -> bool:
        turn = get_turn_state(self.world)
        if turn is None or turn.game_over:
            return False
        if not self.world.has_component(self.world.board_entity, Board):
            return False
        return get_game_state(self.world).phase == TurnPhase.IDLE

    # ------------------------------------------------------------------
    # Inbound events
    # ------------------------------------------------------------------

    def on_tile_click(self, sender, **payload) -> None:
        row = payload.get("row")
        col = payload.get("col")
        if row is None or col is None:
            return
        if not self.is_interactive():
            return
        pos = (row, col)
        if not get_board(self.world).in_bounds(row, col):
            return
        if self.teleport.is_active():
            self._handle_teleport_result(self.teleport.handle_click(pos))
            return
        if self.bomb.is_active():
            self._handle_bomb_click(pos)
            return
        if self.mega_bomb.is_mega_bomb(pos):
            self._handle_mega_bomb_click(pos)
            return
        self._handle_normal_click(pos)

    def on_teleport_toggle(self, sender, **payload) -> None:
        if not self.is_interactive():
            return
        if not self._turn_state().can_use_teleport():
            logger.debug("Teleport toggle ignored: no teleports left")
            return
        # Teleport and bomb modes are mutually exclusive.
        self.bomb.reset()
        self._clear_selection()
        self.teleport.toggle()
        self._emit_booster_modes()

    def on_bomb_toggle(self, sender, **payload) -> None:
        if not self.is_interactive():
            return
        if not self._turn_state().can_use_bomb():
            logger.debug("Bomb toggle ignored: no bombs left")
            return
        self._clear_selection()
        self.teleport.reset()
        self.bomb.toggle()
        self._emit_booster_modes()

    def on_no_moves_confirmed(self, sender, **payload) -> None:
        if not self.is_interactive():
            return
        state = get_game_state(self.world)
        if not state.awaiting_reshuffle:
            logger.debug("No-moves confirmation ignored: no reshuffle pending")
            return
        state.awaiting_reshuffle = False
        turn = self._turn_state()
        if not turn.use_reshuffle():
            turn.force_lose()
            self._check_game_over()
            return
        self._reshuffle_board()
        self._ensure_has_moves()
        self._check_game_over()

    def on_restart_request(self, sender, **payload) -> None:
        self.start_new_game()

    def on_animation_complete(self, sender, **payload) -> None:
        state = get_game_state(self.world)
        pending = state.pending
        if pending is None or payload.get("kind") != pending.kind or payload.get("token") != pending.token:
            logger.debug("Ignoring stale acknowledgement %s", payload)
            return
        state.pending = None
        if pending.kind == ANIMATION_REMOVE:
            self._settle(update_bombs=pending.update_bombs)
        else:
            self._finish_turn(update_bombs=pending.update_bombs)

    # ------------------------------------------------------------------
    # Click handling
    # ------------------------------------------------------------------

    def _handle_normal_click(self, pos: TilePos) -> None:
        board = get_board(self.world)
        turn = self._turn_state()
        group = find_group(board, pos)
        size = len(group)
        if not group or not turn.can_remove_group(size):
            return
        self._clear_selection()
        gained = turn.apply_group(size)
        logger.debug("Group at %s size=%d gained=%d score=%d", pos, size, gained, turn.score)
        if self.mega_bomb.can_create_from_size(size):
            creation = self.mega_bomb.create_from_group(group, pos)
            if creation.created:
                self.event_bus.emit(EVENT_MEGA_BOMB_CREATED, row=pos[0], col=pos[1])
                self._end_turn(creation.removed_cells)
                return
        removed = sorted(group)
        remove_group(board, removed)
        self._end_turn(removed)

    def _handle_bomb_click(self, pos: TilePos) -> None:
        cells = self.bomb.handle_click(pos)
        self._emit_booster_modes()
        if not cells:
            logger.debug("Bomb click at %s: no cells to remove", pos)
            return
        turn = self._turn_state()
        if not turn.use_bomb():
            logger.debug("Bomb click at %s, but no bombs left", pos)
            return
        gained = turn.apply_bomb(len(cells))
        logger.debug("Bomb at %s removed=%d gained=%d bombs_left=%d", pos, len(cells), gained, turn.bombs_left)
        self._play_explosion(pos, self.bomb.radius)
        remove_group(get_board(self.world), cells)
        self._end_turn(cells, update_bombs=True)

    def _handle_mega_bomb_click(self, pos: TilePos) -> None:
        explosion = self.mega_bomb.explode(pos)
        if explosion is None:
            return
        self._clear_selection()
        self.teleport.reset()
        self.bomb.reset()
        self._emit_booster_modes()
        turn = self._turn_state()
        gained = turn.apply_bomb(explosion.total_tiles)
        logger.debug("Mega bomb at %s tiles=%d gained=%d", pos, explosion.total_tiles, gained)
        self._play_explosion(pos, max(self.config.rows, self.config.cols))
        self._end_turn(explosion.removed_cells)

    def _handle_teleport_result(self, result: TeleportClickResult | None) -> None:
        if result is None:
            return
        kind = result.kind
        if kind is TeleportResultKind.SELECT:
            self._emit_selected(result.target)
        elif kind is TeleportResultKind.DESELECT:
            self._emit_deselected(result.target, reason="teleport_deselect")
        elif kind is TeleportResultKind.RESELECT:
            self._emit_deselected(result.source, reason="teleport_reselect")
            self._emit_selected(result.target)
        elif kind is TeleportResultKind.SWAP:
            self._emit_deselected(result.source, reason="teleport_swap")
            turn = self._turn_state()
            # The swap already happened on the board; a missing charge is only reported.
            if not turn.use_teleport():
                logger.debug("Teleport swap performed, but no teleports left in state")
            self.event_bus.emit(EVENT_TELEPORTS_CHANGED, count=turn.teleports_left)
            self.event_bus.emit(EVENT_TILES_SWAPPED, src=result.source, dst=result.target)
            self._emit_booster_modes()
            self._end_turn([])

    # ------------------------------------------------------------------
    # End-of-turn pipeline
    # ------------------------------------------------------------------

    def _end_turn(self, removed: Iterable[TilePos], *, update_bombs: bool = False) -> None:
        get_game_state(self.world).phase = TurnPhase.ANIMATING
        removed_cells: List[TilePos] = sorted(removed)
        if removed_cells:
            self._request_animation(ANIMATION_REMOVE, update_bombs, items=removed_cells)
            return
        self._settle(update_bombs=update_bombs)

    def _settle(self, *, update_bombs: bool) -> None:
        board = get_board(self.world)
        moves = apply_gravity(board)
        refills = refill_empty_cells(board, self.config.colors, self.world.random)
        self._request_animation(
            ANIMATION_SETTLE,
            update_bombs,
            moves=[move.as_payload() for move in moves],
            refills=[refill.as_payload() for refill in refills],
            grid=board.snapshot(),
        )

    def _request_animation(self, kind: str, update_bombs: bool, **payload) -> None:
        # The ticket is stored before emitting so a view that acknowledges
        # synchronously resumes the pipeline correctly.
        state = get_game_state(self.world)
        token = state.next_token
        state.next_token += 1
        state.pending = PendingAnimation(kind=kind, token=token, update_bombs=update_bombs)
        self.event_bus.emit(EVENT_ANIMATION_START, kind=kind, token=token, **payload)

    def _finish_turn(self, *, update_bombs: bool) -> None:
        self._clear_selection()
        turn = self._turn_state()
        self._emit_score()
        if update_bombs:
            self.event_bus.emit(EVENT_BOMBS_CHANGED, count=turn.bombs_left)
        get_game_state(self.world).phase = TurnPhase.IDLE
        self._ensure_has_moves()
        self._check_game_over()

    def _ensure_has_moves(self) -> None:
        turn = self._turn_state()
        state = get_game_state(self.world)
        # Each pass either finds a move or spends a reshuffle, so this terminates.
        while not turn.game_over:
            if has_any_moves(get_board(self.world), self.config.min_group_size):
                state.awaiting_reshuffle = False
                return
            if not turn.can_use_reshuffle():
                logger.info("No moves and no reshuffles left")
                turn.force_lose()
                return
            if not self.config.auto_reshuffle:
                state.awaiting_reshuffle = True
                self.event_bus.emit(EVENT_NO_MOVES, reshuffles_left=turn.reshuffles_left)
                return
            turn.use_reshuffle()
            self._reshuffle_board()

    def _reshuffle_board(self) -> None:
        config = self.config
        board = new_board(config.rows, config.cols, config.colors, self.world.random)
        self.world.add_component(self.world.board_entity, board)
        self._clear_selection()
        self.teleport.reset()
        self.bomb.reset()
        logger.info("Board reshuffled, reshuffles_left=%d", self._turn_state().reshuffles_left)
        self.event_bus.emit(EVENT_BOARD_RESET, grid=board.snapshot(), reason="reshuffle")
        self._emit_booster_modes()

    def _check_game_over(self) -> None:
        turn = self._turn_state()
        if not turn.game_over:
            return
        state = get_game_state(self.world)
        state.phase = TurnPhase.GAME_OVER
        if state.outcome_announced:
            return
        state.outcome_announced = True
        if turn.game_over_reason is GameOverReason.WIN:
            logger.info("Game over: win, score=%d", turn.score)
            self.event_bus.emit(EVENT_GAME_WON, score=turn.score)
        else:
            logger.info("Game over: lose, score=%d", turn.score)
            self.event_bus.emit(EVENT_GAME_LOST, score=turn.score)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _turn_state(self) -> TurnState:
        turn = get_turn_state(self.world)
        if turn is None:
            raise RuntimeError("TurnState not found; start a game first")
        return turn

    def _clear_selection(self) -> None:
        selected = self.teleport.selected
        if selected is None:
            return
        self.teleport.reset_selection()
        self._emit_deselected(selected, reason="cleared")

    def _play_explosion(self, center: TilePos, radius: int) -> None:
        self.event_bus.emit(EVENT_BOARD_EFFECT, effect="shake", center=center, radius=radius)
        self.event_bus.emit(EVENT_BOARD_EFFECT, effect="flash", center=center, radius=radius)

    def _emit_selected(self, pos: TilePos) -> None:
        self.event_bus.emit(EVENT_TILE_SELECTED, row=pos[0], col=pos[1])

    def _emit_deselected(self, pos: TilePos, *, reason: str) -> None:
        self.event_bus.emit(EVENT_TILE_DESELECTED, row=pos[0], col=pos[1], reason=reason)

    def _emit_score(self) -> None:
        turn = self._turn_state()
        self.event_bus.emit(
            EVENT_SCORE_CHANGED,
            score=turn.score,
            moves_left=turn.moves_left,
            target_score=turn.target_score,
        )

    def _emit_booster_modes(self) -> None:
        self.event_bus.emit(
            EVENT_BOOSTER_MODE_CHANGED,
            teleport_active=self.teleport.is_active(),
            bomb_active=self.bomb.is_active(),
        )
