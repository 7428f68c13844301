"""
Game service: the single entry point for the presentation layer.

Holds the current immutable game state and the AI controller, routes public
operations (draw, discard, claim, pass) to the state machine, and converts
rule violations into ErrorEvents for the acting seat. A rejected action never
replaces the stored state.

AI seats do not act on their own here. pending_ai_step() describes what the
round is waiting for and execute_ai_step() performs it; the session layer
decides when, so pacing and cancellation stay outside the rules engine.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError

from hkmahjong.logic.ai_player import create_ai_player
from hkmahjong.logic.ai_player_controller import AIPlayerController
from hkmahjong.logic.call_resolution import resolve_ai_claims
from hkmahjong.logic.enums import AIStepType, ClaimKind, Difficulty, GameAction, GameErrorCode
from hkmahjong.logic.events import DiscardEvent, ErrorEvent, GameEvent, seat_target
from hkmahjong.logic.exceptions import GameRuleError, InvalidTransitionError
from hkmahjong.logic.game import init_game, start_next_round
from hkmahjong.logic.rng import create_ai_rng
from hkmahjong.logic.settings import GameSettings
from hkmahjong.logic.state import MahjongGameState, get_player_view
from hkmahjong.logic.turn import (
    get_claim_options,
    is_step_current,
    pending_ai_step,
    process_claim,
    process_discard,
    process_draw,
    process_pass,
)
from hkmahjong.logic.types import AIStep, ClaimActionData, DiscardActionData, GameView

logger = structlog.get_logger()

# (events, view for the human seat or a spectator)
Observer = Callable[[list[GameEvent], GameView], None]
Transition = Callable[[MahjongGameState], tuple[MahjongGameState, list[GameEvent]]]


class MahjongGameService:
    """
    Game service for a single table.

    Events returned by methods include a 'target' field:
    - "all": broadcast to every seat
    - "seat_0", "seat_1", etc.: only for the player at that seat
    """

    def __init__(self, settings: GameSettings | None = None) -> None:
        self._settings = settings or GameSettings()
        self._game_state: MahjongGameState | None = None
        self._ai_controller = AIPlayerController({})
        self._observers: list[Observer] = []

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def game_state(self) -> MahjongGameState | None:
        return self._game_state

    @property
    def ai_controller(self) -> AIPlayerController:
        return self._ai_controller

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, events: list[GameEvent]) -> None:
        if not self._observers or self._game_state is None:
            return
        view = self.get_view(self._game_state.settings.human_seat)
        for observer in list(self._observers):
            observer(events, view)

    def start_session(self, difficulty: Difficulty | None = None, seed: str | None = None) -> list[GameEvent]:
        """
        Start a new game: build the wall, deal, and create the AI seats.

        When seed is provided, walls and AI choices are reproducible.
        """
        game_state, events = init_game(self._settings, difficulty, seed)
        ai_players = {
            player.seat: create_ai_player(
                game_state.difficulty,
                player.seat,
                create_ai_rng(game_state.seed, player.seat),
            )
            for player in game_state.round_state.players
            if player.is_ai
        }
        self._ai_controller = AIPlayerController(ai_players)
        self._game_state = game_state
        logger.info(
            "session started",
            difficulty=game_state.difficulty,
            ai_seats=sorted(ai_players),
            seed=game_state.seed,
        )
        self._notify(events)
        return events

    def start_next_round(self) -> list[GameEvent]:
        """Deal the next round once the current one has ended."""
        return self._apply(None, start_next_round, on_success=self._ai_controller.reset_memory)

    def _apply(
        self,
        seat: int | None,
        transition: Transition,
        on_success: Callable[[], None] | None = None,
    ) -> list[GameEvent]:
        if self._game_state is None:
            return self._error(seat, GameErrorCode.GAME_ERROR, "no game in progress")
        try:
            new_state, events = transition(self._game_state)
        except GameRuleError as e:
            logger.warning("action rejected", seat=seat, code=e.code, reason=str(e))
            return self._error(seat, e.code, str(e))

        self._game_state = new_state
        if on_success is not None:
            on_success()
        discarded = new_state.round_state.last_discard
        if discarded is not None and any(isinstance(event, DiscardEvent) for event in events):
            self._ai_controller.observe_discard(discarded)
        self._notify(events)
        return events

    def _error(self, seat: int | None, code: GameErrorCode, message: str) -> list[GameEvent]:
        target = seat_target(seat) if seat is not None else "all"
        events: list[GameEvent] = [ErrorEvent(target=target, code=code, message=message)]
        self._notify(events)
        return events

    def _apply_human(self, seat: int, transition: Transition) -> list[GameEvent]:
        """Apply an externally issued action; only the human seat may issue one."""

        def guarded(state: MahjongGameState) -> tuple[MahjongGameState, list[GameEvent]]:
            if seat != state.settings.human_seat:
                raise InvalidTransitionError(f"seat {seat} is not controlled by a human player")
            return transition(state)

        return self._apply(seat, guarded)

    def draw(self, seat: int) -> list[GameEvent]:
        return self._apply_human(seat, lambda state: process_draw(state, seat))

    def discard(self, seat: int, tile_id: int) -> list[GameEvent]:
        return self._apply_human(seat, lambda state: process_discard(state, seat, tile_id))

    def claim(self, seat: int, kind: ClaimKind, chow_choice: tuple[int, int] | None = None) -> list[GameEvent]:
        return self._apply_human(seat, lambda state: process_claim(state, seat, kind, chow_choice))

    def pass_claim(self, seat: int) -> list[GameEvent]:
        return self._apply_human(seat, lambda state: process_pass(state, seat))

    def handle_action(self, seat: int, action: GameAction | str, data: dict[str, Any] | None = None) -> list[GameEvent]:
        """
        Dispatch a raw action from the presentation layer.

        Payloads are validated with pydantic; malformed data and unknown
        actions come back as ErrorEvents for the seat.
        """
        try:
            action = GameAction(action)
        except ValueError:
            logger.warning("unknown action", seat=seat, action=action)
            return self._error(seat, GameErrorCode.UNKNOWN_ACTION, f"unknown action: {action}")

        data = data or {}
        try:
            if action == GameAction.DISCARD:
                discard_data = DiscardActionData.model_validate(data)
                return self.discard(seat, discard_data.tile_id)
            if action == GameAction.CLAIM:
                claim_data = ClaimActionData.model_validate(data)
                return self.claim(seat, claim_data.kind, claim_data.chow_choice)
        except ValidationError as e:
            logger.warning("invalid action data", seat=seat, action=action, error=str(e))
            return self._error(seat, GameErrorCode.VALIDATION_ERROR, f"invalid action data: {e}")

        if action == GameAction.DRAW:
            return self.draw(seat)
        return self.pass_claim(seat)

    def pending_ai_step(self) -> AIStep | None:
        if self._game_state is None:
            return None
        return pending_ai_step(self._game_state)

    def execute_ai_step(self, step: AIStep) -> list[GameEvent]:
        """
        Perform a scheduled AI step.

        A step that no longer matches the live state (the turn, phase or
        action count moved on since it was scheduled) is ignored.
        """
        if self._game_state is None or not is_step_current(self._game_state, step):
            logger.debug("stale ai step ignored", step_type=step.step_type, seat=step.seat)
            return []

        if step.step_type == AIStepType.DRAW:
            return self._apply(step.seat, lambda state: process_draw(state, step.seat))
        if step.step_type == AIStepType.DISCARD:
            tile_id = self._ai_controller.get_discard(step.seat, self._game_state.round_state)
            if tile_id is None:
                return self._error(step.seat, GameErrorCode.GAME_ERROR, f"ai seat {step.seat} has no tile to discard")
            return self._apply(step.seat, lambda state: process_discard(state, step.seat, tile_id))
        return self._apply(step.seat, lambda state: resolve_ai_claims(state, self._ai_controller))

    def get_view(self, seat: int | None) -> GameView:
        """Visible state for a seat, with the claims it can make right now."""
        if self._game_state is None:
            raise InvalidTransitionError("no game in progress")
        view = get_player_view(self._game_state, seat)
        if seat is None:
            return view
        options = get_claim_options(self._game_state.round_state, seat)
        if not options:
            return view
        return view.model_copy(update={"available_claims": options})

