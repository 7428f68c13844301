"""
Game initialization and round progression.
"""

from __future__ import annotations

import structlog

from hkmahjong.logic.enums import TERMINAL_PHASES, Difficulty
from hkmahjong.logic.events import GameEvent, RoundStartedEvent, TurnEvent
from hkmahjong.logic.exceptions import InvalidTransitionError
from hkmahjong.logic.rng import generate_seed, validate_seed_hex
from hkmahjong.logic.round import deal
from hkmahjong.logic.settings import GameSettings, validate_settings
from hkmahjong.logic.state import MahjongGameState, MahjongRoundState
from hkmahjong.logic.wall import create_wall, tiles_remaining

logger = structlog.get_logger()


def _deal_round(
    seed: str,
    round_number: int,
    settings: GameSettings,
) -> tuple[MahjongRoundState, list[GameEvent]]:
    wall = create_wall(seed, round_number)
    round_state, deal_events = deal(wall, settings)
    remaining = tiles_remaining(round_state.wall)
    events: list[GameEvent] = [
        RoundStartedEvent(
            round_number=round_number,
            dealer_seat=round_state.current_seat,
            wall_remaining=remaining,
        ),
        *deal_events,
        TurnEvent(current_seat=round_state.current_seat, phase=round_state.phase, wall_remaining=remaining),
    ]
    return round_state, events


def init_game(
    settings: GameSettings | None = None,
    difficulty: Difficulty | None = None,
    seed: str | None = None,
) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Create a game and deal its first round.

    A fresh seed is generated when none is given; the seed is kept in the
    state so every later round derives its wall from it.
    """
    settings = settings or GameSettings()
    validate_settings(settings)
    if seed is None:
        seed = generate_seed()
    else:
        validate_seed_hex(seed)

    round_state, events = _deal_round(seed, 0, settings)
    game_state = MahjongGameState(
        round_state=round_state,
        round_number=0,
        scores=(0,) * settings.num_players,
        difficulty=difficulty or settings.default_difficulty,
        seed=seed,
        settings=settings,
    )
    logger.info("game started", difficulty=game_state.difficulty, human_seat=settings.human_seat)
    return game_state, events


def start_next_round(game_state: MahjongGameState) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Deal the next round, keeping cumulative scores.

    Raises InvalidTransitionError while the current round is still in play.
    """
    if game_state.round_state.phase not in TERMINAL_PHASES:
        raise InvalidTransitionError("the current round has not ended")
    round_number = game_state.round_number + 1
    round_state, events = _deal_round(game_state.seed, round_number, game_state.settings)
    # action_count stays monotonic across rounds
    round_state = round_state.model_copy(update={"action_count": game_state.round_state.action_count + 1})
    logger.info("round started", round_number=round_number, scores=list(game_state.scores))
    return game_state.model_copy(update={"round_state": round_state, "round_number": round_number}), events
