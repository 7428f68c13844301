"""
Turn and claim state machine for Hong Kong Mahjong.

Phases run draw -> discard -> claim -> (draw | win | draw_game). Every
function takes the current MahjongGameState and returns (new_state, events);
invalid actions raise a GameRuleError before anything is built, so a
rejected action never produces a partial state. Each accepted transition
bumps the round's action_count.
"""

from __future__ import annotations

import structlog

from hkmahjong.logic.enums import TERMINAL_PHASES, AIStepType, ClaimKind, MeldType, RoundPhase, RoundResultType
from hkmahjong.logic.events import (
    ClaimPromptEvent,
    DiscardEvent,
    DrawEvent,
    GameEvent,
    MeldEvent,
    RoundEndEvent,
    TurnEvent,
    seat_target,
)
from hkmahjong.logic.exceptions import (
    IllegalClaimError,
    InvalidTransitionError,
    NotAWinningHandError,
    WallExhaustedError,
)
from hkmahjong.logic.hand import HandDecomposition, check_win, expected_hand_size
from hkmahjong.logic.melds import Meld, is_chow, unique_chow_options
from hkmahjong.logic.round import discard_tile, draw_for_seat
from hkmahjong.logic.scoring import calculate_points
from hkmahjong.logic.state import MahjongGameState, MahjongRoundState
from hkmahjong.logic.state_utils import (
    add_tile_to_player,
    bump_action_count,
    clear_last_discard,
    next_seat,
    pop_last_discard,
    update_game_with_round,
    update_player,
)
from hkmahjong.logic.tiles import Tile, is_same_kind, playing_tiles
from hkmahjong.logic.types import AIStep, ClaimOption, DrawGameResult, WinResult
from hkmahjong.logic.wall import is_wall_exhausted, tiles_remaining

logger = structlog.get_logger()

PONG_MATCHES = 2
KONG_MATCHES = 3


def _commit(game_state: MahjongGameState, round_state: MahjongRoundState) -> MahjongGameState:
    return update_game_with_round(game_state, bump_action_count(round_state))


def _turn_event(round_state: MahjongRoundState) -> TurnEvent:
    return TurnEvent(
        current_seat=round_state.current_seat,
        phase=round_state.phase,
        wall_remaining=tiles_remaining(round_state.wall),
    )


def _require_phase(round_state: MahjongRoundState, phase: RoundPhase, action: str) -> None:
    if round_state.phase != phase:
        raise InvalidTransitionError(f"cannot {action} during {round_state.phase.value} phase")


def _require_seat(round_state: MahjongRoundState, seat: int) -> None:
    if not 0 <= seat < len(round_state.players):
        raise InvalidTransitionError(f"invalid seat {seat}, expected 0-{len(round_state.players) - 1}")


def _require_turn(round_state: MahjongRoundState, seat: int, action: str) -> None:
    _require_seat(round_state, seat)
    if round_state.current_seat != seat:
        raise InvalidTransitionError(f"seat {seat} cannot {action}: it is seat {round_state.current_seat}'s turn")


def _require_open_discard(round_state: MahjongRoundState, seat: int) -> Tile:
    """Validate that seat may act on the last discard and return it."""
    _require_seat(round_state, seat)
    _require_phase(round_state, RoundPhase.CLAIM, "claim")
    tile = round_state.last_discard
    if tile is None or round_state.last_discard_seat is None:
        raise InvalidTransitionError("no discard to claim")
    if seat == round_state.last_discard_seat:
        raise InvalidTransitionError(f"seat {seat} cannot claim its own discard")
    if round_state.awaiting_claim_seat is not None and seat != round_state.awaiting_claim_seat:
        raise InvalidTransitionError(f"seat {round_state.awaiting_claim_seat} has the first right to claim")
    if not round_state.players[seat].is_ai and round_state.awaiting_claim_seat != seat:
        raise InvalidTransitionError(f"seat {seat} has no pending claim on the last discard")
    return tile


def matching_tiles(hand: tuple[Tile, ...] | list[Tile], tile: Tile) -> list[Tile]:
    return [t for t in playing_tiles(hand) if is_same_kind(t, tile)]


def get_claim_options(round_state: MahjongRoundState, seat: int) -> list[ClaimOption]:
    """
    Claims the seat could make right now, in priority order.

    During the acting seat's discard phase this is only a self-draw win;
    during the claim phase it covers every claim on the last discard.
    """
    player = round_state.players[seat]
    if round_state.phase == RoundPhase.DISCARD:
        if seat == round_state.current_seat and check_win(list(player.tiles), list(player.melds)):
            return [ClaimOption(kind=ClaimKind.WIN)]
        return []

    tile = round_state.last_discard
    discarder = round_state.last_discard_seat
    if round_state.phase != RoundPhase.CLAIM or tile is None or discarder is None or seat == discarder:
        return []

    options: list[ClaimOption] = []
    if check_win([*player.tiles, tile], list(player.melds)):
        options.append(ClaimOption(kind=ClaimKind.WIN))
    matches = len(matching_tiles(player.tiles, tile))
    if matches >= KONG_MATCHES:
        options.append(ClaimOption(kind=ClaimKind.KONG))
    if matches >= PONG_MATCHES:
        options.append(ClaimOption(kind=ClaimKind.PONG))
    if seat == next_seat(discarder, len(round_state.players)):
        chows = unique_chow_options(playing_tiles(player.tiles), tile)
        if chows:
            choices = [tuple(t.id for t in chow if t.id != tile.id) for chow in chows]
            options.append(ClaimOption(kind=ClaimKind.CHOW, chow_choices=choices))
    return options


def end_in_draw_game(
    game_state: MahjongGameState,
    round_state: MahjongRoundState,
    events: list[GameEvent] | None = None,
) -> tuple[MahjongGameState, list[GameEvent]]:
    """End the round with no winner; scores are unchanged."""
    events = list(events or [])
    result = DrawGameResult(scores=list(game_state.scores))
    new_round = clear_last_discard(round_state).model_copy(
        update={"phase": RoundPhase.DRAW_GAME, "result": result},
    )
    events.append(RoundEndEvent(result=result))
    logger.info("round ended in draw game", round_number=game_state.round_number)
    return _commit(game_state, new_round), events


def _declare_win(
    game_state: MahjongGameState,
    round_state: MahjongRoundState,
    seat: int,
    decomposition: HandDecomposition,
    *,
    discarder: int | None,
    winning_tile: Tile | None,
    events: list[GameEvent],
) -> tuple[MahjongGameState, list[GameEvent]]:
    fan = decomposition.fan.fan
    points = calculate_points(fan, game_state.settings.base_points)
    scores = list(game_state.scores)
    scores[seat] += points
    result = WinResult(
        type=RoundResultType.SELF_DRAW if discarder is None else RoundResultType.DISCARD_WIN,
        winner_seat=seat,
        discarder_seat=discarder,
        winning_tile_id=winning_tile.id if winning_tile is not None else None,
        fan=fan,
        breakdown=list(decomposition.fan.breakdown),
        special=decomposition.special,
        points=points,
        scores=scores,
    )
    new_round = clear_last_discard(round_state).model_copy(
        update={"phase": RoundPhase.WIN, "current_seat": seat, "result": result},
    )
    events.append(RoundEndEvent(result=result))
    logger.info(
        "round won",
        winner_seat=seat,
        result_type=result.type,
        fan=fan,
        points=points,
        breakdown=result.breakdown,
    )
    new_game = game_state.model_copy(update={"scores": tuple(scores)})
    return _commit(new_game, new_round), events


def _win_on_discard(
    game_state: MahjongGameState,
    seat: int,
    decomposition: HandDecomposition,
    events: list[GameEvent],
) -> tuple[MahjongGameState, list[GameEvent]]:
    """Move the last discard into the winner's hand and score it."""
    round_state = game_state.round_state
    tile = round_state.last_discard
    discarder = round_state.last_discard_seat
    if tile is None or discarder is None:
        raise InvalidTransitionError("no discard to win on")
    new_round = pop_last_discard(round_state, discarder, tile.id)
    new_round = add_tile_to_player(new_round, seat, tile)
    return _declare_win(
        game_state,
        new_round,
        seat,
        decomposition,
        discarder=discarder,
        winning_tile=tile,
        events=events,
    )


def _after_tile_received(
    game_state: MahjongGameState,
    round_state: MahjongRoundState,
    seat: int,
    tile: Tile,
    events: list[GameEvent],
) -> tuple[MahjongGameState, list[GameEvent]]:
    """Finish a wall draw: discard phase, or an immediate AI self-draw win."""
    round_state = round_state.model_copy(
        update={"phase": RoundPhase.DISCARD, "current_seat": seat, "last_drawn_tile_id": tile.id},
    )
    events.append(
        DrawEvent(
            target=seat_target(seat),
            seat=seat,
            tile_id=tile.id,
            wall_remaining=tiles_remaining(round_state.wall),
        )
    )
    player = round_state.players[seat]
    if player.is_ai:
        decomposition = check_win(list(player.tiles), list(player.melds))
        if decomposition is not None:
            return _declare_win(
                game_state,
                round_state,
                seat,
                decomposition,
                discarder=None,
                winning_tile=tile,
                events=events,
            )
    events.append(_turn_event(round_state))
    return _commit(game_state, round_state), events


def _draw_into_hand(
    game_state: MahjongGameState,
    round_state: MahjongRoundState,
    seat: int,
    events: list[GameEvent],
) -> tuple[MahjongGameState, list[GameEvent]]:
    try:
        new_round, tile, draw_events = draw_for_seat(round_state, seat)
    except WallExhaustedError:
        return end_in_draw_game(game_state, round_state, events)
    events.extend(draw_events)
    if tile is None:
        return end_in_draw_game(game_state, new_round, events)
    return _after_tile_received(game_state, new_round, seat, tile, events)


def process_draw(game_state: MahjongGameState, seat: int) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Draw for the seat whose turn it is.

    Bonus tiles are set aside and replaced. An empty wall ends the round as a
    draw game. AI seats declare a self-draw win at once.
    """
    round_state = game_state.round_state
    _require_phase(round_state, RoundPhase.DRAW, "draw")
    _require_turn(round_state, seat, "draw")
    return _draw_into_hand(game_state, round_state, seat, [])


def process_discard(
    game_state: MahjongGameState,
    seat: int,
    tile_id: int,
) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Discard a tile and open the claim phase.

    If the human seat has any claim on the tile, it gets the first right of
    refusal and AI claim resolution waits for it.
    """
    round_state = game_state.round_state
    _require_phase(round_state, RoundPhase.DISCARD, "discard")
    _require_turn(round_state, seat, "discard")
    player = round_state.players[seat]
    held = len(playing_tiles(player.tiles))
    if held != expected_hand_size(list(player.melds)):
        raise InvalidTransitionError(
            f"seat {seat} must hold {expected_hand_size(list(player.melds))} tiles to discard, holds {held}"
        )

    new_round, tile = discard_tile(round_state, seat, tile_id)
    new_round = new_round.model_copy(
        update={
            "phase": RoundPhase.CLAIM,
            "last_discard": tile,
            "last_discard_seat": seat,
            "awaiting_claim_seat": None,
            "last_drawn_tile_id": None,
        },
    )
    events: list[GameEvent] = [DiscardEvent(seat=seat, tile_id=tile.id)]

    human = game_state.settings.human_seat
    if human is not None and human != seat:
        options = get_claim_options(new_round, human)
        if options:
            new_round = new_round.model_copy(update={"awaiting_claim_seat": human})
            events.append(
                ClaimPromptEvent(target=seat_target(human), tile_id=tile.id, from_seat=seat, options=options),
            )
    events.append(_turn_event(new_round))
    return _commit(game_state, new_round), events


def _resolve_chow_tiles(
    hand: list[Tile],
    tile: Tile,
    chow_choice: tuple[int, int] | None,
) -> tuple[Tile, Tile]:
    options = unique_chow_options(hand, tile)
    if not options:
        raise IllegalClaimError(f"no chow can be formed with {tile}")
    if chow_choice is None:
        if len(options) > 1:
            raise IllegalClaimError("several chows are possible; a chow choice is required")
        first, second = (t for t in options[0] if t.id != tile.id)
        return first, second

    by_id = {t.id: t for t in hand}
    if len(set(chow_choice)) != 2 or any(tile_id not in by_id for tile_id in chow_choice):
        raise IllegalClaimError(f"chow choice {chow_choice} is not two tiles from the hand")
    first, second = by_id[chow_choice[0]], by_id[chow_choice[1]]
    if not is_chow(first, second, tile):
        raise IllegalClaimError(f"chow choice {chow_choice} does not form a sequence with {tile}")
    return first, second


def apply_meld_claim(
    game_state: MahjongGameState,
    seat: int,
    kind: ClaimKind,
    chow_choice: tuple[int, int] | None = None,
) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Claim the last discard into a pong, kong or chow.

    The claimed tile leaves the discarder's pile and the claimer moves to the
    discard phase. A kong draws one replacement tile first.
    """
    round_state = game_state.round_state
    tile = _require_open_discard(round_state, seat)
    discarder = round_state.last_discard_seat
    if discarder is None:
        raise InvalidTransitionError("no discard to claim")
    player = round_state.players[seat]
    hand = playing_tiles(player.tiles)

    if kind == ClaimKind.CHOW:
        chow_seat = next_seat(discarder, len(round_state.players))
        if seat != chow_seat:
            raise IllegalClaimError(f"only seat {chow_seat} may chow seat {discarder}'s discard")
        from_hand = list(_resolve_chow_tiles(hand, tile, chow_choice))
        meld_tiles = tuple(sorted([*from_hand, tile], key=lambda t: t.rank))
        meld_type = MeldType.CHOW
    else:
        needed = KONG_MATCHES if kind == ClaimKind.KONG else PONG_MATCHES
        matches = matching_tiles(hand, tile)
        if len(matches) < needed:
            raise IllegalClaimError(f"{kind.value} needs {needed} matching tiles, seat {seat} holds {len(matches)}")
        from_hand = matches[:needed]
        meld_tiles = (tile, *from_hand)
        meld_type = MeldType.KONG if kind == ClaimKind.KONG else MeldType.PONG

    meld = Meld(type=meld_type, tiles=meld_tiles, from_seat=discarder)
    used = {t.id for t in from_hand}
    new_round = pop_last_discard(round_state, discarder, tile.id)
    new_round = update_player(
        new_round,
        seat,
        tiles=tuple(t for t in player.tiles if t.id not in used),
        melds=(*player.melds, meld),
    )
    new_round = clear_last_discard(new_round).model_copy(
        update={"current_seat": seat, "phase": RoundPhase.DISCARD, "last_drawn_tile_id": None},
    )
    events: list[GameEvent] = [
        MeldEvent(
            meld_type=meld_type,
            caller_seat=seat,
            from_seat=discarder,
            tile_ids=meld.tile_ids(),
            called_tile_id=tile.id,
        )
    ]
    logger.info("meld claimed", seat=seat, meld_type=meld_type, from_seat=discarder, tile=str(tile))

    if meld_type == MeldType.KONG:
        return _draw_into_hand(game_state, new_round, seat, events)
    events.append(_turn_event(new_round))
    return _commit(game_state, new_round), events


def process_claim(
    game_state: MahjongGameState,
    seat: int,
    kind: ClaimKind,
    chow_choice: tuple[int, int] | None = None,
) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Claim a win, pong, kong or chow.

    A win is either a self-draw (the acting seat during its discard phase) or
    a win on the last discard during the claim phase.
    """
    round_state = game_state.round_state
    _require_seat(round_state, seat)
    if kind != ClaimKind.WIN:
        return apply_meld_claim(game_state, seat, kind, chow_choice)

    player = round_state.players[seat]
    if round_state.phase == RoundPhase.DISCARD:
        _require_turn(round_state, seat, "declare a win")
        decomposition = check_win(list(player.tiles), list(player.melds))
        if decomposition is None:
            raise NotAWinningHandError(f"seat {seat}'s hand is not a winning hand")
        last_drawn = None
        if round_state.last_drawn_tile_id is not None:
            last_drawn = player.find_tile(round_state.last_drawn_tile_id)
        return _declare_win(
            game_state,
            round_state,
            seat,
            decomposition,
            discarder=None,
            winning_tile=last_drawn,
            events=[],
        )

    if round_state.phase != RoundPhase.CLAIM:
        raise InvalidTransitionError(f"cannot declare a win during {round_state.phase.value} phase")
    tile = _require_open_discard(round_state, seat)
    decomposition = check_win([*player.tiles, tile], list(player.melds))
    if decomposition is None:
        raise NotAWinningHandError(f"seat {seat} cannot win on {tile}")
    return _win_on_discard(game_state, seat, decomposition, [])


def advance_after_claims(game_state: MahjongGameState) -> tuple[MahjongGameState, list[GameEvent]]:
    """Nobody claimed: the next seat draws, or the round is a draw game on an empty wall."""
    round_state = game_state.round_state
    discarder = round_state.last_discard_seat
    if discarder is None:
        raise InvalidTransitionError("no discard to pass on")
    new_round = clear_last_discard(round_state).model_copy(
        update={"current_seat": next_seat(discarder, len(round_state.players)), "phase": RoundPhase.DRAW},
    )
    if is_wall_exhausted(new_round.wall):
        return end_in_draw_game(game_state, new_round)
    return _commit(game_state, new_round), [_turn_event(new_round)]


def process_pass(game_state: MahjongGameState, seat: int) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Decline the first right of refusal on the last discard.

    AI claim resolution resumes afterwards.
    """
    round_state = game_state.round_state
    _require_seat(round_state, seat)
    _require_phase(round_state, RoundPhase.CLAIM, "pass")
    if round_state.awaiting_claim_seat != seat:
        raise InvalidTransitionError(f"seat {seat} has no pending claim to pass on")
    new_round = round_state.model_copy(update={"awaiting_claim_seat": None})
    return _commit(game_state, new_round), [_turn_event(new_round)]


def pending_ai_step(game_state: MahjongGameState) -> AIStep | None:
    """
    The AI step the round is waiting on, or None when a human must act or the round is over.
    """
    round_state = game_state.round_state
    if round_state.phase in TERMINAL_PHASES:
        return None
    human = game_state.settings.human_seat
    if round_state.phase == RoundPhase.CLAIM:
        if round_state.awaiting_claim_seat is not None or round_state.last_discard_seat is None:
            return None
        return AIStep(
            step_type=AIStepType.RESOLVE_CLAIMS,
            seat=round_state.last_discard_seat,
            phase=round_state.phase,
            action_count=round_state.action_count,
        )
    if round_state.current_seat == human:
        return None
    step_type = AIStepType.DRAW if round_state.phase == RoundPhase.DRAW else AIStepType.DISCARD
    return AIStep(
        step_type=step_type,
        seat=round_state.current_seat,
        phase=round_state.phase,
        action_count=round_state.action_count,
    )


def is_step_current(game_state: MahjongGameState, step: AIStep) -> bool:
    """Check a scheduled step against the live state."""
    current = pending_ai_step(game_state)
    return current is not None and current == step
