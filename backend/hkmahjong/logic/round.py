"""
Round initialization and tile movement for Hong Kong Mahjong.

Dealing, drawing with bonus replacement, and discarding. Phase and turn
bookkeeping lives in turn.py; the functions here only move tiles.
"""

from __future__ import annotations

import structlog

from hkmahjong.logic import wall as wall_ops
from hkmahjong.logic.enums import RoundPhase
from hkmahjong.logic.events import BonusTileEvent, GameEvent
from hkmahjong.logic.exceptions import InvalidTransitionError, WallExhaustedError
from hkmahjong.logic.settings import GameSettings
from hkmahjong.logic.state import MahjongPlayer, MahjongRoundState
from hkmahjong.logic.state_utils import add_tile_to_player, update_player
from hkmahjong.logic.tiles import Tile, is_bonus

logger = structlog.get_logger()

DEALER_SEAT = 0


def create_players(settings: GameSettings) -> tuple[MahjongPlayer, ...]:
    return tuple(
        MahjongPlayer(
            seat=seat,
            seat_wind=settings.seat_winds[seat],
            is_ai=seat != settings.human_seat,
        )
        for seat in range(settings.num_players)
    )


def extract_bonus(
    round_state: MahjongRoundState,
    seat: int,
) -> tuple[MahjongRoundState, list[GameEvent], bool]:
    """
    Set aside every bonus tile in the seat's hand, drawing a replacement for each.

    Returns (new_round_state, events, wall_ran_out). When the wall empties
    mid-extraction the remaining bonus tiles are still set aside, without
    replacements.
    """
    events: list[GameEvent] = []
    ran_out = False
    state = round_state
    while True:
        player = state.players[seat]
        bonus = next((t for t in player.tiles if is_bonus(t)), None)
        if bonus is None:
            break
        state = update_player(
            state,
            seat,
            tiles=tuple(t for t in player.tiles if t.id != bonus.id),
            bonus=(*player.bonus, bonus),
        )
        events.append(BonusTileEvent(seat=seat, tile_id=bonus.id))
        new_wall, replacement = wall_ops.draw_tile(state.wall)
        if replacement is None:
            ran_out = True
            continue
        state = state.model_copy(update={"wall": new_wall})
        state = add_tile_to_player(state, seat, replacement)
    return state, events, ran_out


def deal(
    wall: wall_ops.Wall,
    settings: GameSettings,
) -> tuple[MahjongRoundState, list[GameEvent]]:
    """
    Deal a starting hand to every seat, seat by seat.

    Each seat takes its tiles and then has its bonus tiles replaced before the
    next seat is dealt. The dealer moves first in the draw phase.
    """
    state = MahjongRoundState(
        wall=wall,
        players=create_players(settings),
        current_seat=DEALER_SEAT,
        round_wind=settings.round_wind,
        phase=RoundPhase.DRAW,
    )
    events: list[GameEvent] = []
    for seat in range(settings.num_players):
        for _ in range(settings.starting_hand_size):
            new_wall, tile = wall_ops.draw_tile(state.wall)
            if tile is None:
                raise WallExhaustedError("wall too short to deal")
            state = state.model_copy(update={"wall": new_wall})
            state = add_tile_to_player(state, seat, tile)
        state, bonus_events, _ = extract_bonus(state, seat)
        events.extend(bonus_events)
    logger.debug("hands dealt", wall_remaining=wall_ops.tiles_remaining(state.wall))
    return state, events


def draw_for_seat(
    round_state: MahjongRoundState,
    seat: int,
) -> tuple[MahjongRoundState, Tile | None, list[GameEvent]]:
    """
    Draw a playing tile for a seat, replacing bonus tiles as they come.

    Returns (new_round_state, drawn_tile, events). drawn_tile is None when the
    wall ran out during bonus replacement.

    Raises:
        WallExhaustedError: If the wall is empty before the draw

    """
    new_wall, tile = wall_ops.draw_tile(round_state.wall)
    if tile is None:
        raise WallExhaustedError(f"seat {seat} cannot draw from an empty wall")
    state = round_state.model_copy(update={"wall": new_wall})
    state = add_tile_to_player(state, seat, tile)
    state, events, ran_out = extract_bonus(state, seat)
    if ran_out:
        return state, None, events
    drawn = state.players[seat].tiles[-1]
    return state, drawn, events


def discard_tile(
    round_state: MahjongRoundState,
    seat: int,
    tile_id: int,
) -> tuple[MahjongRoundState, Tile]:
    """
    Move a tile from the seat's hand to its discard pile.

    Returns (new_round_state, discarded_tile).
    Raises InvalidTransitionError if the tile is not in hand.
    """
    player = round_state.players[seat]
    tile = player.find_tile(tile_id)
    if tile is None:
        logger.warning("discard tile not in hand", seat=seat, tile_id=tile_id)
        raise InvalidTransitionError(f"tile {tile_id} not in seat {seat}'s hand")
    new_state = update_player(
        round_state,
        seat,
        tiles=tuple(t for t in player.tiles if t.id != tile_id),
        discards=(*player.discards, tile),
    )
    return new_state, tile
