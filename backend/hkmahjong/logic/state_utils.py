"""
Immutable state update utilities using Pydantic model_copy.

These functions never mutate the input state; they always return new state
objects with the requested changes applied.
"""

from collections import Counter

from hkmahjong.logic.state import MahjongGameState, MahjongPlayer, MahjongRoundState
from hkmahjong.logic.tiles import Tile
from hkmahjong.logic.wall import undrawn_tiles

_PLAYER_FIELDS = set(MahjongPlayer.model_fields)


def update_player(
    round_state: MahjongRoundState,
    seat: int,
    **updates: object,
) -> MahjongRoundState:
    """
    Return new round state with updated player at seat.

    Raises:
        ValueError: If seat is out of bounds or update fields are invalid

    """
    if not (0 <= seat < len(round_state.players)):
        raise ValueError(f"Invalid seat {seat}, expected 0-{len(round_state.players) - 1}")
    invalid_fields = set(updates) - _PLAYER_FIELDS
    if invalid_fields:
        raise ValueError(f"Invalid player fields: {invalid_fields}")
    players = list(round_state.players)
    players[seat] = round_state.players[seat].model_copy(update=updates)
    return round_state.model_copy(update={"players": tuple(players)})


def add_tile_to_player(round_state: MahjongRoundState, seat: int, tile: Tile) -> MahjongRoundState:
    player = round_state.players[seat]
    return update_player(round_state, seat, tiles=(*player.tiles, tile))


def remove_tile_from_player(round_state: MahjongRoundState, seat: int, tile_id: int) -> MahjongRoundState:
    """
    Return new state with a tile removed from the player's hand.

    Raises:
        ValueError: If the tile is not in the player's hand

    """
    player = round_state.players[seat]
    if player.find_tile(tile_id) is None:
        raise ValueError(f"tile {tile_id} not in hand of seat {seat}")
    return update_player(round_state, seat, tiles=tuple(t for t in player.tiles if t.id != tile_id))


def pop_last_discard(round_state: MahjongRoundState, seat: int, tile_id: int) -> MahjongRoundState:
    """Take a claimed tile back off the end of the discarder's pile."""
    player = round_state.players[seat]
    if not player.discards or player.discards[-1].id != tile_id:
        raise ValueError(f"tile {tile_id} is not the last discard of seat {seat}")
    return update_player(round_state, seat, discards=player.discards[:-1])


def next_seat(seat: int, num_players: int = 4) -> int:
    return (seat + 1) % num_players


def seats_after(seat: int, num_players: int = 4) -> list[int]:
    """The other seats in turn order, starting right after seat."""
    return [(seat + offset) % num_players for offset in range(1, num_players)]


def bump_action_count(round_state: MahjongRoundState) -> MahjongRoundState:
    return round_state.model_copy(update={"action_count": round_state.action_count + 1})


def clear_last_discard(round_state: MahjongRoundState) -> MahjongRoundState:
    return round_state.model_copy(
        update={"last_discard": None, "last_discard_seat": None, "awaiting_claim_seat": None},
    )


def update_game_with_round(game_state: MahjongGameState, round_state: MahjongRoundState) -> MahjongGameState:
    return game_state.model_copy(update={"round_state": round_state})


def collect_tile_ids(round_state: MahjongRoundState) -> Counter[int]:
    """
    Count every tile id across the wall, hands, melds, discards and bonus sets.

    The last discard is also listed in its discarder's pile until claimed, so
    it is not counted separately. In a consistent state every count is 1.
    """
    ids: Counter[int] = Counter(t.id for t in undrawn_tiles(round_state.wall))
    for player in round_state.players:
        ids.update(t.id for t in player.tiles)
        ids.update(t.id for meld in player.melds for t in meld.tiles)
        ids.update(t.id for t in player.discards)
        ids.update(t.id for t in player.bonus)
    return ids
