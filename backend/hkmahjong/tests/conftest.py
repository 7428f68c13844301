from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

from hkmahjong.logic.enums import RoundPhase, Suit
from hkmahjong.logic.settings import GameSettings
from hkmahjong.logic.state import MahjongGameState, MahjongPlayer, MahjongRoundState
from hkmahjong.logic.tiles import Tile
from hkmahjong.logic.wall import create_wall_from_tiles

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hkmahjong.logic.melds import Meld

# ids for hand-built tiles start above the real tile set so they never collide with a dealt wall
_tile_ids = itertools.count(1000)

FIXED_SEED = "ab" * 32


# ============================================================================
# Tile Builders
# ============================================================================


def make_tile(suit: Suit, rank: int) -> Tile:
    return Tile(id=next(_tile_ids), suit=suit, rank=rank)


def make_tiles(
    man: str = "",
    pin: str = "",
    sou: str = "",
    winds: str = "",
    dragons: str = "",
    flowers: str = "",
    seasons: str = "",
) -> list[Tile]:
    """
    Build tiles from rank strings, one fresh id per tile.

    Tiles come out in suit order (man, pin, sou, winds, dragons, flowers,
    seasons): make_tiles(winds="11", man="123") is 1m 2m 3m East East.
    Winds are 1-4 (East, South, West, North), dragons 1-3 (Chun, Hatsu, Haku).
    """
    tiles: list[Tile] = []
    for suit, ranks in (
        (Suit.MAN, man),
        (Suit.PIN, pin),
        (Suit.SOU, sou),
        (Suit.WIND, winds),
        (Suit.DRAGON, dragons),
        (Suit.FLOWER, flowers),
        (Suit.SEASON, seasons),
    ):
        tiles.extend(make_tile(suit, int(rank)) for rank in ranks)
    return tiles


# ============================================================================
# Test State Builder Helpers
# ============================================================================


def create_player(
    seat: int = 0,
    *,
    tiles: Sequence[Tile] | None = None,
    melds: Sequence[Meld] | None = None,
    discards: Sequence[Tile] | None = None,
    bonus: Sequence[Tile] | None = None,
    is_ai: bool | None = None,
    seat_wind: int | None = None,
) -> MahjongPlayer:
    """Create a MahjongPlayer with the default table layout (human at seat 0)."""
    return MahjongPlayer(
        seat=seat,
        seat_wind=seat_wind if seat_wind is not None else GameSettings().seat_winds[seat],
        is_ai=is_ai if is_ai is not None else seat != 0,
        tiles=tuple(tiles or ()),
        melds=tuple(melds or ()),
        discards=tuple(discards or ()),
        bonus=tuple(bonus or ()),
    )


def create_round_state(
    *,
    players: Sequence[MahjongPlayer] | None = None,
    wall: Sequence[Tile] | None = None,
    current_seat: int = 0,
    phase: RoundPhase = RoundPhase.DRAW,
    last_discard: Tile | None = None,
    last_discard_seat: int | None = None,
    awaiting_claim_seat: int | None = None,
    action_count: int = 0,
) -> MahjongRoundState:
    """Create a MahjongRoundState; the wall is drawn in the order given."""
    if players is None:
        players = [create_player(seat) for seat in range(4)]
    return MahjongRoundState(
        wall=create_wall_from_tiles(list(wall or [])),
        players=tuple(players),
        current_seat=current_seat,
        phase=phase,
        last_discard=last_discard,
        last_discard_seat=last_discard_seat,
        awaiting_claim_seat=awaiting_claim_seat,
        action_count=action_count,
    )


def create_game_state(
    round_state: MahjongRoundState | None = None,
    *,
    scores: Sequence[int] = (0, 0, 0, 0),
    settings: GameSettings | None = None,
    seed: str = FIXED_SEED,
) -> MahjongGameState:
    return MahjongGameState(
        round_state=round_state if round_state is not None else create_round_state(),
        scores=tuple(scores),
        seed=seed,
        settings=settings or GameSettings(),
    )


class FixedRandom:
    """Stand-in for random.Random: random() always returns value, choice() the first item."""

    def __init__(self, value: float = 0.99) -> None:
        self.value = value

    def random(self) -> float:
        return self.value

    def choice(self, seq):
        return seq[0]
