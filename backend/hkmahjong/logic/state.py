"""
Game state models for Hong Kong Mahjong.

All state is immutable: transitions build new objects with model_copy and
never touch the ones they were given.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from hkmahjong.logic.enums import Difficulty, RoundPhase, WindName
from hkmahjong.logic.melds import Meld
from hkmahjong.logic.settings import NUM_PLAYERS, GameSettings
from hkmahjong.logic.tiles import Tile
from hkmahjong.logic.types import DrawGameResult, GameView, MeldView, PlayerView, WinResult
from hkmahjong.logic.wall import Wall, tiles_remaining

NUM_WINDS = 4


class MahjongPlayer(BaseModel):
    """
    One seat at the table.
    """

    model_config = ConfigDict(frozen=True)

    seat: int  # 0-3
    seat_wind: int  # wind rank 1-4
    is_ai: bool = True

    tiles: tuple[Tile, ...] = ()  # concealed hand
    melds: tuple[Meld, ...] = ()  # declared melds
    discards: tuple[Tile, ...] = ()
    bonus: tuple[Tile, ...] = ()  # flowers and seasons set aside

    def find_tile(self, tile_id: int) -> Tile | None:
        """Find a concealed tile by id."""
        return next((t for t in self.tiles if t.id == tile_id), None)

    def effective_hand_size(self) -> int:
        """Concealed tiles plus three per declared meld; 13 between turns, 14 while acting."""
        return len(self.tiles) + 3 * len(self.melds)


class MahjongRoundState(BaseModel):
    """
    State of a single round.
    """

    model_config = ConfigDict(frozen=True)

    wall: Wall = Field(default_factory=Wall)
    players: tuple[MahjongPlayer, ...] = ()

    current_seat: int = 0
    round_wind: int = 1
    phase: RoundPhase = RoundPhase.DRAW

    # set only during the claim phase
    last_discard: Tile | None = None
    last_discard_seat: int | None = None
    awaiting_claim_seat: int | None = None  # human seat holding first right of refusal

    last_drawn_tile_id: int | None = None
    action_count: int = 0  # bumped by every transition; stale AI steps compare against it
    result: WinResult | DrawGameResult | None = None


class MahjongGameState(BaseModel):
    """
    Full game state across rounds.
    """

    model_config = ConfigDict(frozen=True)

    round_state: MahjongRoundState = Field(default_factory=MahjongRoundState)
    round_number: int = 0  # 0-based, also the wall derivation index
    scores: tuple[int, ...] = (0,) * NUM_PLAYERS
    difficulty: Difficulty = Difficulty.MEDIUM
    seed: str = ""
    settings: GameSettings = Field(default_factory=GameSettings)


def wind_name(wind: int) -> WindName:
    """
    Convert a wind rank (1-4) to its name.
    """
    winds = [WindName.EAST, WindName.SOUTH, WindName.WEST, WindName.NORTH]
    return winds[wind - 1] if 1 <= wind <= NUM_WINDS else WindName.UNKNOWN


def _meld_to_view(meld: Meld) -> MeldView:
    return MeldView(type=meld.type, tiles=list(meld.tiles), from_seat=meld.from_seat)


def get_player_view(game_state: MahjongGameState, seat: int | None) -> GameView:
    """
    Return the visible game state for a seat.

    Every seat sees its own hand, and for all seats the hand size, declared
    melds, discards, bonus tiles and score. Other seats' concealed tiles and
    the wall order are never exposed. A seat of None is a spectator view with
    no hands.
    """
    round_state = game_state.round_state

    players_view = [
        PlayerView(
            seat=p.seat,
            seat_wind=wind_name(p.seat_wind),
            is_ai=p.is_ai,
            score=game_state.scores[p.seat],
            hand_size=len(p.tiles),
            hand=list(p.tiles) if p.seat == seat else None,
            melds=[_meld_to_view(m) for m in p.melds],
            discards=list(p.discards),
            bonus=list(p.bonus),
        )
        for p in round_state.players
    ]

    return GameView(
        seat=seat,
        round_number=game_state.round_number,
        round_wind=wind_name(round_state.round_wind),
        phase=round_state.phase,
        current_seat=round_state.current_seat,
        wall_remaining=tiles_remaining(round_state.wall),
        last_discard=round_state.last_discard,
        last_discard_seat=round_state.last_discard_seat,
        awaiting_claim_seat=round_state.awaiting_claim_seat,
        scores=list(game_state.scores),
        players=players_view,
        result=round_state.result,
    )
