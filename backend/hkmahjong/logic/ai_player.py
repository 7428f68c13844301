"""
AI player decision making for Hong Kong Mahjong.

One strategy object per AI seat. The base class holds the shared state (an
injected random source and the memory of tile kinds seen discarded); the
easy, medium and hard subclasses implement the discard and claim choices
with fixed thresholds and probabilities. All randomness goes through the
injected rng so a seeded session replays exactly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hkmahjong.logic.enums import Difficulty, Suit
from hkmahjong.logic.melds import find_chows_with_tile, has_chow_with_tile
from hkmahjong.logic.shanten import calculate_shanten
from hkmahjong.logic.tiles import Tile, TileKey, count_kind, is_honor, is_same_kind, is_suited, playing_tiles, tile_key

if TYPE_CHECKING:
    import random

    from hkmahjong.logic.melds import Meld

EASY_PONG_CHANCE = 0.3
EASY_CHOW_CHANCE = 0.2
MEDIUM_CHOW_CHANCE = 0.5
TIE_BREAK_CHANCE = 0.3

SEEN_TILE_BONUS = 0.5
VALUED_HONOR_BONUS = 1.0
HARD_PONG_MAX_SHANTEN = 2
HARD_PROTECT_MAX_SHANTEN = 2

_UNSET_SCORE = 99.0


class AIPlayer:
    """
    Base AI strategy.

    Subclasses override the decision methods. Wins are never refused, so
    should_win is shared.
    """

    difficulty: Difficulty

    def __init__(self, seat: int, rng: random.Random) -> None:
        self.seat = seat
        self.rng = rng
        self.seen_discards: set[TileKey] = set()

    def track_discard(self, tile: Tile) -> None:
        """Remember a tile kind discarded by any seat."""
        self.seen_discards.add(tile_key(tile))

    def forget_discards(self) -> None:
        self.seen_discards.clear()

    def should_win(self) -> bool:
        return True

    def choose_discard(self, hand: list[Tile], melds: list[Meld], round_wind: int, seat_wind: int) -> Tile | None:
        raise NotImplementedError

    def should_pong(self, hand: list[Tile], melds: list[Meld], tile: Tile, round_wind: int, seat_wind: int) -> bool:
        raise NotImplementedError

    def should_chow(self, hand: list[Tile], melds: list[Meld], tile: Tile) -> bool:
        raise NotImplementedError

    def should_kong(self, hand: list[Tile], tile: Tile) -> bool:
        """Upgrade an accepted pong to a kong when the hand holds three of the kind."""
        return count_kind(playing_tiles(hand), tile) >= 3

    def choose_chow(self, hand: list[Tile], tile: Tile) -> tuple[Tile, Tile, Tile] | None:
        """Take the first candidate."""
        return next(find_chows_with_tile(playing_tiles(hand), tile), None)


class EasyAIPlayer(AIPlayer):
    """Random discards, random claims regardless of usefulness."""

    difficulty = Difficulty.EASY

    def choose_discard(self, hand: list[Tile], melds: list[Meld], round_wind: int, seat_wind: int) -> Tile | None:
        playing = playing_tiles(hand)
        if not playing:
            return None
        return self.rng.choice(playing)

    def should_pong(self, hand: list[Tile], melds: list[Meld], tile: Tile, round_wind: int, seat_wind: int) -> bool:
        return self.rng.random() < EASY_PONG_CHANCE

    def should_chow(self, hand: list[Tile], melds: list[Meld], tile: Tile) -> bool:
        return self.rng.random() < EASY_CHOW_CHANCE


class MediumAIPlayer(AIPlayer):
    """Shanten-driven discards with probabilistic tie breaks."""

    difficulty = Difficulty.MEDIUM

    def _discard_adjustment(self, tile: Tile, current_shanten: int, round_wind: int, seat_wind: int) -> float:
        return 0.0

    def choose_discard(self, hand: list[Tile], melds: list[Meld], round_wind: int, seat_wind: int) -> Tile | None:
        """
        Discard the tile whose removal leaves the lowest shanten.

        An equally good later candidate replaces the current pick with
        probability 0.3; the rng is only consulted on ties.
        """
        playing = playing_tiles(hand)
        if not playing:
            return None
        current_shanten = calculate_shanten(playing)
        best_tile: Tile | None = None
        best_score = _UNSET_SCORE
        for tile in playing:
            rest = list(playing)
            rest.remove(tile)
            score = calculate_shanten(rest) + self._discard_adjustment(tile, current_shanten, round_wind, seat_wind)
            if score < best_score or (score == best_score and self.rng.random() < TIE_BREAK_CHANCE):
                best_score = score
                best_tile = tile
        return best_tile if best_tile is not None else playing[0]

    def _pong_shanten(self, hand: list[Tile], tile: Tile) -> tuple[int, int] | None:
        """(current, after) shanten for a pong, or None when it cannot be made."""
        playing = playing_tiles(hand)
        if count_kind(playing, tile) < 2:
            return None
        current = calculate_shanten(hand)
        after = calculate_shanten([t for t in [*playing, tile] if not is_same_kind(t, tile)])
        return current, after

    def should_pong(self, hand: list[Tile], melds: list[Meld], tile: Tile, round_wind: int, seat_wind: int) -> bool:
        shanten = self._pong_shanten(hand, tile)
        if shanten is None:
            return False
        current, after = shanten
        return after <= current - 1 or is_honor(tile)

    def should_chow(self, hand: list[Tile], melds: list[Meld], tile: Tile) -> bool:
        playing = playing_tiles(hand)
        if not is_suited(tile) or not has_chow_with_tile(playing, tile):
            return False
        return calculate_shanten(playing) >= 1 and self.rng.random() < MEDIUM_CHOW_CHANCE


class HardAIPlayer(MediumAIPlayer):
    """Medium play plus discard memory, a valued-honor bonus and stricter pongs."""

    difficulty = Difficulty.HARD

    def _discard_adjustment(self, tile: Tile, current_shanten: int, round_wind: int, seat_wind: int) -> float:
        adjustment = 0.0
        if tile_key(tile) in self.seen_discards:
            adjustment -= SEEN_TILE_BONUS
        if current_shanten <= HARD_PROTECT_MAX_SHANTEN:
            valued_wind = tile.suit == Suit.WIND and tile.rank in (round_wind, seat_wind)
            if tile.suit == Suit.DRAGON or valued_wind:
                adjustment -= VALUED_HONOR_BONUS
        return adjustment

    def should_pong(self, hand: list[Tile], melds: list[Meld], tile: Tile, round_wind: int, seat_wind: int) -> bool:
        shanten = self._pong_shanten(hand, tile)
        if shanten is None:
            return False
        current, after = shanten
        return (after < current or is_honor(tile)) and current <= HARD_PONG_MAX_SHANTEN

    def should_chow(self, hand: list[Tile], melds: list[Meld], tile: Tile) -> bool:
        playing = playing_tiles(hand)
        if not is_suited(tile) or not has_chow_with_tile(playing, tile):
            return False
        return calculate_shanten(playing) >= 1


_STRATEGIES: dict[Difficulty, type[AIPlayer]] = {
    Difficulty.EASY: EasyAIPlayer,
    Difficulty.MEDIUM: MediumAIPlayer,
    Difficulty.HARD: HardAIPlayer,
}


def create_ai_player(difficulty: Difficulty, seat: int, rng: random.Random) -> AIPlayer:
    """Create the strategy object for a difficulty tier."""
    return _STRATEGIES[difficulty](seat, rng)
