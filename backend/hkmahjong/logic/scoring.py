"""
Fan calculation for a recognized winning hand.

Rules are additive and evaluated independently, so the one-suit rules and the
triplet/sequence rules may stack on the same hand. Bonus tiles never score.
"""

from pydantic import BaseModel, ConfigDict

from hkmahjong.logic.enums import MeldType, Suit
from hkmahjong.logic.melds import Meld
from hkmahjong.logic.tiles import Tile, is_honor, is_suited

BASE_POINTS = 4
SEVEN_PAIRS_FAN = 4
MIN_FAN = 1

ALL_TRIPLETS_FAN = 3
ALL_SEQUENCES_FAN = 1
MIXED_ONE_SUIT_FAN = 3
PURE_ONE_SUIT_FAN = 7
ALL_HONORS_FAN = 10


class FanResult(BaseModel):
    """Fan total with a readable breakdown in evaluation order."""

    model_config = ConfigDict(frozen=True)

    fan: int
    breakdown: tuple[str, ...] = ()


def calc_fan(melds: list[Meld], pair_tile: Tile | None, all_tiles: list[Tile]) -> FanResult:
    """
    Score a standard (melds + pair) hand.

    Args:
        melds: every meld of the hand, declared and concealed
        pair_tile: one tile of the pair
        all_tiles: every playing tile of the hand, used for the suit rules

    """
    fan = 0
    breakdown: list[str] = []

    suits = {t.suit for t in all_tiles if is_suited(t)}
    one_suit = len(suits) == 1
    has_honors = any(is_honor(t) for t in all_tiles)
    all_honors = all(is_honor(t) for t in all_tiles)

    if melds and all(m.is_triplet() for m in melds):
        fan += ALL_TRIPLETS_FAN
        breakdown.append(f"All Triplets +{ALL_TRIPLETS_FAN}")
    pair_is_honor = pair_tile is not None and is_honor(pair_tile)
    if melds and all(m.type == MeldType.CHOW for m in melds) and not pair_is_honor:
        fan += ALL_SEQUENCES_FAN
        breakdown.append(f"All Sequences +{ALL_SEQUENCES_FAN}")
    if one_suit and has_honors:
        fan += MIXED_ONE_SUIT_FAN
        breakdown.append(f"Mixed One-Suit +{MIXED_ONE_SUIT_FAN}")
    if one_suit and not has_honors:
        fan += PURE_ONE_SUIT_FAN
        breakdown.append(f"Pure One-Suit +{PURE_ONE_SUIT_FAN}")
    if all_honors:
        fan += ALL_HONORS_FAN
        breakdown.append(f"All Honors +{ALL_HONORS_FAN}")

    for meld in melds:
        if meld.is_triplet() and meld.first.suit == Suit.DRAGON:
            fan += 1
            breakdown.append("Dragon Triplet +1")
    # any wind counts, not only round or seat wind
    for meld in melds:
        if meld.is_triplet() and meld.first.suit == Suit.WIND:
            fan += 1
            breakdown.append("Wind Triplet +1")
    if pair_tile is not None and pair_tile.suit == Suit.DRAGON:
        fan += 1
        breakdown.append("Dragon Pair +1")
    for meld in melds:
        if meld.type == MeldType.KONG:
            fan += 1
            breakdown.append("Kong +1")

    if fan < MIN_FAN:
        fan = MIN_FAN
        breakdown.append("Chicken Hand (min 1)")

    return FanResult(fan=fan, breakdown=tuple(breakdown))


def calc_fan_seven_pairs() -> FanResult:
    return FanResult(fan=SEVEN_PAIRS_FAN, breakdown=(f"Seven Pairs +{SEVEN_PAIRS_FAN}",))


def calculate_points(fan: int, base_points: int = BASE_POINTS) -> int:
    """Points awarded to the winner: base * 2^fan."""
    if fan < 0:
        raise ValueError(f"fan must be non-negative, got {fan}")
    return base_points * 2**fan
