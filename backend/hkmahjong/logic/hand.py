"""
Winning hand recognition.

A hand wins when its concealed playing tiles split into melds plus one pair
(alongside any declared melds), or into seven pairs when nothing has been
declared. The search is first-match: the first pair candidate, in
first-encountered order, whose remainder decomposes is accepted, and meld
decomposition commits to the first branch (pong, then chow on the smallest
tile) that succeeds. No search is made for a higher-scoring alternative.

None is the only failure signal, both for "not evaluated" and for
"evaluated and failed".
"""

from pydantic import BaseModel, ConfigDict

from hkmahjong.logic.enums import MeldType
from hkmahjong.logic.melds import Meld
from hkmahjong.logic.scoring import FanResult, calc_fan, calc_fan_seven_pairs
from hkmahjong.logic.tiles import Tile, group_tiles, is_same_kind, is_suited, playing_tiles, sort_tiles

HAND_SIZE = 14
SEVEN_PAIRS = 7
SEVEN_PAIRS_SPECIAL = "7pairs"


class HandDecomposition(BaseModel):
    """A successful win decomposition with its fan."""

    model_config = ConfigDict(frozen=True)

    melds: tuple[Meld, ...]  # melds found in the concealed tiles
    pair: tuple[Tile, Tile] | None = None
    special: str | None = None
    fan: FanResult
    all_melds: tuple[Meld, ...]  # declared melds followed by the found ones


def expected_hand_size(melds: list[Meld]) -> int:
    """Concealed playing tiles needed to win with this many declared melds."""
    return HAND_SIZE - 3 * len(melds)


def remove_tiles(tiles: list[Tile], to_remove: list[Tile]) -> list[Tile] | None:
    """Remove specific instances by id; None if any is missing."""
    result = list(tiles)
    for target in to_remove:
        index = next((i for i, t in enumerate(result) if t.id == target.id), None)
        if index is None:
            return None
        del result[index]
    return result


def decompose_melds(tiles: list[Tile]) -> list[Meld] | None:
    """
    Split tiles into pongs and chows.

    Returns [] for no tiles and None when the tiles cannot be split.
    """
    if not tiles:
        return []
    if len(tiles) % 3 != 0:
        return None

    ordered = sort_tiles(tiles)
    first = ordered[0]

    same = [t for t in ordered if is_same_kind(t, first) and t.id != first.id]
    if len(same) >= 2:
        pong = [first, same[0], same[1]]
        rest = remove_tiles(ordered, pong)
        if rest is not None:
            found = decompose_melds(rest)
            if found is not None:
                return [Meld(type=MeldType.PONG, tiles=tuple(pong)), *found]

    if is_suited(first):
        second = next((t for t in ordered if t.suit == first.suit and t.rank == first.rank + 1), None)
        third = next((t for t in ordered if t.suit == first.suit and t.rank == first.rank + 2), None)
        if second is not None and third is not None:
            chow = [first, second, third]
            rest = remove_tiles(ordered, chow)
            if rest is not None:
                found = decompose_melds(rest)
                if found is not None:
                    return [Meld(type=MeldType.CHOW, tiles=tuple(chow)), *found]

    return None


def find_seven_pairs(tiles: list[Tile]) -> list[Meld] | None:
    """Exactly seven kinds, two tiles each."""
    groups = list(group_tiles(tiles).values())
    if len(groups) != SEVEN_PAIRS or any(len(group) != 2 for group in groups):
        return None
    return [Meld(type=MeldType.PAIR, tiles=tuple(group)) for group in groups]


def find_winning_hand(tiles: list[Tile], melds: list[Meld] | None = None) -> HandDecomposition | None:
    """Recognize a win among concealed playing tiles, seven pairs first."""
    declared = list(melds or [])
    if len(tiles) % 3 != 2:
        return None

    if len(tiles) == HAND_SIZE and not declared:
        pairs = find_seven_pairs(tiles)
        if pairs is not None:
            return HandDecomposition(
                melds=tuple(pairs),
                special=SEVEN_PAIRS_SPECIAL,
                fan=calc_fan_seven_pairs(),
                all_melds=tuple(pairs),
            )

    declared_tiles = [t for meld in declared for t in meld.tiles]
    for group in group_tiles(tiles).values():
        if len(group) < 2:
            continue
        pair = (group[0], group[1])
        rest = remove_tiles(tiles, list(pair))
        if rest is None:
            continue
        found = decompose_melds(rest)
        if found is None:
            continue
        all_melds = [*declared, *found]
        fan = calc_fan(all_melds, pair[0], playing_tiles([*tiles, *declared_tiles]))
        return HandDecomposition(
            melds=tuple(found),
            pair=pair,
            fan=fan,
            all_melds=tuple(all_melds),
        )
    return None


def check_win(hand_tiles: list[Tile], melds: list[Meld] | None = None) -> HandDecomposition | None:
    """
    Check whether a concealed hand plus declared melds is a winning hand.

    Bonus tiles are ignored. The playing tiles must number exactly
    14 - 3 * len(melds).
    """
    declared = list(melds or [])
    playing = playing_tiles(hand_tiles)
    if len(playing) != expected_hand_size(declared) or len(playing) % 3 != 2:
        return None
    return find_winning_hand(playing, declared)
