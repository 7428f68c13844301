"""
Shanten estimation for AI decision making.

Shanten is the number of tiles a hand is away from tenpai: -1 is complete,
0 is tenpai. The estimate here is a bounded-cost heuristic, not an exact
solver. The meld count only takes complete melds starting from the smallest
remaining tile, and partial melds from adjacent sorted positions, so some
hands are over-estimated. AI behaviour is tuned against this estimate.

A 13-tile tenpai hand usually comes out as -1: after removing its pair, the
11 remaining tiles need n // 3 - 1 = 2 melds, so three melds plus a partial
is already below zero. Callers compare values, so this is kept as is.
"""

from functools import lru_cache

from hkmahjong.logic.tiles import SUIT_ORDER, SUITED, Tile, group_tiles, is_bonus, sort_key

MAX_SHANTEN = 8
SEVEN_PAIRS_SIZES = (13, 14)

_SUITED_ORDERS = frozenset(SUIT_ORDER[suit] for suit in SUITED)

# (suit order, rank); sorted tuples of these are the cache keys
_Kind = tuple[int, int]


def _meld_score(count: tuple[int, int]) -> int:
    return count[0] * 2 + count[1]


def _first_index(kinds: tuple[_Kind, ...], target: _Kind, skip: set[int]) -> int | None:
    for index in range(1, len(kinds)):
        if index not in skip and kinds[index] == target:
            return index
    return None


def _without(kinds: tuple[_Kind, ...], *indices: int) -> tuple[_Kind, ...]:
    return tuple(kind for index, kind in enumerate(kinds) if index not in indices)


@lru_cache(maxsize=65536)
def _best_meld_count(kinds: tuple[_Kind, ...]) -> tuple[int, int]:
    """
    Greedy (complete, partial) count for a sorted kind sequence.

    The count is additive, so memoizing from a zero start gives the same
    answer as threading running totals through the recursion.
    """
    if not kinds:
        return 0, 0

    best = (0, 0)
    first = kinds[0]

    # pong from the first tile only
    j = _first_index(kinds, first, set())
    if j is not None:
        k = _first_index(kinds, first, {j})
        if k is not None and k > j:
            complete, partial = _best_meld_count(_without(kinds, 0, j, k))
            candidate = (complete + 1, partial)
            if _meld_score(candidate) > _meld_score(best):
                best = candidate

    # chow from the first tile only
    suit, rank = first
    if suit in _SUITED_ORDERS:
        for offset in (1, 2):
            j = _first_index(kinds, (suit, rank + offset), set())
            if j is None:
                continue
            third = rank + 2 if offset == 1 else rank + 1
            k = _first_index(kinds, (suit, third), {j})
            if k is None:
                continue
            complete, partial = _best_meld_count(_without(kinds, 0, j, k))
            candidate = (complete + 1, partial)
            if _meld_score(candidate) > _meld_score(best):
                best = candidate

    # partials from adjacent positions
    for i in range(len(kinds) - 1):
        a, b = kinds[i], kinds[i + 1]
        if a == b or (a[0] == b[0] and a[0] in _SUITED_ORDERS and b[1] - a[1] <= 2):
            complete, partial = _best_meld_count(_without(kinds, i, i + 1))
            candidate = (complete, partial + 1)
            if _meld_score(candidate) > _meld_score(best):
                best = candidate

    return best


def _kinds(tiles: list[Tile]) -> tuple[_Kind, ...]:
    return tuple(sorted(sort_key(t) for t in tiles))


def shanten_from_melds(tiles: list[Tile]) -> int:
    count = len(tiles)
    if count == 0:
        return -1
    complete, partial = _best_meld_count(_kinds(tiles))
    return max(-1, count // 3 - 1 - complete - partial)


def shanten_normal(tiles: list[Tile]) -> int:
    """Standard form estimate: best over every pair choice, or no pair plus one."""
    best = MAX_SHANTEN
    for group in group_tiles(tiles).values():
        if len(group) < 2:
            continue
        rest = list(tiles)
        rest.remove(group[0])
        rest.remove(group[1])
        best = min(best, shanten_from_melds(rest))
    return min(best, shanten_from_melds(tiles) + 1)


def shanten_seven_pairs(tiles: list[Tile]) -> int:
    if len(tiles) not in SEVEN_PAIRS_SIZES:
        return MAX_SHANTEN
    pairs = sum(1 for group in group_tiles(tiles).values() if len(group) >= 2)
    return 6 - pairs


def calculate_shanten(tiles: list[Tile]) -> int:
    """
    Estimate shanten for a list of tiles.

    An empty list is 8. Bonus tiles are ignored.
    """
    if not tiles:
        return MAX_SHANTEN
    playing = [t for t in tiles if not is_bonus(t)]
    return min(shanten_normal(playing), shanten_seven_pairs(playing))
