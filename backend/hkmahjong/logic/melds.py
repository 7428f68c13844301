"""
Meld model and chow candidate search.

A meld owns the specific tile instances it consumes. Declared melds (made by
claiming a discard) also record the seat the claimed tile came from;
melds produced by hand decomposition leave it unset.
"""

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

from hkmahjong.logic.enums import MeldType
from hkmahjong.logic.tiles import SUITED_RANKS, Tile, is_suited

CHOW_SIZE = 3
PONG_SIZE = 3
KONG_SIZE = 4


class Meld(BaseModel):
    """A pair, chow, pong or kong."""

    model_config = ConfigDict(frozen=True)

    type: MeldType
    tiles: tuple[Tile, ...]
    from_seat: int | None = None

    @property
    def first(self) -> Tile:
        return self.tiles[0]

    def is_triplet(self) -> bool:
        """Pong or kong."""
        return self.type in (MeldType.PONG, MeldType.KONG)

    def tile_ids(self) -> list[int]:
        return [t.id for t in self.tiles]


def is_chow(a: Tile, b: Tile, c: Tile) -> bool:
    """Three suited tiles of one suit with consecutive ranks, in any order."""
    if not (a.suit == b.suit == c.suit) or not is_suited(a):
        return False
    low, mid, high = sorted((a.rank, b.rank, c.rank))
    return mid == low + 1 and high == mid + 1


def find_chows_with_tile(hand: list[Tile], tile: Tile) -> Iterator[tuple[Tile, Tile, Tile]]:
    """
    Yield the chows the hand can form with the given tile.

    Windows [r-2..r], [r-1..r+1], [r..r+2] are tried in that order, clipped
    to ranks 1-9. For each window the first hand tile of each missing rank is
    used. Each yielded chow includes the given tile and is sorted by rank.
    Two windows can yield the same rank signature from different tile
    instances; see unique_chow_options.
    """
    if not is_suited(tile):
        return
    r = tile.rank
    windows = [(r - 2, r - 1, r), (r - 1, r, r + 1), (r, r + 1, r + 2)]
    for window in windows:
        if window[0] < 1 or window[2] > SUITED_RANKS:
            continue
        used = [tile]
        for needed in window:
            if needed == r:
                continue
            match = next((t for t in hand if t.suit == tile.suit and t.rank == needed), None)
            if match is None:
                break
            used.append(match)
        else:
            used.sort(key=lambda t: t.rank)
            yield used[0], used[1], used[2]


def chow_signature(chow: tuple[Tile, ...]) -> tuple[int, ...]:
    return tuple(sorted(t.rank for t in chow))


def unique_chow_options(hand: list[Tile], tile: Tile) -> list[tuple[Tile, Tile, Tile]]:
    """Chow candidates de-duplicated by rank signature, first occurrence kept."""
    seen: set[tuple[int, ...]] = set()
    options = []
    for chow in find_chows_with_tile(hand, tile):
        signature = chow_signature(chow)
        if signature in seen:
            continue
        seen.add(signature)
        options.append(chow)
    return options


def has_chow_with_tile(hand: list[Tile], tile: Tile) -> bool:
    return next(find_chows_with_tile(hand, tile), None) is not None
