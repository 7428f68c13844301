"""
Tile representation utilities for Hong Kong Mahjong.

A tile is an immutable (id, suit, rank) value. The id is assigned once when
the tile set is built and is the only identity a tile has; two tiles are
"same kind" (value-equal) when suit and rank match.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from hkmahjong.logic.enums import Suit

SUITED = (Suit.MAN, Suit.PIN, Suit.SOU)
HONORS = (Suit.WIND, Suit.DRAGON)
BONUS = (Suit.FLOWER, Suit.SEASON)

# ranks per suit
SUITED_RANKS = 9
WIND_RANKS = 4  # East, South, West, North
DRAGON_RANKS = 3  # Chun, Hatsu, Haku
BONUS_RANKS = 4

COPIES_PER_PLAYING_TILE = 4
TOTAL_TILES = 144

# wind ranks
EAST = 1
SOUTH = 2
WEST = 3
NORTH = 4

SUIT_ORDER: dict[Suit, int] = {suit: index for index, suit in enumerate(Suit)}

_SUIT_LETTERS = {Suit.MAN: "m", Suit.PIN: "p", Suit.SOU: "s"}
_WIND_LABELS = ("East", "South", "West", "North")
_DRAGON_LABELS = ("Chun", "Hatsu", "Haku")
_FLOWER_LABELS = ("Plum", "Orchid", "Chrysanthemum", "Bamboo")
_SEASON_LABELS = ("Spring", "Summer", "Autumn", "Winter")

TileKey = tuple[Suit, int]


class Tile(BaseModel):
    """A single physical tile."""

    model_config = ConfigDict(frozen=True)

    id: int
    suit: Suit
    rank: int

    def __str__(self) -> str:
        return tile_label(self)


def is_bonus(tile: Tile) -> bool:
    """Check if tile is a flower or season."""
    return tile.suit in BONUS


def is_honor(tile: Tile) -> bool:
    """Check if tile is an honor (wind or dragon)."""
    return tile.suit in HONORS


def is_suited(tile: Tile) -> bool:
    """Check if tile belongs to one of the three numbered suits."""
    return tile.suit in SUITED


def tile_key(tile: Tile) -> TileKey:
    return tile.suit, tile.rank


def is_same_kind(a: Tile, b: Tile) -> bool:
    """Value equality: same suit and rank, regardless of id."""
    return a.suit == b.suit and a.rank == b.rank


def sort_key(tile: Tile) -> tuple[int, int]:
    return SUIT_ORDER[tile.suit], tile.rank


def sort_tiles(tiles: Iterable[Tile]) -> list[Tile]:
    """
    Sort tiles by suit order (man < pin < sou < wind < dragon < flower < season), then rank.

    The sort is stable, so tiles of the same kind keep their relative order.
    """
    return sorted(tiles, key=sort_key)


def group_tiles(tiles: Iterable[Tile]) -> dict[TileKey, list[Tile]]:
    """Group tiles by kind, keeping first-seen order of both groups and members."""
    groups: dict[TileKey, list[Tile]] = {}
    for tile in tiles:
        groups.setdefault(tile_key(tile), []).append(tile)
    return groups


def playing_tiles(tiles: Iterable[Tile]) -> list[Tile]:
    """Drop bonus tiles."""
    return [t for t in tiles if not is_bonus(t)]


def count_kind(tiles: Iterable[Tile], tile: Tile) -> int:
    return sum(1 for t in tiles if is_same_kind(t, tile))


def tile_label(tile: Tile) -> str:
    """Short human-readable label: "5m", "East", "Chun", "Plum"."""
    if tile.suit in _SUIT_LETTERS:
        return f"{tile.rank}{_SUIT_LETTERS[tile.suit]}"
    labels = {
        Suit.WIND: _WIND_LABELS,
        Suit.DRAGON: _DRAGON_LABELS,
        Suit.FLOWER: _FLOWER_LABELS,
        Suit.SEASON: _SEASON_LABELS,
    }[tile.suit]
    if 1 <= tile.rank <= len(labels):
        return labels[tile.rank - 1]
    return f"{tile.suit.value}-{tile.rank}"


def build_tile_set() -> list[Tile]:
    """
    Build the 144-tile set in canonical order with ids 0-143.

    3 suits x 9 ranks x 4 copies, 4 winds x 4, 3 dragons x 4, then one of
    each flower and season.
    """
    kinds: list[tuple[Suit, int, int]] = [
        (suit, rank, COPIES_PER_PLAYING_TILE) for suit in SUITED for rank in range(1, SUITED_RANKS + 1)
    ]
    kinds += [(Suit.WIND, rank, COPIES_PER_PLAYING_TILE) for rank in range(1, WIND_RANKS + 1)]
    kinds += [(Suit.DRAGON, rank, COPIES_PER_PLAYING_TILE) for rank in range(1, DRAGON_RANKS + 1)]
    kinds += [(suit, rank, 1) for suit in BONUS for rank in range(1, BONUS_RANKS + 1)]

    tiles: list[Tile] = []
    for suit, rank, copies in kinds:
        for _ in range(copies):
            tiles.append(Tile(id=len(tiles), suit=suit, rank=rank))
    return tiles
