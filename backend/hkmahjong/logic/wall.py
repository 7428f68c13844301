"""
Wall state and operations for Hong Kong Mahjong.

The wall is the full 144-tile set, permuted once when the round starts. A
cursor marks the next tile to draw; it only ever moves forward and the wall
is exhausted once it reaches the end. There is no dead wall: kong
replacements are drawn from the same cursor.
"""

from pydantic import BaseModel, ConfigDict

from hkmahjong.logic.rng import create_wall_rng, shuffle_tiles
from hkmahjong.logic.tiles import TOTAL_TILES, Tile, build_tile_set


class Wall(BaseModel):
    """Immutable wall state for a round."""

    model_config = ConfigDict(frozen=True)

    tiles: tuple[Tile, ...] = ()
    cursor: int = 0


def create_wall(seed_hex: str, round_number: int) -> Wall:
    """
    Build and shuffle a fresh wall for the given round.

    The same seed and round number always produce the same order.
    """
    rng = create_wall_rng(seed_hex, round_number)
    return Wall(tiles=tuple(shuffle_tiles(build_tile_set(), rng)))


def create_wall_from_tiles(tiles: list[Tile]) -> Wall:
    """
    Build a wall with an explicit draw order.

    Used by tests and replays; the list does not have to be a full set.
    """
    ids = [t.id for t in tiles]
    if len(set(ids)) != len(ids):
        raise ValueError("wall tiles must have unique ids")
    if len(tiles) > TOTAL_TILES:
        raise ValueError(f"wall cannot hold more than {TOTAL_TILES} tiles")
    return Wall(tiles=tuple(tiles))


def tiles_remaining(wall: Wall) -> int:
    return len(wall.tiles) - wall.cursor


def is_wall_exhausted(wall: Wall) -> bool:
    return wall.cursor >= len(wall.tiles)


def draw_tile(wall: Wall) -> tuple[Wall, Tile | None]:
    """
    Take the tile under the cursor.

    Returns (new_wall, tile). On an exhausted wall the wall is returned
    unchanged with None.
    """
    if is_wall_exhausted(wall):
        return wall, None
    tile = wall.tiles[wall.cursor]
    return wall.model_copy(update={"cursor": wall.cursor + 1}), tile


def undrawn_tiles(wall: Wall) -> tuple[Tile, ...]:
    return wall.tiles[wall.cursor :]
