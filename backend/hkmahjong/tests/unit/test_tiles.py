from collections import Counter

from hkmahjong.logic.enums import Suit
from hkmahjong.logic.tiles import (
    TOTAL_TILES,
    Tile,
    build_tile_set,
    count_kind,
    group_tiles,
    is_bonus,
    is_honor,
    is_same_kind,
    is_suited,
    playing_tiles,
    sort_tiles,
    tile_key,
    tile_label,
)
from hkmahjong.tests.conftest import make_tile, make_tiles


class TestBuildTileSet:
    def test_has_144_unique_ids(self):
        tiles = build_tile_set()

        assert len(tiles) == TOTAL_TILES
        assert sorted(t.id for t in tiles) == list(range(TOTAL_TILES))

    def test_copies_per_kind(self):
        counts = Counter(tile_key(t) for t in build_tile_set())

        assert counts[(Suit.MAN, 5)] == 4
        assert counts[(Suit.WIND, 4)] == 4
        assert counts[(Suit.DRAGON, 3)] == 4
        assert counts[(Suit.FLOWER, 1)] == 1
        assert counts[(Suit.SEASON, 4)] == 1
        assert len(counts) == 34 + 8

    def test_suit_totals(self):
        tiles = build_tile_set()

        assert sum(1 for t in tiles if is_suited(t)) == 108
        assert sum(1 for t in tiles if is_honor(t)) == 28
        assert sum(1 for t in tiles if is_bonus(t)) == 8


class TestClassification:
    def test_categories_are_exclusive(self):
        for tile in make_tiles(man="1", winds="1", dragons="1", flowers="1", seasons="1"):
            flags = [is_suited(tile), is_honor(tile), is_bonus(tile)]
            assert flags.count(True) == 1

    def test_same_kind_ignores_id(self):
        a, b = make_tiles(pin="55")

        assert a.id != b.id
        assert is_same_kind(a, b)
        assert a != b

    def test_different_suit_same_rank(self):
        man, pin = make_tiles(man="3", pin="3")

        assert not is_same_kind(man, pin)


class TestSortAndGroup:
    def test_sort_order_suit_then_rank(self):
        tiles = [
            make_tile(Suit.DRAGON, 1),
            make_tile(Suit.MAN, 9),
            make_tile(Suit.SEASON, 1),
            make_tile(Suit.PIN, 1),
            make_tile(Suit.WIND, 2),
            make_tile(Suit.MAN, 1),
            make_tile(Suit.FLOWER, 3),
        ]

        result = [(t.suit, t.rank) for t in sort_tiles(tiles)]

        assert result == [
            (Suit.MAN, 1),
            (Suit.MAN, 9),
            (Suit.PIN, 1),
            (Suit.WIND, 2),
            (Suit.DRAGON, 1),
            (Suit.FLOWER, 3),
            (Suit.SEASON, 1),
        ]

    def test_group_tiles_keeps_first_seen_order(self):
        tiles = make_tiles(sou="5", man="2", winds="1") + make_tiles(man="2", sou="5")

        groups = group_tiles(tiles)

        assert list(groups) == [(Suit.MAN, 2), (Suit.SOU, 5), (Suit.WIND, 1)]
        assert [t.id for t in groups[(Suit.MAN, 2)]] == [tiles[0].id, tiles[3].id]

    def test_playing_tiles_drops_bonus(self):
        tiles = make_tiles(man="1", flowers="2", seasons="3", dragons="1")

        assert [tile_key(t) for t in playing_tiles(tiles)] == [(Suit.MAN, 1), (Suit.DRAGON, 1)]

    def test_count_kind(self):
        tiles = make_tiles(man="1113")

        assert count_kind(tiles, make_tile(Suit.MAN, 1)) == 3
        assert count_kind(tiles, make_tile(Suit.MAN, 2)) == 0


class TestTileLabel:
    def test_suited_labels(self):
        assert [tile_label(t) for t in make_tiles(man="5", pin="1", sou="9")] == ["5m", "1p", "9s"]

    def test_honor_and_bonus_labels(self):
        tiles = make_tiles(winds="14", dragons="3", flowers="1", seasons="4")

        assert [str(t) for t in tiles] == ["East", "North", "Haku", "Plum", "Winter"]

    def test_out_of_range_rank(self):
        assert tile_label(Tile(id=0, suit=Suit.WIND, rank=7)) == "wind-7"
