import pytest

from hkmahjong.logic.enums import MeldType
from hkmahjong.logic.melds import Meld
from hkmahjong.logic.scoring import BASE_POINTS, FanResult, calc_fan, calc_fan_seven_pairs, calculate_points
from hkmahjong.logic.tiles import Tile
from hkmahjong.tests.conftest import make_tiles


def _meld(meld_type: MeldType, **tiles: str) -> Meld:
    return Meld(type=meld_type, tiles=tuple(make_tiles(**tiles)))


def _score(melds: list[Meld], pair: list[Tile]) -> FanResult:
    all_tiles = [t for m in melds for t in m.tiles] + pair
    return calc_fan(melds, pair[0], all_tiles)


class TestCalcFan:
    def test_chicken_hand_floor(self):
        melds = [
            _meld(MeldType.PONG, man="222"),
            _meld(MeldType.CHOW, pin="456"),
            _meld(MeldType.CHOW, sou="789"),
            _meld(MeldType.CHOW, man="123"),
        ]

        result = _score(melds, make_tiles(sou="55"))

        assert result.fan == 1
        assert result.breakdown == ("Chicken Hand (min 1)",)

    def test_all_sequences(self):
        melds = [
            _meld(MeldType.CHOW, man="123"),
            _meld(MeldType.CHOW, pin="456"),
            _meld(MeldType.CHOW, sou="789"),
            _meld(MeldType.CHOW, man="234"),
        ]

        result = _score(melds, make_tiles(pin="99"))

        assert result.fan == 1
        assert result.breakdown == ("All Sequences +1",)

    def test_all_sequences_needs_non_honor_pair(self):
        melds = [
            _meld(MeldType.CHOW, man="123"),
            _meld(MeldType.CHOW, pin="456"),
            _meld(MeldType.CHOW, sou="789"),
            _meld(MeldType.CHOW, man="234"),
        ]

        result = _score(melds, make_tiles(winds="33"))

        assert "All Sequences +1" not in result.breakdown
        assert result.fan == 1

    def test_pure_one_suit_stacks_with_all_triplets(self):
        melds = [
            _meld(MeldType.PONG, man="111"),
            _meld(MeldType.PONG, man="333"),
            _meld(MeldType.PONG, man="555"),
            _meld(MeldType.PONG, man="777"),
        ]

        result = _score(melds, make_tiles(man="99"))

        assert result.fan == 10
        assert result.breakdown == ("All Triplets +3", "Pure One-Suit +7")

    def test_mixed_one_suit(self):
        melds = [
            _meld(MeldType.CHOW, pin="123"),
            _meld(MeldType.CHOW, pin="456"),
            _meld(MeldType.CHOW, pin="789"),
            _meld(MeldType.PONG, winds="444"),
        ]

        result = _score(melds, make_tiles(pin="55"))

        assert result.breakdown == ("Mixed One-Suit +3", "Wind Triplet +1")
        assert result.fan == 4

    def test_all_honors(self):
        melds = [
            _meld(MeldType.PONG, winds="111"),
            _meld(MeldType.PONG, winds="222"),
            _meld(MeldType.PONG, dragons="111"),
            _meld(MeldType.PONG, dragons="222"),
        ]

        result = _score(melds, make_tiles(dragons="33"))

        assert result.fan == 3 + 10 + 2 + 2 + 1
        assert result.breakdown == (
            "All Triplets +3",
            "All Honors +10",
            "Dragon Triplet +1",
            "Dragon Triplet +1",
            "Wind Triplet +1",
            "Wind Triplet +1",
            "Dragon Pair +1",
        )

    def test_any_wind_triplet_scores(self):
        melds = [
            _meld(MeldType.PONG, winds="333"),
            _meld(MeldType.CHOW, man="123"),
            _meld(MeldType.CHOW, pin="456"),
            _meld(MeldType.CHOW, sou="789"),
        ]

        result = _score(melds, make_tiles(sou="11"))

        assert result.breakdown == ("Wind Triplet +1",)

    def test_kong_adds_fan(self):
        melds = [
            _meld(MeldType.KONG, man="2222"),
            _meld(MeldType.PONG, pin="333"),
            _meld(MeldType.CHOW, sou="456"),
            _meld(MeldType.CHOW, man="678"),
        ]

        result = _score(melds, make_tiles(pin="99"))

        assert result.breakdown == ("Kong +1",)
        assert result.fan == 1

    def test_bonus_tiles_do_not_score(self):
        melds = [
            _meld(MeldType.PONG, man="111"),
            _meld(MeldType.PONG, man="333"),
            _meld(MeldType.PONG, man="555"),
            _meld(MeldType.PONG, man="777"),
        ]
        pair = make_tiles(man="99")
        all_tiles = [t for m in melds for t in m.tiles] + pair

        without_bonus = calc_fan(melds, pair[0], all_tiles)
        with_bonus = calc_fan(melds, pair[0], all_tiles + make_tiles(flowers="12"))

        assert with_bonus == without_bonus


class TestSevenPairs:
    def test_fixed_fan(self):
        result = calc_fan_seven_pairs()

        assert result.fan == 4
        assert result.breakdown == ("Seven Pairs +4",)


class TestCalculatePoints:
    def test_base_times_power_of_two(self):
        assert calculate_points(0) == BASE_POINTS
        assert calculate_points(1) == 8
        assert calculate_points(3) == 32
        assert calculate_points(10) == 4096

    def test_custom_base(self):
        assert calculate_points(2, base_points=1) == 4

    def test_negative_fan_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            calculate_points(-1)
