import random

import pytest

from hkmahjong.logic.rng import (
    SEED_BYTES,
    create_ai_rng,
    create_wall_rng,
    generate_seed,
    shuffle_tiles,
    validate_seed_hex,
)
from hkmahjong.logic.tiles import build_tile_set
from hkmahjong.tests.conftest import FIXED_SEED


class TestSeeds:
    def test_generate_seed_is_valid_hex(self):
        seed = generate_seed()

        assert len(seed) == SEED_BYTES * 2
        validate_seed_hex(seed)

    def test_generated_seeds_differ(self):
        assert generate_seed() != generate_seed()

    def test_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="exactly 64 hex characters"):
            validate_seed_hex("abcd")

    def test_rejects_non_hex(self):
        with pytest.raises(ValueError, match="invalid hex"):
            validate_seed_hex("zz" * SEED_BYTES)

    def test_rejects_non_string(self):
        with pytest.raises(TypeError):
            validate_seed_hex(12345)


class TestDerivedStreams:
    def test_wall_rng_is_deterministic(self):
        a = create_wall_rng(FIXED_SEED, 0)
        b = create_wall_rng(FIXED_SEED, 0)

        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_rounds_get_independent_streams(self):
        assert create_wall_rng(FIXED_SEED, 0).random() != create_wall_rng(FIXED_SEED, 1).random()

    def test_ai_stream_differs_from_wall_stream(self):
        assert create_ai_rng(FIXED_SEED, 1).random() != create_wall_rng(FIXED_SEED, 1).random()

    def test_ai_seats_get_independent_streams(self):
        assert create_ai_rng(FIXED_SEED, 1).random() != create_ai_rng(FIXED_SEED, 2).random()

    def test_unseeded_ai_rng(self):
        assert isinstance(create_ai_rng(None, 1), random.Random)

    def test_invalid_seed_is_rejected(self):
        with pytest.raises(ValueError):
            create_wall_rng("not-a-seed", 0)


class TestShuffle:
    def test_is_a_permutation(self):
        tiles = build_tile_set()

        shuffled = shuffle_tiles(tiles, create_wall_rng(FIXED_SEED, 0))

        assert sorted(t.id for t in shuffled) == [t.id for t in tiles]
        assert [t.id for t in shuffled] != [t.id for t in tiles]

    def test_does_not_modify_input(self):
        tiles = build_tile_set()
        before = list(tiles)

        shuffle_tiles(tiles, create_wall_rng(FIXED_SEED, 0))

        assert tiles == before
