"""
Random number generation for wall shuffling and AI decisions.

1. Generate a cryptographic seed (32 bytes) via the secrets module
2. Derive an independent stream per purpose via SHA512 with domain separation
   (wall per round, AI per seat)
3. Apply a Fisher-Yates shuffle to the 144-tile set

The same seed always produces the same walls and the same AI choices, which
makes whole sessions reproducible in tests and simulations.
"""

from __future__ import annotations

import hashlib
import random
import secrets
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hkmahjong.logic.tiles import Tile

SEED_BYTES = 32
_WALL_DOMAIN_PREFIX = b"hkmj-wall-v1:"
_AI_DOMAIN_PREFIX = b"hkmj-ai-v1:"


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Raises TypeError for non-string input, ValueError for invalid format.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string (64 chars)."""
    return secrets.token_bytes(SEED_BYTES).hex()


def _derive_rng(domain_prefix: bytes, seed_hex: str, index: int) -> random.Random:
    """
    Derive a seeded Random from SHA512(domain_prefix + seed_bytes + index_bytes).

    Domain separation keeps the wall and AI streams independent.
    """
    if not (0 <= index < 2**32):
        raise ValueError("index must be in [0, 2^32)")
    validate_seed_hex(seed_hex)
    data = domain_prefix + bytes.fromhex(seed_hex) + index.to_bytes(4, byteorder="little")
    derived = hashlib.sha512(data).digest()
    return random.Random(int.from_bytes(derived, byteorder="little"))  # noqa: S311


def shuffle_tiles(items: list[Tile], rng: random.Random) -> list[Tile]:
    """
    Fisher-Yates shuffle into a new list.

    For i from n-1 down to 1: swap items[i] with items[randrange(i + 1)].
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randrange(i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def create_wall_rng(seed_hex: str, round_number: int) -> random.Random:
    return _derive_rng(_WALL_DOMAIN_PREFIX, seed_hex, round_number)


def create_ai_rng(seed_hex: str | None, seat: int) -> random.Random:
    """
    Create the RNG an AI seat uses for its probabilistic decisions.

    Unseeded sessions get an OS-seeded Random.
    """
    if seed_hex is None:
        return random.Random()  # noqa: S311
    return _derive_rng(_AI_DOMAIN_PREFIX, seed_hex, seat)
