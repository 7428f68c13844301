"""
String enum definitions for Hong Kong Mahjong game concepts.
"""

from enum import Enum


class Suit(str, Enum):
    """Tile suits, in the fixed sort order used by the hand engine."""

    MAN = "man"
    PIN = "pin"
    SOU = "sou"
    WIND = "wind"
    DRAGON = "dragon"
    FLOWER = "flower"
    SEASON = "season"


class MeldType(str, Enum):
    """Decomposition units of a hand."""

    PAIR = "pair"
    CHOW = "chow"
    PONG = "pong"
    KONG = "kong"


class ClaimKind(str, Enum):
    """Claims a seat can make on a discard (or win on a self-draw)."""

    WIN = "win"
    KONG = "kong"
    PONG = "pong"
    CHOW = "chow"


class Difficulty(str, Enum):
    """AI difficulty tiers."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class RoundPhase(str, Enum):
    """Phase of a mahjong round."""

    DRAW = "draw"
    DISCARD = "discard"
    CLAIM = "claim"
    WIN = "win"
    DRAW_GAME = "draw_game"


TERMINAL_PHASES = frozenset({RoundPhase.WIN, RoundPhase.DRAW_GAME})


class GameAction(str, Enum):
    """Actions dispatched from the presentation layer to the game service."""

    DRAW = "draw"
    DISCARD = "discard"
    CLAIM = "claim"
    PASS = "pass"  # noqa: S105


class AIStepType(str, Enum):
    """Kinds of deferred AI steps the session schedules."""

    DRAW = "draw"
    DISCARD = "discard"
    RESOLVE_CLAIMS = "resolve_claims"


class GameErrorCode(str, Enum):
    """Error codes reported to the presentation layer for rejected actions."""

    INVALID_TRANSITION = "invalid_transition"
    NOT_A_WINNING_HAND = "not_a_winning_hand"
    ILLEGAL_CLAIM = "illegal_claim"
    VALIDATION_ERROR = "validation_error"
    UNKNOWN_ACTION = "unknown_action"
    GAME_ERROR = "game_error"


class RoundResultType(str, Enum):
    """Types of round end results."""

    SELF_DRAW = "self_draw"
    DISCARD_WIN = "discard_win"
    DRAW_GAME = "draw_game"


class WindName(str, Enum):
    """Wind direction names."""

    EAST = "East"
    SOUTH = "South"
    WEST = "West"
    NORTH = "North"
    UNKNOWN = "Unknown"
