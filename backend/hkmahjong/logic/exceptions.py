"""Typed domain exceptions for game rule violations.

All rule violations raised by the turn/claim state machine use subclasses of
GameRuleError. The service boundary catches them and converts them into an
ErrorEvent for the acting seat; the stored state is never touched, so a
rejected action is always a no-op.
"""

from hkmahjong.logic.enums import GameErrorCode


class GameRuleError(Exception):
    """Base exception for game rule violations.

    Raised by domain logic (turn.py, round.py, call_resolution.py) when an
    action violates the rules. Caught at the service boundary (service.py)
    and converted to ErrorEvent responses.
    """

    code: GameErrorCode = GameErrorCode.GAME_ERROR


class InvalidTransitionError(GameRuleError):
    """Action attempted outside its legal phase or turn."""

    code = GameErrorCode.INVALID_TRANSITION


class NotAWinningHandError(GameRuleError):
    """Win declared but the hand does not decompose."""

    code = GameErrorCode.NOT_A_WINNING_HAND


class IllegalClaimError(GameRuleError):
    """Claim lacks matching tiles, or chow requested by a non-adjacent seat."""

    code = GameErrorCode.ILLEGAL_CLAIM


class WallExhaustedError(GameRuleError):
    """Draw attempted with no tiles left.

    Never reaches the presentation layer: the state machine turns it into a
    draw game.
    """

    code = GameErrorCode.INVALID_TRANSITION


class UnsupportedSettingsError(GameRuleError):
    """Game settings contain unsupported values that cannot be silently ignored."""
