"""Centralized game settings for Hong Kong Mahjong."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hkmahjong.logic.enums import Difficulty
from hkmahjong.logic.exceptions import UnsupportedSettingsError
from hkmahjong.logic.tiles import EAST, NORTH, SOUTH, WEST

NUM_PLAYERS = 4
SUPPORTED_NUM_PLAYERS = 4
STARTING_HAND_SIZE = 13


class PacingDelay(BaseModel):
    """A fixed delay plus a uniformly random extra, in seconds."""

    model_config = ConfigDict(frozen=True)

    base: float
    jitter: float

    def sample(self, roll: float, scale: float = 1.0) -> float:
        """Delay for a roll in [0, 1), scaled."""
        return (self.base + self.jitter * roll) * scale


class GameSettings(BaseModel):
    """
    Configuration for a game.

    All fields have default values matching the standard four-seat table with
    the human at seat 0.
    """

    model_config = ConfigDict(frozen=True)

    # --- Table ---
    num_players: int = 4
    human_seat: int | None = 0  # None for an all-AI table
    seat_winds: tuple[int, ...] = (EAST, WEST, NORTH, SOUTH)
    round_wind: int = EAST
    starting_hand_size: int = STARTING_HAND_SIZE

    # --- Scoring ---
    base_points: int = 4

    # --- AI ---
    default_difficulty: Difficulty = Difficulty.MEDIUM
    ai_draw_delay: PacingDelay = PacingDelay(base=0.4, jitter=0.6)
    ai_discard_delay: PacingDelay = PacingDelay(base=0.5, jitter=0.7)
    ai_claim_delay: PacingDelay = PacingDelay(base=0.6, jitter=0.4)


def validate_settings(settings: GameSettings) -> None:
    """Validate that all settings values are supported by the engine.

    Raises UnsupportedSettingsError listing every unsupported value.
    """
    errors: list[str] = []

    if settings.num_players != SUPPORTED_NUM_PLAYERS:
        errors.append(f"num_players={settings.num_players} is not supported (only 4-player games)")

    if settings.human_seat is not None and not (0 <= settings.human_seat < settings.num_players):
        errors.append(f"human_seat={settings.human_seat} is out of range")

    if len(settings.seat_winds) != settings.num_players:
        errors.append(f"seat_winds must have {settings.num_players} entries")
    elif sorted(settings.seat_winds) != [EAST, SOUTH, WEST, NORTH]:
        errors.append(f"seat_winds={settings.seat_winds} must assign each wind exactly once")

    if settings.round_wind not in (EAST, SOUTH, WEST, NORTH):
        errors.append(f"round_wind={settings.round_wind} is not a wind rank")

    if settings.starting_hand_size != STARTING_HAND_SIZE:
        errors.append(f"starting_hand_size={settings.starting_hand_size} is not supported")

    if settings.base_points < 1:
        errors.append(f"base_points={settings.base_points} must be positive")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
