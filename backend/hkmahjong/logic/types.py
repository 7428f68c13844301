"""
Pydantic models for game logic data structures.

Contains typed models for round results, action payloads, claim options,
deferred AI steps and player views that cross component boundaries.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hkmahjong.logic.enums import AIStepType, ClaimKind, MeldType, RoundPhase, RoundResultType, WindName
from hkmahjong.logic.tiles import Tile


class WinResult(BaseModel):
    """Round ended with a winner."""

    model_config = ConfigDict(frozen=True)

    type: Literal[RoundResultType.SELF_DRAW, RoundResultType.DISCARD_WIN]
    winner_seat: int
    discarder_seat: int | None = None
    winning_tile_id: int | None = None
    fan: int
    breakdown: list[str]
    special: str | None = None
    points: int
    scores: list[int]


class DrawGameResult(BaseModel):
    """Round ended with an exhausted wall."""

    model_config = ConfigDict(frozen=True)

    type: Literal[RoundResultType.DRAW_GAME] = RoundResultType.DRAW_GAME
    scores: list[int]


RoundResult = WinResult | DrawGameResult


class DiscardActionData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tile_id: int


class ClaimActionData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: ClaimKind
    chow_choice: tuple[int, int] | None = None  # ids of the two hand tiles


class ClaimOption(BaseModel):
    """A claim the viewing seat can make right now."""

    model_config = ConfigDict(frozen=True)

    kind: ClaimKind
    chow_choices: list[tuple[int, int]] = Field(default_factory=list)


class AIStep(BaseModel):
    """
    A deferred AI action.

    The step is only executed while the round still matches the seat, phase
    and action count it was scheduled for.
    """

    model_config = ConfigDict(frozen=True)

    step_type: AIStepType
    seat: int
    phase: RoundPhase
    action_count: int


class MeldView(BaseModel):
    type: MeldType
    tiles: list[Tile]
    from_seat: int | None = None


class PlayerView(BaseModel):
    seat: int
    seat_wind: WindName
    is_ai: bool
    score: int
    hand_size: int
    hand: list[Tile] | None = None  # only for the viewing seat
    melds: list[MeldView]
    discards: list[Tile]
    bonus: list[Tile]


class GameView(BaseModel):
    seat: int | None  # viewing seat, None for a spectator
    round_number: int
    round_wind: WindName
    phase: RoundPhase
    current_seat: int
    wall_remaining: int
    last_discard: Tile | None = None
    last_discard_seat: int | None = None
    awaiting_claim_seat: int | None = None
    scores: list[int]
    players: list[PlayerView]
    available_claims: list[ClaimOption] = Field(default_factory=list)
    result: RoundResult | None = None
