"""Domain event models.

Every transition returns the events it produced alongside the new state.
Each event names its audience in `target`: "all" for a broadcast, or
"seat_N" for a single seat. Hidden information (the drawn tile, claim
options) only goes to the seat it belongs to.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hkmahjong.logic.enums import GameErrorCode, MeldType, RoundPhase
from hkmahjong.logic.types import ClaimOption, DrawGameResult, WinResult

BROADCAST = "all"


def seat_target(seat: int) -> str:
    return f"seat_{seat}"


def parse_target_seat(target: str) -> int | None:
    """Return the seat of a "seat_N" target, None for a broadcast."""
    if target == BROADCAST:
        return None
    if target.startswith("seat_"):
        seat = int(target.split("_")[1])
        if seat < 0:
            raise ValueError(f"invalid seat number in target: {target}")
        return seat
    raise ValueError(f"invalid target value: {target}")


class EventType(StrEnum):
    """Types of game events."""

    ROUND_STARTED = "round_started"
    DRAW = "draw"
    BONUS_TILE = "bonus_tile"
    DISCARD = "discard"
    MELD = "meld"
    CLAIM_PROMPT = "claim_prompt"
    TURN = "turn"
    ROUND_END = "round_end"
    ERROR = "error"


class GameEvent(BaseModel):
    """Base class for all domain game events."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    target: str


class RoundStartedEvent(GameEvent):
    """Event broadcast when a round has been dealt."""

    type: Literal[EventType.ROUND_STARTED] = EventType.ROUND_STARTED
    target: str = BROADCAST
    round_number: int
    dealer_seat: int
    wall_remaining: int


class DrawEvent(GameEvent):
    """Event sent to a player when they draw a tile."""

    type: Literal[EventType.DRAW] = EventType.DRAW
    seat: int
    tile_id: int
    wall_remaining: int


class BonusTileEvent(GameEvent):
    """Event broadcast when a flower or season is set aside."""

    type: Literal[EventType.BONUS_TILE] = EventType.BONUS_TILE
    target: str = BROADCAST
    seat: int
    tile_id: int


class DiscardEvent(GameEvent):
    """Event broadcast when a player discards a tile."""

    type: Literal[EventType.DISCARD] = EventType.DISCARD
    target: str = BROADCAST
    seat: int
    tile_id: int


class MeldEvent(GameEvent):
    """Event broadcast when a player claims a discard into a meld."""

    type: Literal[EventType.MELD] = EventType.MELD
    target: str = BROADCAST
    meld_type: MeldType
    caller_seat: int
    from_seat: int
    tile_ids: list[int]
    called_tile_id: int


class ClaimPromptEvent(GameEvent):
    """Event sent to the human seat when it may claim the last discard."""

    type: Literal[EventType.CLAIM_PROMPT] = EventType.CLAIM_PROMPT
    tile_id: int
    from_seat: int
    options: list[ClaimOption] = Field(default_factory=list)


class TurnEvent(GameEvent):
    """Event broadcast when the acting seat or phase changes."""

    type: Literal[EventType.TURN] = EventType.TURN
    target: str = BROADCAST
    current_seat: int
    phase: RoundPhase
    wall_remaining: int


class RoundEndEvent(GameEvent):
    """Event broadcast when a round ends."""

    type: Literal[EventType.ROUND_END] = EventType.ROUND_END
    target: str = BROADCAST
    result: WinResult | DrawGameResult


class ErrorEvent(GameEvent):
    """Event sent to a player when their action is rejected."""

    type: Literal[EventType.ERROR] = EventType.ERROR
    code: GameErrorCode
    message: str
