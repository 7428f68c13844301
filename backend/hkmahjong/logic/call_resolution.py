"""Claim resolution for AI seats after a discard.

Priority is win > pong/kong > chow. Seats are scanned in turn order starting
right after the discarder: first every seat for a win, then every seat for a
pong or kong, and only then the single seat after the discarder for a chow.
The human seat is never scanned here; it has already claimed or passed
through its first right of refusal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from hkmahjong.logic.enums import ClaimKind, RoundPhase
from hkmahjong.logic.exceptions import InvalidTransitionError
from hkmahjong.logic.hand import check_win
from hkmahjong.logic.state_utils import next_seat, seats_after
from hkmahjong.logic.turn import advance_after_claims, apply_meld_claim, process_claim

if TYPE_CHECKING:
    from hkmahjong.logic.ai_player_controller import AIPlayerController
    from hkmahjong.logic.events import GameEvent
    from hkmahjong.logic.state import MahjongGameState

logger = structlog.get_logger()


def resolve_ai_claims(
    game_state: MahjongGameState,
    controller: AIPlayerController,
) -> tuple[MahjongGameState, list[GameEvent]]:
    """
    Let the AI seats contend for the last discard and apply the winning claim.

    With no claim the turn passes to the seat after the discarder, or the
    round ends as a draw game when the wall is empty.
    """
    round_state = game_state.round_state
    if round_state.phase != RoundPhase.CLAIM:
        raise InvalidTransitionError(f"cannot resolve claims during {round_state.phase.value} phase")
    if round_state.awaiting_claim_seat is not None:
        raise InvalidTransitionError(f"waiting for seat {round_state.awaiting_claim_seat} to claim or pass")
    tile = round_state.last_discard
    discarder = round_state.last_discard_seat
    if tile is None or discarder is None:
        raise InvalidTransitionError("no discard to resolve")

    num_players = len(round_state.players)
    ai_seats = [seat for seat in seats_after(discarder, num_players) if controller.is_ai_player(seat)]

    for seat in ai_seats:
        player = round_state.players[seat]
        if controller.wants_win(seat) and check_win([*player.tiles, tile], list(player.melds)):
            logger.info("ai claims win", seat=seat, tile=str(tile), from_seat=discarder)
            return process_claim(game_state, seat, ClaimKind.WIN)

    for seat in ai_seats:
        kind = controller.get_pong_claim(seat, round_state, tile)
        if kind is not None:
            logger.info("ai claims meld", seat=seat, kind=kind, tile=str(tile), from_seat=discarder)
            return apply_meld_claim(game_state, seat, kind)

    chow_seat = next_seat(discarder, num_players)
    if controller.is_ai_player(chow_seat):
        chow_choice = controller.get_chow_claim(chow_seat, round_state, tile)
        if chow_choice is not None:
            logger.info("ai claims chow", seat=chow_seat, tile=str(tile), from_seat=discarder)
            return apply_meld_claim(game_state, chow_seat, ClaimKind.CHOW, chow_choice)

    return advance_after_claims(game_state)
