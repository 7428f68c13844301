"""
AI player controller as a pure decision-maker.

Maps seats to their strategy objects and answers decision questions against
a round state. Orchestration is handled by MahjongGameService.
"""

from hkmahjong.logic.ai_player import AIPlayer
from hkmahjong.logic.enums import ClaimKind
from hkmahjong.logic.melds import has_chow_with_tile
from hkmahjong.logic.state import MahjongRoundState
from hkmahjong.logic.tiles import Tile, count_kind, playing_tiles


class AIPlayerController:
    """
    Decision-maker for AI players.

    Provides methods to check AI player identity and get AI decisions for
    discards and claims. Does not orchestrate game flow.
    """

    def __init__(self, ai_players: dict[int, AIPlayer]) -> None:
        self._ai_players = ai_players

    def _get_ai_player(self, seat: int) -> AIPlayer | None:
        return self._ai_players.get(seat)

    def is_ai_player(self, seat: int) -> bool:
        return seat in self._ai_players

    @property
    def ai_player_seats(self) -> set[int]:
        return set(self._ai_players.keys())

    def observe_discard(self, tile: Tile) -> None:
        """Let every AI remember a discarded tile kind."""
        for ai_player in self._ai_players.values():
            ai_player.track_discard(tile)

    def reset_memory(self) -> None:
        """Clear discard memories at the start of a round."""
        for ai_player in self._ai_players.values():
            ai_player.forget_discards()

    def get_discard(self, seat: int, round_state: MahjongRoundState) -> int | None:
        """
        Tile id the AI at seat wants to discard.

        Returns None if seat is not an AI player or holds no playing tile.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None:
            return None
        player = round_state.players[seat]
        tile = ai_player.choose_discard(
            list(player.tiles),
            list(player.melds),
            round_state.round_wind,
            player.seat_wind,
        )
        return tile.id if tile is not None else None

    def wants_win(self, seat: int) -> bool:
        ai_player = self._get_ai_player(seat)
        return ai_player is not None and ai_player.should_win()

    def get_pong_claim(self, seat: int, round_state: MahjongRoundState, tile: Tile) -> ClaimKind | None:
        """
        Pong, kong or decline for the AI at seat.

        The pong policy is only consulted when the hand holds two matching
        tiles; an accepted pong becomes a kong when it holds three.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None:
            return None
        player = round_state.players[seat]
        hand = list(player.tiles)
        if count_kind(playing_tiles(hand), tile) < 2:
            return None
        if not ai_player.should_pong(hand, list(player.melds), tile, round_state.round_wind, player.seat_wind):
            return None
        return ClaimKind.KONG if ai_player.should_kong(hand, tile) else ClaimKind.PONG

    def get_chow_claim(self, seat: int, round_state: MahjongRoundState, tile: Tile) -> tuple[int, int] | None:
        """
        Hand tile ids for a chow, or None to decline.

        The chow policy is only consulted when a chow can be formed.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None:
            return None
        player = round_state.players[seat]
        hand = list(player.tiles)
        if not has_chow_with_tile(playing_tiles(hand), tile):
            return None
        if not ai_player.should_chow(hand, list(player.melds), tile):
            return None
        chow = ai_player.choose_chow(hand, tile)
        if chow is None:
            return None
        first, second = (t.id for t in chow if t.id != tile.id)
        return first, second
