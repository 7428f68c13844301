"""
Tests for GameSession: paced AI play on the running event loop.

Pacing is turned off (scale 0) unless a test needs a step to stay pending.
"""

import asyncio

import pytest

from hkmahjong.logic.enums import ClaimKind, GameErrorCode, RoundPhase
from hkmahjong.logic.events import ErrorEvent
from hkmahjong.logic.service import MahjongGameService
from hkmahjong.logic.settings import GameSettings
from hkmahjong.session.manager import GameSession
from hkmahjong.session.settings import SessionSettings
from hkmahjong.tests.conftest import FIXED_SEED, FixedRandom

MAX_HUMAN_ACTIONS = 500


def _session(human_seat: int | None = 0, pacing_scale: float = 0) -> GameSession:
    return GameSession(
        GameSettings(human_seat=human_seat),
        SessionSettings(pacing_scale=pacing_scale),
        pacing_rng=FixedRandom(),
    )


async def _play_human_turns(session: GameSession) -> int:
    """Draw, discard the newest tile, pass on claims and take any win offered."""
    for actions in range(MAX_HUMAN_ACTIONS):
        await session.wait_idle()
        if session.is_round_over:
            return actions
        view = session.view()
        can_win = any(option.kind == ClaimKind.WIN for option in view.available_claims)
        if can_win:
            await session.act("claim", {"kind": "win"})
        elif view.phase == RoundPhase.DRAW:
            await session.act("draw")
        elif view.phase == RoundPhase.DISCARD:
            hand = view.players[0].hand
            assert hand is not None
            await session.act("discard", {"tile_id": hand[-1].id})
        elif view.awaiting_claim_seat == 0:
            await session.act("pass")
        else:
            pytest.fail(f"session stalled in {view.phase} phase")
    pytest.fail("round did not finish")


class TestAllAISession:
    async def test_round_plays_to_the_end(self):
        session = _session(human_seat=None)

        await session.start(seed=FIXED_SEED)
        await session.wait_idle()

        assert session.is_round_over
        assert session.pending_step is None

    async def test_next_round(self):
        session = _session(human_seat=None)
        await session.start(seed=FIXED_SEED)
        await session.wait_idle()

        await session.next_round()
        await session.wait_idle()

        game_state = session.service.game_state
        assert game_state is not None
        assert game_state.round_number == 1
        assert session.is_round_over

    async def test_act_without_human_seat(self):
        session = _session(human_seat=None)
        await session.start(seed=FIXED_SEED)

        assert await session.act("draw") == []
        session.close()


class TestHumanSession:
    async def test_waits_for_human_dealer(self):
        session = _session()

        await session.start(seed=FIXED_SEED)
        await session.wait_idle()

        view = session.view()
        assert view.phase == RoundPhase.DRAW
        assert view.current_seat == 0
        assert session.pending_step is None

    async def test_scripted_human_finishes_round(self):
        session = _session()
        await session.start(seed=FIXED_SEED)

        actions = await _play_human_turns(session)

        assert actions > 0
        assert session.is_round_over

    async def test_rejected_action_returns_error(self):
        session = _session()
        await session.start(seed=FIXED_SEED)

        events = await session.act("discard", {"tile_id": -1})

        assert isinstance(events[0], ErrorEvent)
        assert events[0].code == GameErrorCode.INVALID_TRANSITION

    async def test_observers_see_ai_moves(self):
        session = _session()
        seen = []
        session.subscribe(lambda events, view: seen.extend(events))
        await session.start(seed=FIXED_SEED)

        await session.act("draw")
        hand = session.view().players[0].hand
        assert hand is not None
        await session.act("discard", {"tile_id": hand[-1].id})
        await session.wait_idle()

        assert any(e.type == "discard" for e in seen)
        assert len(seen) > 3


class TestPauseAndClose:
    async def test_pause_cancels_and_resume_reschedules(self):
        session = _session(human_seat=None, pacing_scale=1.0)
        await session.start(seed=FIXED_SEED)
        step = session.pending_step
        assert step is not None

        session.pause()
        await asyncio.sleep(0.01)

        assert session.is_paused
        assert session.pending_step is None
        await session.wait_idle()

        session.resume()

        assert not session.is_paused
        assert session.pending_step == step
        session.close()

    async def test_close_stops_everything(self):
        session = _session(human_seat=None, pacing_scale=1.0)
        await session.start(seed=FIXED_SEED)

        session.close()

        assert session.is_closed
        assert session.pending_step is None
        assert await session.next_round() == []
        assert await session.start(seed=FIXED_SEED) == []

    async def test_pause_is_idempotent(self):
        session = _session(human_seat=None, pacing_scale=1.0)
        await session.start(seed=FIXED_SEED)

        session.pause()
        session.pause()
        session.resume()
        session.resume()

        assert session.pending_step is not None
        session.close()

    async def test_failing_ai_step_closes_the_session(self, monkeypatch):
        def broken(self, step):
            raise KeyError("tile")

        monkeypatch.setattr(MahjongGameService, "execute_ai_step", broken)
        session = _session(human_seat=None)
        await session.start(seed=FIXED_SEED)

        await session.wait_idle()

        assert session.is_closed
        assert session.pending_step is None
        assert not session.is_round_over
