import asyncio

import pytest

from hkmahjong.logic.enums import AIStepType, RoundPhase
from hkmahjong.logic.settings import GameSettings, PacingDelay
from hkmahjong.logic.types import AIStep
from hkmahjong.session.ai_scheduler import AIActionScheduler, step_delay
from hkmahjong.tests.conftest import FixedRandom

SLOW = PacingDelay(base=10.0, jitter=0.0)
INSTANT = PacingDelay(base=0.0, jitter=0.0)


def _step(step_type: AIStepType = AIStepType.DRAW, seat: int = 1) -> AIStep:
    return AIStep(step_type=step_type, seat=seat, phase=RoundPhase.DRAW, action_count=0)


def _scheduler(executed: list, settings: GameSettings | None = None, pacing_scale: float = 1.0):
    def execute(step):
        executed.append(step)
        return []

    return AIActionScheduler(execute, settings or GameSettings(ai_draw_delay=INSTANT), FixedRandom(), pacing_scale)


class TestStepDelay:
    def test_delay_per_step_type(self):
        settings = GameSettings()

        assert step_delay(settings, _step(AIStepType.DRAW)) == settings.ai_draw_delay
        assert step_delay(settings, _step(AIStepType.DISCARD)) == settings.ai_discard_delay
        assert step_delay(settings, _step(AIStepType.RESOLVE_CLAIMS)) == settings.ai_claim_delay


class TestAIActionScheduler:
    async def test_step_runs_and_reports(self):
        executed = []
        scheduler = _scheduler(executed)
        done = asyncio.Event()
        reported = []

        async def on_done(step, events):
            reported.append((step, events))
            done.set()

        scheduler.schedule(_step(), on_done)
        await asyncio.wait_for(done.wait(), timeout=1.0)

        assert executed == [_step()]
        assert reported == [(_step(), [])]
        assert scheduler.pending_step is None

    async def test_pending_step_while_waiting(self):
        scheduler = _scheduler([], GameSettings(ai_draw_delay=SLOW))

        scheduler.schedule(_step(), _noop)

        assert scheduler.pending_step == _step()
        scheduler.cancel()

    async def test_cancel_prevents_execution(self):
        executed = []
        scheduler = _scheduler(executed, GameSettings(ai_draw_delay=SLOW))

        scheduler.schedule(_step(), _noop)
        scheduler.cancel()
        await asyncio.sleep(0.05)

        assert executed == []
        assert scheduler.pending_step is None
        assert scheduler.active_task is None

    async def test_new_schedule_replaces_old(self):
        executed = []
        settings = GameSettings(ai_draw_delay=SLOW, ai_discard_delay=INSTANT)
        scheduler = _scheduler(executed, settings)
        done = asyncio.Event()

        async def on_done(step, events):
            done.set()

        scheduler.schedule(_step(AIStepType.DRAW), _noop)
        scheduler.schedule(_step(AIStepType.DISCARD), on_done)
        await asyncio.wait_for(done.wait(), timeout=1.0)

        assert executed == [_step(AIStepType.DISCARD)]

    async def test_zero_pacing_ignores_delays(self):
        executed = []
        scheduler = _scheduler(executed, GameSettings(ai_draw_delay=SLOW), pacing_scale=0)
        done = asyncio.Event()

        async def on_done(step, events):
            done.set()

        scheduler.schedule(_step(), on_done)
        await asyncio.wait_for(done.wait(), timeout=1.0)

        assert len(executed) == 1

    @pytest.mark.parametrize("error", [RuntimeError("boom"), KeyError("tile")])
    async def test_failing_step_is_reported(self, error):
        def execute(step):
            raise error

        scheduler = AIActionScheduler(execute, GameSettings(ai_draw_delay=INSTANT), FixedRandom())
        reported = []
        failed = []

        async def on_done(step, events):
            reported.append(step)

        scheduler.schedule(_step(), on_done, failed.append)
        task = scheduler.active_task
        assert task is not None
        await task

        assert task.exception() is None
        assert reported == []
        assert failed == [_step()]
        assert scheduler.pending_step is None


async def _noop(step, events) -> None:
    pass
