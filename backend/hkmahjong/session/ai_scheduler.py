"""
Paced execution of AI steps.

At most one step is outstanding. Scheduling a new step cancels the previous
one, and a step that fires after the round moved on is ignored by the
service, so a cancelled or late task can never act on a newer state.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog

from hkmahjong.logic.enums import AIStepType
from hkmahjong.logic.events import GameEvent
from hkmahjong.logic.types import AIStep

logger = structlog.get_logger()

if TYPE_CHECKING:
    import random

    from hkmahjong.logic.settings import GameSettings, PacingDelay

# called with the step and the events it produced
StepCallback = Callable[[AIStep, list[GameEvent]], Awaitable[None]]
# called with a step whose execution or completion callback raised
FailureCallback = Callable[[AIStep], None]


def step_delay(settings: GameSettings, step: AIStep) -> PacingDelay:
    if step.step_type == AIStepType.DRAW:
        return settings.ai_draw_delay
    if step.step_type == AIStepType.DISCARD:
        return settings.ai_discard_delay
    return settings.ai_claim_delay


class AIActionScheduler:
    """
    Run one AI step at a time after a fixed plus random delay.

    The delay is multiplied by pacing_scale; a scale of 0 plays without
    waiting.
    """

    def __init__(
        self,
        execute: Callable[[AIStep], list[GameEvent]],
        settings: GameSettings,
        rng: random.Random,
        pacing_scale: float = 1.0,
    ) -> None:
        self._execute = execute
        self._settings = settings
        self._rng = rng
        self._pacing_scale = pacing_scale
        self._active_task: asyncio.Task[None] | None = None
        self._scheduled_step: AIStep | None = None

    @property
    def pending_step(self) -> AIStep | None:
        """The step waiting to run, if any."""
        if self._active_task is None or self._active_task.done():
            return None
        return self._scheduled_step

    @property
    def active_task(self) -> asyncio.Task[None] | None:
        return self._active_task

    def schedule(self, step: AIStep, on_done: StepCallback, on_failed: FailureCallback | None = None) -> None:
        """
        Cancel any outstanding step and schedule this one.

        on_failed runs instead of on_done when the step raises.
        """
        self.cancel()
        delay = step_delay(self._settings, step).sample(self._rng.random(), self._pacing_scale)
        self._scheduled_step = step
        self._active_task = asyncio.create_task(self._run_step(delay, step, on_done, on_failed))
        logger.debug("ai step scheduled", step_type=step.step_type, seat=step.seat, delay=round(delay, 3))

    def cancel(self) -> None:
        """Cancel the outstanding step, if any."""
        if self._active_task is not None and not self._active_task.done():
            self._active_task.cancel()
        self._active_task = None
        self._scheduled_step = None

    async def _run_step(
        self,
        delay: float,
        step: AIStep,
        on_done: StepCallback,
        on_failed: FailureCallback | None,
    ) -> None:
        try:
            await asyncio.sleep(delay)
            # past this point the step runs to completion; on_done may schedule the next one
            self._active_task = None
            self._scheduled_step = None
            events = self._execute(step)
            await on_done(step, events)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("ai step failed", step_type=step.step_type, seat=step.seat)
            if on_failed is not None:
                on_failed(step)
