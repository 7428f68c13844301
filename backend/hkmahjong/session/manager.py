"""
Game session: one table, one human seat, paced AI seats.

The session owns the MahjongGameService and an AIActionScheduler. After
every accepted transition it asks the service which AI step the round is
waiting on and schedules it; human actions go straight to the service.
Pausing cancels the outstanding step (the presentation went out of view),
resuming schedules it again from the current state.
A step that raises closes the session.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any

import structlog

from hkmahjong.logic.enums import TERMINAL_PHASES
from hkmahjong.logic.service import MahjongGameService
from hkmahjong.session.ai_scheduler import AIActionScheduler
from hkmahjong.session.settings import SessionSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from hkmahjong.logic.enums import Difficulty, GameAction
    from hkmahjong.logic.events import GameEvent
    from hkmahjong.logic.service import Observer
    from hkmahjong.logic.settings import GameSettings
    from hkmahjong.logic.types import AIStep, GameView

logger = structlog.get_logger()


class GameSession:
    """
    Drive a single game on the running event loop.

    Every method that can change the game state must be called from within
    the loop, since AI steps are scheduled as tasks.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        session_settings: SessionSettings | None = None,
        pacing_rng: random.Random | None = None,
    ) -> None:
        self._session_settings = session_settings or SessionSettings()
        self._service = MahjongGameService(settings)
        self._settings = self._service.settings
        self._scheduler = AIActionScheduler(
            self._service.execute_ai_step,
            self._settings,
            pacing_rng or random.Random(),  # noqa: S311
            pacing_scale=self._session_settings.pacing_scale,
        )
        self._paused = False
        self._closed = False

    @property
    def service(self) -> MahjongGameService:
        return self._service

    @property
    def human_seat(self) -> int | None:
        return self._settings.human_seat

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def pending_step(self) -> AIStep | None:
        return self._scheduler.pending_step

    @property
    def is_round_over(self) -> bool:
        state = self._service.game_state
        return state is not None and state.round_state.phase in TERMINAL_PHASES

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        return self._service.subscribe(observer)

    def view(self) -> GameView:
        return self._service.get_view(self.human_seat)

    async def start(self, difficulty: Difficulty | None = None, seed: str | None = None) -> list[GameEvent]:
        """Start a new game and schedule the first AI step, if any."""
        if self._closed:
            logger.warning("start on closed session")
            return []
        self._scheduler.cancel()
        events = self._service.start_session(
            difficulty or self._session_settings.difficulty,
            seed or self._session_settings.seed,
        )
        self._reschedule()
        return events

    async def act(self, action: GameAction | str, data: dict[str, Any] | None = None) -> list[GameEvent]:
        """Perform an action for the human seat."""
        seat = self.human_seat
        if self._closed or seat is None:
            logger.warning("action ignored", closed=self._closed, human_seat=seat, action=action)
            return []
        structlog.contextvars.bind_contextvars(seat=seat)
        events = self._service.handle_action(seat, action, data)
        self._reschedule()
        return events

    async def next_round(self) -> list[GameEvent]:
        """Deal the next round once the current one has ended."""
        if self._closed:
            logger.warning("next round on closed session")
            return []
        events = self._service.start_next_round()
        self._reschedule()
        return events

    def pause(self) -> None:
        """Cancel the outstanding AI step until resume()."""
        if self._paused:
            return
        self._paused = True
        self._scheduler.cancel()
        logger.info("session paused")

    def resume(self) -> None:
        """Reschedule the AI step the round is waiting on."""
        if not self._paused:
            return
        self._paused = False
        logger.info("session resumed")
        self._reschedule()

    def close(self) -> None:
        """Abandon the session; nothing runs after this."""
        self._closed = True
        self._scheduler.cancel()
        logger.info("session closed")

    async def wait_idle(self) -> None:
        """
        Wait until no AI step is outstanding.

        Returns when the round waits on the human seat, has ended, or the
        session was paused or closed.
        """
        task = self._scheduler.active_task
        while task is not None:
            await asyncio.wait({task})
            task = self._scheduler.active_task

    def _reschedule(self) -> None:
        if self._paused or self._closed:
            return
        step = self._service.pending_ai_step()
        if step is None:
            self._scheduler.cancel()
            return
        if step == self._scheduler.pending_step:
            return
        self._scheduler.schedule(step, self._on_step_done, self._on_step_failed)

    async def _on_step_done(self, step: AIStep, events: list[GameEvent]) -> None:
        structlog.contextvars.bind_contextvars(seat=step.seat)
        logger.debug("ai step done", step_type=step.step_type, events=len(events))
        self._reschedule()

    def _on_step_failed(self, step: AIStep) -> None:
        logger.error("closing session after failed ai step", step_type=step.step_type, seat=step.seat)
        self.close()
