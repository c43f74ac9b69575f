"""A single asynchronous backend call with an observable status.

Each :class:`WorkflowStep` owns one :class:`StepState` value. The value is
only replaced by the step itself (start, settlement, progress, reset), never
by a sibling step. Every start and every reset bumps the step generation;
a settlement or progress event carrying an older generation belongs to an
abandoned attempt and is discarded.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable

from rankconsole.core.errors import WorkflowStateError, describe_failure
from rankconsole.core.log import get_logger
from rankconsole.domain import StepState, StepStatus

logger = get_logger("application.steps")

ProgressReporter = Callable[[str], None]
StepAction = Callable[[ProgressReporter], Awaitable[None]]
StateListener = Callable[[str, StepState], None]

# abandoned attempts keep running until the backend answers
_background: set[asyncio.Task] = set()


class WorkflowStep:
    def __init__(
        self,
        name: str,
        action: StepAction,
        *,
        default_message: str,
        message_fields: Iterable[str] = ("message",),
        on_change: StateListener | None = None,
    ) -> None:
        self.name = name
        self._action = action
        self._default_message = default_message
        self._message_fields = tuple(message_fields)
        self._on_change = on_change
        self._state = StepState()
        self._generation = 0
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> StepState:
        return self._state

    @property
    def status(self) -> StepStatus:
        return self._state.status

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def task(self) -> asyncio.Task | None:
        """Task of the current attempt, ``None`` after a reset."""

        return self._task

    @property
    def can_retry(self) -> bool:
        return self._state.status is StepStatus.FAILED

    def _publish(self, state: StepState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(self.name, state)

    # ------------------------------------------------------------------
    # transitions
    # ------------------------------------------------------------------
    def start(self) -> asyncio.Task | None:
        """Move to loading and schedule the backend call.

        Returns the task settling this attempt, or ``None`` when the step is
        already loading or has succeeded. Must be called with a running
        event loop.
        """

        if self._state.status is StepStatus.LOADING:
            logger.debug("%s already running, start ignored", self.name)
            return None
        if self._state.status is StepStatus.SUCCESS:
            logger.debug("%s already succeeded, start ignored", self.name)
            return None

        self._generation += 1
        token = self._generation
        self._publish(self._state.loading())
        logger.debug("%s started (attempt %d)", self.name, token)

        task = asyncio.get_running_loop().create_task(self._execute(token))
        _background.add(task)
        task.add_done_callback(_background.discard)
        self._task = task
        return task

    async def run(self) -> None:
        task = self.start()
        if task is not None:
            await task

    async def retry(self) -> None:
        if not self.can_retry:
            raise WorkflowStateError(f"{self.name} can only be retried after a failure")
        await self.run()

    def reset(self) -> None:
        """Return to idle; any attempt still in flight becomes stale."""

        self._generation += 1
        self._task = None
        self._publish(StepState())

    # ------------------------------------------------------------------
    # settlement
    # ------------------------------------------------------------------
    def _is_current(self, token: int) -> bool:
        return token == self._generation and self._state.status is StepStatus.LOADING

    def _report(self, token: int) -> ProgressReporter:
        def report(text: str) -> None:
            if not self._is_current(token):
                logger.debug("%s: stale progress from attempt %d dropped", self.name, token)
                return
            self._publish(self._state.with_progress(str(text)))

        return report

    async def _execute(self, token: int) -> None:
        try:
            await self._action(self._report(token))
        except Exception as exc:
            if not self._is_current(token):
                logger.debug("%s: stale failure from attempt %d dropped", self.name, token)
                return
            message = describe_failure(exc, self._default_message, self._message_fields)
            logger.warning("%s failed: %s", self.name, message)
            self._publish(self._state.failed(message))
        else:
            if not self._is_current(token):
                logger.debug("%s: stale success from attempt %d dropped", self.name, token)
                return
            logger.debug("%s succeeded (attempt %d)", self.name, token)
            self._publish(self._state.succeeded())


__all__ = ["ProgressReporter", "StepAction", "WorkflowStep"]
