"""Check-then-update workflow for board (ranking) files."""
from __future__ import annotations

import asyncio
from dataclasses import replace

from rankconsole.core.errors import CheckFailed, WorkflowStateError
from rankconsole.core.log import get_logger
from rankconsole.core.messages import Messages
from rankconsole.domain import BoardIdentity, BoardPhase, BoardWorkflowState, StepState, StepStatus
from rankconsole.infrastructure.service import RankingService

from .steps import ProgressReporter, WorkflowStep

logger = get_logger("application.board")


class BoardWorkflow:
    """Runs ``check`` and, once it passed, ``update`` for one board edition.

    The check is a cheap validation gate; the update mutates the ranking
    and streams progress lines while it runs. A failed update is retried on
    its own, the check result stays valid.
    """

    def __init__(self, identity: BoardIdentity, service: RankingService, messages: Messages) -> None:
        self.identity = identity
        self._service = service
        self._force = False
        self._state = BoardWorkflowState()
        self._check = WorkflowStep(
            "check",
            self._run_check,
            default_message=messages.failure("check"),
            on_change=self._on_step_change,
        )
        self._update = WorkflowStep(
            "update",
            self._run_update,
            default_message=messages.failure("update"),
            on_change=self._on_step_change,
        )

    @property
    def state(self) -> BoardWorkflowState:
        return self._state

    @property
    def phase(self) -> BoardPhase:
        return self._state.phase

    @property
    def is_complete(self) -> bool:
        return self._state.phase is BoardPhase.UPDATE_SUCCEEDED

    @property
    def update_allowed(self) -> bool:
        return self._state.check.status is StepStatus.SUCCESS

    def _on_step_change(self, name: str, step_state: StepState) -> None:
        self._state = replace(self._state, **{name: step_state})

    # ------------------------------------------------------------------
    # backend calls
    # ------------------------------------------------------------------
    async def _run_check(self, report: ProgressReporter) -> None:
        identity = self.identity
        result = await self._service.check_file(identity.board.code, identity.part.value, identity.issue)
        if result.detail:
            raise CheckFailed(result.detail)

    async def _run_update(self, report: ProgressReporter) -> None:
        identity = self.identity
        lines = self._service.update_ranking(
            identity.board.code,
            identity.part.value,
            identity.issue,
            self._force,
        )
        async for line in lines:
            report(line)

    # ------------------------------------------------------------------
    # operator actions
    # ------------------------------------------------------------------
    def check(self) -> asyncio.Task | None:
        return self._check.start()

    def retry_check(self) -> asyncio.Task | None:
        if not self._check.can_retry:
            raise WorkflowStateError("check can only be retried after a failure")
        return self._check.start()

    def update(self, force: bool = False) -> asyncio.Task | None:
        if not self.update_allowed:
            raise WorkflowStateError("update requires a successful check")
        if self._update.status is not StepStatus.LOADING:
            self._force = force
        return self._update.start()

    def retry_update(self, force: bool = False) -> asyncio.Task | None:
        if not self._update.can_retry:
            raise WorkflowStateError("update can only be retried after a failure")
        return self.update(force)

    def pending_tasks(self) -> list[asyncio.Task]:
        tasks = (self._check.task, self._update.task)
        return [task for task in tasks if task is not None and not task.done()]

    def abandon(self) -> None:
        """Drop both steps; results of calls still in flight are ignored."""

        logger.info("abandoning board session %s", self.identity.to_dict())
        self._check.reset()
        self._update.reset()


__all__ = ["BoardWorkflow"]
