"""Single-step workflow for daily snapshot files."""
from __future__ import annotations

import asyncio

from rankconsole.core.errors import WorkflowStateError
from rankconsole.core.log import get_logger
from rankconsole.core.messages import Messages
from rankconsole.domain import DataIdentity, DataPhase, DataWorkflowState, StepState
from rankconsole.infrastructure.service import RankingService

from .steps import ProgressReporter, WorkflowStep

logger = get_logger("application.data")


class DataWorkflow:
    def __init__(self, identity: DataIdentity, service: RankingService, messages: Messages) -> None:
        self.identity = identity
        self._service = service
        self._state = DataWorkflowState()
        self._process = WorkflowStep(
            "process",
            self._run_process,
            default_message=messages.failure("process"),
            on_change=self._on_step_change,
        )

    @property
    def state(self) -> DataWorkflowState:
        return self._state

    @property
    def phase(self) -> DataPhase:
        return self._state.phase

    @property
    def is_complete(self) -> bool:
        return self._state.phase is DataPhase.SUCCEEDED

    def _on_step_change(self, name: str, step_state: StepState) -> None:
        self._state = DataWorkflowState(process=step_state)

    async def _run_process(self, report: ProgressReporter) -> None:
        await self._service.update_snapshot(self.identity.date_key)

    def start(self) -> asyncio.Task | None:
        return self._process.start()

    def retry(self) -> asyncio.Task | None:
        if not self._process.can_retry:
            raise WorkflowStateError("process can only be retried after a failure")
        return self._process.start()

    def pending_tasks(self) -> list[asyncio.Task]:
        task = self._process.task
        return [task] if task is not None and not task.done() else []

    def abandon(self) -> None:
        logger.info("abandoning data session %s", self.identity.date_key)
        self._process.reset()


__all__ = ["DataWorkflow"]
