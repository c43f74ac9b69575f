"""Upload control and session ownership.

At most one session (board or data) exists at a time. Every completed
upload opens a new session and supersedes the previous one; calls still in
flight for the old session are abandoned, not cancelled, and their results
are dropped by the step generation checks.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Union

from rankconsole.core.errors import (
    ClassificationError,
    UploadError,
    WorkflowStateError,
    describe_failure,
)
from rankconsole.core.filename import classify
from rankconsole.core.log import get_logger
from rankconsole.core.messages import Messages, load_messages
from rankconsole.core.settings import load_settings
from rankconsole.domain import BoardIdentity, DataIdentity, Identity, StepStatus
from rankconsole.infrastructure.service import RankingService, get_ranking_service

from .board import BoardWorkflow
from .data import DataWorkflow

logger = get_logger("application.orchestrator")

Workflow = Union[BoardWorkflow, DataWorkflow]


class UploadStatus(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class UploadState:
    filename: str | None = None
    status: UploadStatus = UploadStatus.IDLE
    fraction: float = 0.0
    error_message: str = ""
    error_code: str | None = None


@dataclass(slots=True)
class Session:
    generation: int
    identity: Identity
    workflow: Workflow
    dialog_open: bool = True

    @property
    def is_complete(self) -> bool:
        return self.workflow.is_complete


class UploadOrchestrator:
    def __init__(
        self,
        service_factory: Callable[[], RankingService] = get_ranking_service,
        messages: Messages | None = None,
    ) -> None:
        self._service_factory = service_factory
        self.messages = messages or load_messages()
        self._upload = UploadState()
        self._upload_generation = 0
        self._last_file: tuple[str, bytes] | None = None
        self._session: Session | None = None
        self._session_generation = 0

    @property
    def upload_state(self) -> UploadState:
        return self._upload

    @property
    def session(self) -> Session | None:
        return self._session

    # ------------------------------------------------------------------
    # upload control
    # ------------------------------------------------------------------
    async def upload(self, filename: str, content: bytes) -> Identity | None:
        """Classify, send and dispatch a file.

        Returns the identity, or ``None`` when a newer upload superseded this
        one before it finished. Classification failures and upload failures
        are recorded on the upload state and re-raised.
        """

        self._upload_generation += 1
        token = self._upload_generation
        self._last_file = (filename, content)
        self._upload = UploadState(filename=filename, status=UploadStatus.UPLOADING)

        try:
            identity = classify(filename)
        except ClassificationError as exc:
            logger.info("rejected %s: %s", filename, exc)
            self._upload = replace(
                self._upload,
                status=UploadStatus.FAILED,
                error_message=str(exc),
                error_code=exc.code,
            )
            raise

        def on_progress(fraction: float) -> None:
            if token == self._upload_generation:
                self._upload = replace(self._upload, fraction=min(max(fraction, 0.0), 1.0))

        try:
            await self._service_factory().upload_file(filename, content, on_progress)
        except Exception as exc:
            if token != self._upload_generation:
                logger.debug("stale upload failure for %s dropped", filename)
                return None
            message = describe_failure(exc, self.messages.failure("upload"), ("detail", "message"))
            logger.warning("upload of %s failed: %s", filename, message)
            self._upload = replace(self._upload, status=UploadStatus.FAILED, error_message=message)
            if isinstance(exc, UploadError):
                raise
            raise UploadError(message) from exc

        if token != self._upload_generation:
            logger.info("upload of %s finished after a newer upload, not dispatched", filename)
            return None

        self._upload = replace(self._upload, status=UploadStatus.SUCCESS, fraction=1.0)
        self.on_upload_complete(identity)
        return identity

    async def retry_upload(self) -> Identity | None:
        if self._last_file is None or self._upload.status is not UploadStatus.FAILED:
            raise WorkflowStateError("no failed upload to retry")
        if self._upload.error_code is not None:
            raise WorkflowStateError("the file name was rejected, choose another file")
        filename, content = self._last_file
        return await self.upload(filename, content)

    def reset_upload(self) -> None:
        if self._upload.status is UploadStatus.UPLOADING:
            raise WorkflowStateError("an upload is in progress")
        self._upload_generation += 1
        self._last_file = None
        self._upload = UploadState()

    # ------------------------------------------------------------------
    # sessions
    # ------------------------------------------------------------------
    def on_upload_complete(self, identity: Identity) -> Session:
        """Open a fresh session for ``identity``, superseding any other."""

        previous = self._session
        if previous is not None:
            logger.info("session %d superseded by a new upload", previous.generation)
            previous.workflow.abandon()

        self._session_generation += 1
        service = self._service_factory()
        workflow: Workflow
        if isinstance(identity, BoardIdentity):
            workflow = BoardWorkflow(identity, service, self.messages)
        elif isinstance(identity, DataIdentity):
            workflow = DataWorkflow(identity, service, self.messages)
        else:
            raise TypeError(f"unsupported identity: {identity!r}")

        self._session = Session(generation=self._session_generation, identity=identity, workflow=workflow)
        logger.info("session %d opened for %s", self._session_generation, identity.to_dict())

        if isinstance(workflow, DataWorkflow):
            workflow.start()
        return self._session

    def _require_session(self) -> Session:
        if self._session is None:
            raise WorkflowStateError("no active session")
        return self._session

    def board_workflow(self) -> BoardWorkflow:
        workflow = self._require_session().workflow
        if not isinstance(workflow, BoardWorkflow):
            raise WorkflowStateError("the active session is not a board session")
        return workflow

    def data_workflow(self) -> DataWorkflow:
        workflow = self._require_session().workflow
        if not isinstance(workflow, DataWorkflow):
            raise WorkflowStateError("the active session is not a data session")
        return workflow

    def open_session(self) -> Session:
        session = self._require_session()
        session.dialog_open = True
        return session

    def close_session(self) -> bool:
        """Hide the dialog. Returns ``True`` when the session was cleared."""

        session = self._require_session()
        workflow = session.workflow
        if isinstance(workflow, DataWorkflow) and workflow.state.process.status is StepStatus.LOADING:
            raise WorkflowStateError("the snapshot is still being processed")

        session.dialog_open = False
        if session.is_complete:
            logger.info("session %d finished", session.generation)
            self._session = None
            return True
        return False

    async def wait_idle(self) -> None:
        """Wait until no step of the current session is running."""

        while self._session is not None:
            tasks = self._session.workflow.pending_tasks()
            if not tasks:
                return
            await asyncio.gather(*tasks)

    def reset(self) -> None:
        if self._session is not None:
            self._session.workflow.abandon()
        self._session = None
        self._upload_generation += 1
        self._upload = UploadState()
        self._last_file = None


_orchestrator: UploadOrchestrator | None = None


def get_upload_orchestrator() -> UploadOrchestrator:
    """Return the process-wide orchestrator."""

    global _orchestrator
    if _orchestrator is None:
        _orchestrator = UploadOrchestrator(messages=load_messages(load_settings().locale))
    return _orchestrator


def reset_console_state() -> None:
    """Drop the orchestrator (used in tests)."""

    global _orchestrator
    if _orchestrator is not None:
        _orchestrator.reset()
    _orchestrator = None
