"""Immutable workflow state values.

Every transition produces a new value; observers only ever see complete
snapshots of a step or of a whole workflow.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StepStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class StepState:
    status: StepStatus = StepStatus.IDLE
    error_message: str = ""
    progress_text: str = ""

    def loading(self) -> "StepState":
        return StepState(status=StepStatus.LOADING)

    def succeeded(self) -> "StepState":
        return StepState(status=StepStatus.SUCCESS)

    def failed(self, message: str) -> "StepState":
        return StepState(status=StepStatus.FAILED, error_message=message)

    def with_progress(self, text: str) -> "StepState":
        return StepState(status=self.status, error_message=self.error_message, progress_text=text)


class BoardPhase(str, Enum):
    NOT_STARTED = "not_started"
    CHECK_RUNNING = "check_running"
    CHECK_FAILED = "check_failed"
    # check passed, update not started yet
    CHECK_SUCCEEDED = "check_succeeded"
    UPDATE_RUNNING = "update_running"
    UPDATE_FAILED = "update_failed"
    UPDATE_SUCCEEDED = "update_succeeded"


class DataPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class BoardWorkflowState:
    check: StepState = field(default_factory=StepState)
    update: StepState = field(default_factory=StepState)

    @property
    def phase(self) -> BoardPhase:
        if self.update.status is not StepStatus.IDLE:
            return {
                StepStatus.LOADING: BoardPhase.UPDATE_RUNNING,
                StepStatus.SUCCESS: BoardPhase.UPDATE_SUCCEEDED,
                StepStatus.FAILED: BoardPhase.UPDATE_FAILED,
            }[self.update.status]
        return {
            StepStatus.IDLE: BoardPhase.NOT_STARTED,
            StepStatus.LOADING: BoardPhase.CHECK_RUNNING,
            StepStatus.SUCCESS: BoardPhase.CHECK_SUCCEEDED,
            StepStatus.FAILED: BoardPhase.CHECK_FAILED,
        }[self.check.status]


@dataclass(frozen=True, slots=True)
class DataWorkflowState:
    process: StepState = field(default_factory=StepState)

    @property
    def phase(self) -> DataPhase:
        return {
            StepStatus.IDLE: DataPhase.IDLE,
            StepStatus.LOADING: DataPhase.RUNNING,
            StepStatus.SUCCESS: DataPhase.SUCCEEDED,
            StepStatus.FAILED: DataPhase.FAILED,
        }[self.process.status]
