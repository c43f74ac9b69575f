"""Application services."""

from .board import BoardWorkflow
from .data import DataWorkflow
from .orchestrator import (
    Session,
    UploadOrchestrator,
    UploadState,
    UploadStatus,
    get_upload_orchestrator,
    reset_console_state,
)
from .steps import WorkflowStep
from .views import console_view, session_view, upload_view

__all__ = [
    "BoardWorkflow",
    "DataWorkflow",
    "Session",
    "UploadOrchestrator",
    "UploadState",
    "UploadStatus",
    "WorkflowStep",
    "console_view",
    "get_upload_orchestrator",
    "reset_console_state",
    "session_view",
    "upload_view",
]
