"""Error taxonomy shared by the classifier, the workflows and the API client."""
from __future__ import annotations

from typing import Any, Iterable


class ConsoleError(RuntimeError):
    """Base class for every error raised by the console."""


class ClassificationError(ConsoleError, ValueError):
    """Raised when an uploaded filename cannot be turned into an identity.

    Classification errors are terminal: retrying the same file can never
    succeed, the operator has to pick a different one.
    """

    code = "unclassified"

    def __init__(self, filename: str, message: str | None = None) -> None:
        self.filename = filename
        super().__init__(message or f"unrecognized filename: {filename!r}")


class UnrecognizedFilename(ClassificationError):
    code = "unrecognized_filename"


class InvalidDate(ClassificationError):
    code = "invalid_date"

    def __init__(self, filename: str, value: str) -> None:
        self.value = value
        super().__init__(filename, f"{value} is not a calendar date")


class StepError(ConsoleError):
    """Failure of a single backend call, recoverable through a retry.

    ``payload`` carries the decoded response body when the backend answered
    with a structured error, so that the most specific message can be shown.
    """

    def __init__(self, message: str = "", *, payload: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class UploadError(StepError):
    pass


class CheckFailed(StepError):
    """The check call answered with a non-empty ``detail``."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason, payload={"message": reason})
        self.reason = reason


class UpdateError(StepError):
    pass


class ProcessError(StepError):
    pass


class WorkflowStateError(ConsoleError):
    """An operator action is not allowed in the current workflow state."""


def describe_failure(exc: BaseException, default: str, fields: Iterable[str] = ("message",)) -> str:
    """Return the human readable message for a failed step.

    Structured payload fields are tried first, in the given order, then the
    transport message, then ``default``. The first non-empty value wins.
    """

    payload = getattr(exc, "payload", None)
    if isinstance(payload, dict):
        for field in fields:
            value = payload.get(field)
            if isinstance(value, str) and value.strip():
                return value
    transport = str(exc).strip()
    if transport:
        return transport
    return default


__all__ = [
    "CheckFailed",
    "ClassificationError",
    "ConsoleError",
    "InvalidDate",
    "ProcessError",
    "StepError",
    "UnrecognizedFilename",
    "UpdateError",
    "UploadError",
    "WorkflowStateError",
    "describe_failure",
]
