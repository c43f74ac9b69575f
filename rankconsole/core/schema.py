from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from rankconsole.domain import StepStatus


class StepView(BaseModel):
    name: str
    label: str
    status: StepStatus
    error: str = ""
    progress: str = ""
    action: Literal["run", "retry", "none"] = "none"
    action_label: str = ""
    enabled: bool = True


class SessionHeader(BaseModel):
    title: str
    labels: list[str] = Field(default_factory=list)


class SessionView(BaseModel):
    kind: Literal["board", "data"]
    identity: dict
    phase: str
    dialog_open: bool
    header: SessionHeader
    steps: list[StepView] = Field(default_factory=list)
    footer_label: str
    closes_session: bool = False
    can_close: bool = True


class UploadView(BaseModel):
    filename: str | None = None
    status: Literal["idle", "uploading", "success", "failed"] = "idle"
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    error: str = ""
    error_code: str | None = None
    can_retry: bool = False


class ConsoleView(BaseModel):
    upload: UploadView
    session: SessionView | None = None


class UpdateRequest(BaseModel):
    force: bool = False
