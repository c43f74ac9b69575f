"""Dialog views rendered from the orchestrator state."""
from __future__ import annotations

from rankconsole.core.messages import Messages
from rankconsole.core.schema import ConsoleView, SessionHeader, SessionView, StepView, UploadView
from rankconsole.domain import BoardIdentity, StepState, StepStatus

from .board import BoardWorkflow
from .orchestrator import Session, UploadOrchestrator, UploadState, UploadStatus


def _step_view(
    name: str,
    state: StepState,
    messages: Messages,
    *,
    enabled: bool = True,
    run_label: str | None = None,
    show_progress: bool = False,
) -> StepView:
    actions = messages.actions
    if state.status is StepStatus.IDLE and run_label:
        action, action_label = "run", run_label
    elif state.status is StepStatus.FAILED:
        action, action_label = "retry", actions.get("retry", "")
    elif state.status is StepStatus.LOADING:
        action, action_label = "none", actions.get("running", "")
    elif state.status is StepStatus.SUCCESS:
        action, action_label = "none", actions.get("done", "")
    else:
        action, action_label = "none", ""

    progress = state.progress_text if show_progress and state.status is StepStatus.LOADING else ""
    return StepView(
        name=name,
        label=messages.steps.get(name, name),
        status=state.status,
        error=state.error_message,
        progress=progress,
        action=action,
        action_label=action_label,
        enabled=enabled,
    )


def session_view(session: Session, messages: Messages) -> SessionView:
    workflow = session.workflow
    actions = messages.actions
    footer = actions.get("done", "") if session.is_complete else actions.get("close", "")

    if isinstance(workflow, BoardWorkflow):
        identity: BoardIdentity = workflow.identity
        state = workflow.state
        header = SessionHeader(
            title=messages.titles.get("board", ""),
            labels=[
                messages.boards.get(identity.board.value, identity.board.value),
                messages.parts.get(identity.part.value, identity.part.value),
                messages.issue_label(identity.issue),
            ],
        )
        steps = [
            _step_view("check", state.check, messages, run_label=messages.steps.get("check")),
            _step_view(
                "update",
                state.update,
                messages,
                enabled=workflow.update_allowed,
                run_label=messages.steps.get("update"),
                show_progress=True,
            ),
        ]
        return SessionView(
            kind="board",
            identity=identity.to_dict(),
            phase=workflow.phase.value,
            dialog_open=session.dialog_open,
            header=header,
            steps=steps,
            footer_label=footer,
            closes_session=session.is_complete,
        )

    process = workflow.state.process
    return SessionView(
        kind="data",
        identity=workflow.identity.to_dict(),
        phase=workflow.phase.value,
        dialog_open=session.dialog_open,
        header=SessionHeader(title=messages.titles.get("data", ""), labels=[workflow.identity.date_key]),
        # the process step starts by itself, only a retry is ever offered
        steps=[_step_view("process", process, messages)],
        footer_label=footer,
        closes_session=session.is_complete,
        can_close=process.status is not StepStatus.LOADING,
    )


def upload_view(state: UploadState) -> UploadView:
    return UploadView(
        filename=state.filename,
        status=state.status.value,
        progress=state.fraction,
        error=state.error_message,
        error_code=state.error_code,
        # a rejected file name fails the same way on every attempt
        can_retry=state.status is UploadStatus.FAILED and state.error_code is None,
    )


def console_view(orchestrator: UploadOrchestrator) -> ConsoleView:
    session = orchestrator.session
    return ConsoleView(
        upload=upload_view(orchestrator.upload_state),
        session=session_view(session, orchestrator.messages) if session is not None else None,
    )
