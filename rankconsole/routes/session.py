from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException, Query

from rankconsole.application import console_view, get_upload_orchestrator
from rankconsole.core.errors import WorkflowStateError
from rankconsole.core.schema import ConsoleView, UpdateRequest

router = APIRouter(prefix="/session", tags=["session"])


async def _settle(task: asyncio.Task | None, wait: bool) -> ConsoleView:
    if wait and task is not None:
        await task
    return console_view(get_upload_orchestrator())


def _conflict(exc: WorkflowStateError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(exc))


@router.get("")
async def get_session() -> ConsoleView:
    return console_view(get_upload_orchestrator())


@router.post("/open")
async def open_session() -> ConsoleView:
    orchestrator = get_upload_orchestrator()
    try:
        orchestrator.open_session()
    except WorkflowStateError as exc:
        raise _conflict(exc) from exc
    return console_view(orchestrator)


@router.post("/close")
async def close_session() -> dict:
    """Dismiss the dialog; the session is cleared only after success."""
    orchestrator = get_upload_orchestrator()
    try:
        cleared = orchestrator.close_session()
    except WorkflowStateError as exc:
        raise _conflict(exc) from exc
    return {"cleared": cleared, "view": console_view(orchestrator).model_dump(mode="json")}


@router.post("/check")
async def run_check(wait: bool = Query(default=False)) -> ConsoleView:
    try:
        # a failed check is retried through the same action
        task = get_upload_orchestrator().board_workflow().check()
    except WorkflowStateError as exc:
        raise _conflict(exc) from exc
    return await _settle(task, wait)


@router.post("/update")
async def run_update(payload: UpdateRequest | None = None, wait: bool = Query(default=False)) -> ConsoleView:
    force = payload.force if payload is not None else False
    try:
        task = get_upload_orchestrator().board_workflow().update(force)
    except WorkflowStateError as exc:
        raise _conflict(exc) from exc
    return await _settle(task, wait)


@router.post("/process/retry")
async def retry_process(wait: bool = Query(default=False)) -> ConsoleView:
    try:
        task = get_upload_orchestrator().data_workflow().retry()
    except WorkflowStateError as exc:
        raise _conflict(exc) from exc
    return await _settle(task, wait)
