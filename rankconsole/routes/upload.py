from __future__ import annotations

from pathlib import PurePosixPath

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from rankconsole.application import console_view, get_upload_orchestrator
from rankconsole.core.errors import ClassificationError, UploadError, WorkflowStateError
from rankconsole.core.schema import ConsoleView

router = APIRouter(prefix="/upload", tags=["upload"])


def _classification_error(exc: ClassificationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"code": exc.code, "message": str(exc)})


@router.get("")
async def get_upload() -> ConsoleView:
    return console_view(get_upload_orchestrator())


@router.post("")
async def upload_file(file: UploadFile = File(...), wait: bool = Query(default=False)) -> ConsoleView:
    """Upload one board or data file and open the matching session."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="Uploaded file must have a filename")

    orchestrator = get_upload_orchestrator()
    try:
        content = await file.read()
        await orchestrator.upload(PurePosixPath(file.filename.replace("\\", "/")).name, content)
    except ClassificationError as exc:
        raise _classification_error(exc) from exc
    except UploadError as exc:
        raise HTTPException(status_code=502, detail=orchestrator.upload_state.error_message) from exc
    finally:
        await file.close()

    if wait:
        await orchestrator.wait_idle()
    return console_view(orchestrator)


@router.post("/retry")
async def retry_upload(wait: bool = Query(default=False)) -> ConsoleView:
    orchestrator = get_upload_orchestrator()
    try:
        await orchestrator.retry_upload()
    except WorkflowStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except UploadError as exc:
        raise HTTPException(status_code=502, detail=orchestrator.upload_state.error_message) from exc

    if wait:
        await orchestrator.wait_idle()
    return console_view(orchestrator)


@router.delete("")
async def reset_upload() -> ConsoleView:
    orchestrator = get_upload_orchestrator()
    try:
        orchestrator.reset_upload()
    except WorkflowStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return console_view(orchestrator)
