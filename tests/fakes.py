from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import AsyncIterator

from rankconsole.core.errors import ProcessError, UpdateError, UploadError
from rankconsole.infrastructure import CheckResult


@dataclass
class UpdateScript:
    lines: list[str] = field(default_factory=list)
    error: BaseException | None = None
    gate: asyncio.Event | None = None


class FakeRankingService:
    """In-memory ranking backend with scripted answers.

    Each queue is consumed one call at a time; once a queue is empty the
    call succeeds.
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.upload_errors: list[BaseException] = []
        self.check_details: list[str] = []
        self.check_errors: list[BaseException] = []
        self.check_gate: asyncio.Event | None = None
        self.update_scripts: list[UpdateScript] = []
        self.snapshot_errors: list[BaseException] = []
        self.snapshot_gate: asyncio.Event | None = None
        self.progress_seen: list[str] = []

    async def upload_file(self, filename, content, on_progress=None):
        self.calls.append(("upload", filename, len(content)))
        if on_progress is not None:
            on_progress(0.5)
            on_progress(1.0)
        if self.upload_errors:
            raise self.upload_errors.pop(0)

    async def check_file(self, board, part, issue):
        self.calls.append(("check", board, part, issue))
        if self.check_gate is not None:
            await self.check_gate.wait()
        if self.check_errors:
            raise self.check_errors.pop(0)
        detail = self.check_details.pop(0) if self.check_details else ""
        return CheckResult(detail=detail)

    async def update_ranking(self, board, part, issue, force=False) -> AsyncIterator[str]:
        self.calls.append(("update", board, part, issue, force))
        script = self.update_scripts.pop(0) if self.update_scripts else UpdateScript()
        for line in script.lines:
            await asyncio.sleep(0)
            yield line
        await asyncio.sleep(0)
        if script.gate is not None:
            await script.gate.wait()
        if script.error is not None:
            raise script.error

    async def update_snapshot(self, date_iso):
        self.calls.append(("snapshot", date_iso))
        if self.snapshot_gate is not None:
            await self.snapshot_gate.wait()
        if self.snapshot_errors:
            raise self.snapshot_errors.pop(0)


def upload_failure(message: str = "", /, **payload) -> UploadError:
    return UploadError(message, payload=payload or None)


def update_failure(message: str = "", /, **payload) -> UpdateError:
    return UpdateError(message, payload=payload or None)


def process_failure(message: str = "", /, **payload) -> ProcessError:
    return ProcessError(message, payload=payload or None)
