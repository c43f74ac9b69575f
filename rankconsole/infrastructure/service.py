"""Backend service contract used by the workflows.

The workflows never talk to a transport directly; an implementation of
:class:`RankingService` is installed with ``configure_ranking_service``
during application start-up (tests install an in-memory fake).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator, Callable, Protocol

from rankconsole.core.errors import ConsoleError

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Answer of the check call; an empty ``detail`` means the file passed."""

    detail: str = ""

    @property
    def passed(self) -> bool:
        return self.detail == ""


class RankingService(Protocol):
    """Contract for ranking backend integrations."""

    async def upload_file(
        self,
        filename: str,
        content: bytes,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Send the raw file, reporting the sent fraction (0..1)."""

    async def check_file(self, board: str, part: str, issue: int) -> CheckResult:
        """Validate an uploaded board file."""

    def update_ranking(self, board: str, part: str, issue: int, force: bool = False) -> AsyncIterator[str]:
        """Run the ranking update, yielding human readable progress lines.

        Normal exhaustion means success; failure is raised from the iterator.
        """

    async def update_snapshot(self, date_iso: str) -> None:
        """Process the daily snapshot for ``date_iso`` (``yyyy-MM-dd``)."""


_service: RankingService | None = None


def configure_ranking_service(service: RankingService | None) -> None:
    """Install the backend used by the upload orchestrator."""

    global _service
    _service = service


def ranking_service_configured() -> bool:
    return _service is not None


def get_ranking_service() -> RankingService:
    """Return the currently configured backend."""

    if _service is None:
        raise ConsoleError("ranking service is not configured")
    return _service
