"""HTTP client for the ranking backend."""
from __future__ import annotations

from typing import Any, AsyncIterator
from urllib.parse import quote, urlparse

import httpx

from rankconsole.core.errors import ProcessError, StepError, UpdateError, UploadError
from rankconsole.core.log import get_logger

from .service import CheckResult, ProgressCallback

logger = get_logger("infrastructure.ranking_api")


class RankingAPIError(StepError):
    """Raised when a call without a more specific error type fails."""


class RankingAPIClient:
    """:class:`RankingService` implementation over ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        chunk_size: int = 64 * 1024,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        parsed = urlparse(base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("base_url must include scheme and host")

        self._base_url = base_url.rstrip("/")
        self._chunk_size = max(1, chunk_size)
        # the update call streams for as long as the backend works, so only
        # connecting is bounded
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout, read=None))
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    @staticmethod
    def _decode_payload(response: httpx.Response) -> dict[str, Any] | None:
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    async def _raise_for_status(self, response: httpx.Response, error_cls: type[StepError]) -> None:
        if response.is_success:
            return
        await response.aread()
        payload = self._decode_payload(response)
        logger.warning("%s %s -> %s", response.request.method, response.request.url.path, response.status_code)
        raise error_cls(f"{response.status_code} {response.reason_phrase}".strip(), payload=payload)

    @staticmethod
    def _transport_error(exc: httpx.HTTPError, error_cls: type[StepError]) -> StepError:
        return error_cls(str(exc) or type(exc).__name__)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def upload_file(
        self,
        filename: str,
        content: bytes,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        total = len(content)

        async def chunks() -> AsyncIterator[bytes]:
            sent = 0
            for start in range(0, total, self._chunk_size):
                chunk = content[start : start + self._chunk_size]
                yield chunk
                sent += len(chunk)
                if on_progress is not None:
                    on_progress(sent / total)

        headers = {"Content-Type": "application/octet-stream", "Content-Length": str(total)}
        try:
            response = await self._client.post(
                self._url("/upload"),
                params={"filename": filename},
                content=chunks(),
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, UploadError) from exc
        await self._raise_for_status(response, UploadError)
        if on_progress is not None and total == 0:
            on_progress(1.0)

    async def check_file(self, board: str, part: str, issue: int) -> CheckResult:
        try:
            response = await self._client.get(
                self._url("/check"),
                params={"board": board, "part": part, "issue": issue},
            )
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, RankingAPIError) from exc
        await self._raise_for_status(response, RankingAPIError)

        payload = self._decode_payload(response) or {}
        detail = payload.get("detail") or ""
        if not isinstance(detail, str):
            detail = str(detail)
        return CheckResult(detail=detail)

    async def update_ranking(self, board: str, part: str, issue: int, force: bool = False) -> AsyncIterator[str]:
        body = {"board": board, "part": part, "issue": issue, "force": force}
        try:
            async with self._client.stream("POST", self._url("/update"), json=body) as response:
                await self._raise_for_status(response, UpdateError)
                async for line in response.aiter_lines():
                    line = line.strip()
                    if line:
                        yield line
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, UpdateError) from exc

    async def update_snapshot(self, date_iso: str) -> None:
        try:
            response = await self._client.post(self._url(f"/snapshot/{quote(date_iso)}"))
        except httpx.HTTPError as exc:
            raise self._transport_error(exc, ProcessError) from exc
        await self._raise_for_status(response, ProcessError)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["RankingAPIClient", "RankingAPIError"]
