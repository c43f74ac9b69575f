from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from rankconsole.core.errors import ProcessError, UpdateError, UploadError, describe_failure
from rankconsole.infrastructure import RankingAPIClient, RankingAPIError

BASE = "http://ranking.test/api"


def _client(handler) -> tuple[RankingAPIClient, httpx.AsyncClient]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RankingAPIClient(BASE, http_client=http_client, chunk_size=4), http_client


def test_rejects_base_url_without_host():
    with pytest.raises(ValueError):
        RankingAPIClient("/api")


def test_upload_streams_body_and_reports_progress():
    captured: dict[str, object] = {}
    fractions: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = request.content
        captured["length"] = request.headers.get("content-length")
        return httpx.Response(200, json={})

    async def scenario():
        client, http_client = _client(handler)
        await client.upload_file("vocaloid-weekly-main-87.csv", b"0123456789", fractions.append)
        await http_client.aclose()

    asyncio.run(scenario())

    assert captured["url"] == f"{BASE}/upload?filename=vocaloid-weekly-main-87.csv"
    assert captured["body"] == b"0123456789"
    assert captured["length"] == "10"
    assert fractions == [0.4, 0.8, 1.0]


def test_upload_error_carries_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(413, json={"detail": "文件过大"})

    async def scenario():
        client, http_client = _client(handler)
        try:
            await client.upload_file("2024-05-01.json", b"{}")
        finally:
            await http_client.aclose()

    with pytest.raises(UploadError) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.payload == {"detail": "文件过大"}
    assert str(excinfo.value).startswith("413")
    assert describe_failure(excinfo.value, "上传失败", ("detail", "message")) == "文件过大"


def test_check_file_returns_detail():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/check"
        params = request.url.params
        assert (params["board"], params["part"], params["issue"]) == ("vocaloid-weekly", "main", "87")
        return httpx.Response(200, json={"detail": "缺少 3 首歌曲"})

    async def scenario():
        client, http_client = _client(handler)
        result = await client.check_file("vocaloid-weekly", "main", 87)
        await http_client.aclose()
        return result

    result = asyncio.run(scenario())

    assert result.detail == "缺少 3 首歌曲"
    assert not result.passed


def test_check_file_server_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="internal error")

    async def scenario():
        client, http_client = _client(handler)
        try:
            await client.check_file("vocaloid-daily", "new", 1)
        finally:
            await http_client.aclose()

    with pytest.raises(RankingAPIError) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.payload == {}
    assert str(excinfo.value) == "500 Internal Server Error"


def test_update_ranking_yields_non_empty_lines():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(200, content="读取文件\n\n计算排名\r\n写入数据库\n".encode("utf-8"))

    async def scenario():
        client, http_client = _client(handler)
        lines = [line async for line in client.update_ranking("vocaloid-monthly", "new", 12, True)]
        await http_client.aclose()
        return lines

    lines = asyncio.run(scenario())

    assert lines == ["读取文件", "计算排名", "写入数据库"]
    assert captured["body"] == {"board": "vocaloid-monthly", "part": "new", "issue": 12, "force": True}


def test_update_ranking_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"message": "该期已更新"})

    async def scenario():
        client, http_client = _client(handler)
        try:
            return [line async for line in client.update_ranking("vocaloid-weekly", "main", 87)]
        finally:
            await http_client.aclose()

    with pytest.raises(UpdateError) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.payload == {"message": "该期已更新"}


def test_transport_errors_are_translated():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        client, http_client = _client(handler)
        try:
            await client.update_snapshot("2024-05-01")
        finally:
            await http_client.aclose()

    with pytest.raises(ProcessError) as excinfo:
        asyncio.run(scenario())

    assert str(excinfo.value) == "connection refused"


def test_update_snapshot_posts_date():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url.path}")
        return httpx.Response(204)

    async def scenario():
        client, http_client = _client(handler)
        await client.update_snapshot("2024-05-01")
        await http_client.aclose()

    asyncio.run(scenario())

    assert seen == ["POST /api/snapshot/2024-05-01"]
