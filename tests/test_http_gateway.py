"""Tests for the HTTP gateway against a mocked board API."""

import json

import httpx
import pytest

from boardsync.gateways import (
    GatewayAuthError,
    GatewayError,
    GatewayForbiddenError,
    GatewayNotFoundError,
    HttpGateway,
)
from boardsync.models import HttpConfig

BOARD_RESPONSE = {
    "success": True,
    "sections": [
        {
            "_id": "s1",
            "name": "To Do",
            "order": 0,
            "isDefault": True,
            "projectId": "p1",
            "tasks": [
                {"_id": "t1", "title": "First", "order": 0, "sectionId": "s1", "priority": "high"},
            ],
        },
        {"_id": "s2", "name": "Done", "order": 1, "isDefault": True, "projectId": "p1", "tasks": []},
    ],
}


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status: int = 200, body=None, raw: str | None = None) -> None:
        self.status = status
        self.body = {"success": True} if body is None else body
        self.raw = raw
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raw is not None:
            return httpx.Response(self.status, text=self.raw)
        return httpx.Response(self.status, json=self.body)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


def make_gateway(handler, token: str | None = "secret") -> HttpGateway:
    return HttpGateway("https://tasks.example.com/", token=token, transport=httpx.MockTransport(handler))


@pytest.mark.anyio
class TestHttpGatewayRequests:
    """Tests for endpoint paths and payloads."""

    async def test_fetch_board(self):
        recorder = Recorder(body=BOARD_RESPONSE)
        gateway = make_gateway(recorder)

        board = await gateway.fetch_board("p1")

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url == "https://tasks.example.com/api/projects/p1/board"
        assert request.headers["Authorization"] == "Bearer secret"
        assert board.section_ids == ["s1", "s2"]
        assert board.get_task("t1").priority == "high"
        await gateway.close()

    async def test_reorder_section(self):
        recorder = Recorder()
        gateway = make_gateway(recorder)

        await gateway.reorder_section("s2", 0)

        request = recorder.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/api/sections/s2"
        assert recorder.last_json == {"order": 0}

    async def test_move_task(self):
        recorder = Recorder()
        gateway = make_gateway(recorder)

        await gateway.move_task("t1", "s2", 3, "p1")

        request = recorder.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/api/tasks/t1/move"
        assert recorder.last_json == {"sectionId": "s2", "order": 3, "projectId": "p1"}

    async def test_ids_are_quoted(self):
        recorder = Recorder()
        gateway = make_gateway(recorder)

        await gateway.reorder_section("a/b", 1)

        assert recorder.requests[0].url.raw_path == b"/api/sections/a%2Fb"

    async def test_no_token_no_auth_header(self):
        recorder = Recorder()
        gateway = make_gateway(recorder, token=None)

        await gateway.reorder_section("s1", 0)

        assert "Authorization" not in recorder.requests[0].headers

    async def test_context_manager_closes(self):
        async with make_gateway(Recorder()) as gateway:
            await gateway.reorder_section("s1", 0)
        assert gateway._client.is_closed


@pytest.mark.anyio
class TestHttpGatewayErrors:
    """Tests for mapping failures to gateway errors."""

    @pytest.mark.parametrize(
        "status,error_cls",
        [
            (401, GatewayAuthError),
            (403, GatewayForbiddenError),
            (404, GatewayNotFoundError),
            (400, GatewayError),
            (500, GatewayError),
        ],
    )
    async def test_status_mapping(self, status, error_cls):
        gateway = make_gateway(Recorder(status=status, body={"error": "Section not found"}))

        with pytest.raises(error_cls, match="Section not found"):
            await gateway.move_task("t1", "s9", 0, "p1")

    async def test_error_without_body(self):
        gateway = make_gateway(Recorder(status=500, raw="Internal Server Error"))

        with pytest.raises(GatewayError, match="HTTP 500"):
            await gateway.reorder_section("s1", 0)

    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        gateway = make_gateway(handler)

        with pytest.raises(GatewayError, match="Request failed"):
            await gateway.fetch_board("p1")

    async def test_unsuccessful_body(self):
        gateway = make_gateway(Recorder(body={"success": False, "error": "Task not found"}))

        with pytest.raises(GatewayError, match="Task not found"):
            await gateway.move_task("t1", "s1", 0, "p1")

    async def test_invalid_json(self):
        gateway = make_gateway(Recorder(raw="<html>"))

        with pytest.raises(GatewayError, match="Invalid JSON"):
            await gateway.fetch_board("p1")

    async def test_invalid_board_payload(self):
        gateway = make_gateway(Recorder(body={"success": True, "sections": [{"name": "no id"}]}))

        with pytest.raises(GatewayError, match="Invalid board payload"):
            await gateway.fetch_board("p1")


class TestFromConfig:
    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("BOARD_TOKEN", "from-env")
        config = HttpConfig(base_url="https://tasks.example.com", token_env="BOARD_TOKEN", timeout=5)

        gateway = HttpGateway.from_config(config)

        assert gateway._client.headers["Authorization"] == "Bearer from-env"
        assert gateway.base_url == "https://tasks.example.com"

    def test_explicit_token_wins(self, monkeypatch):
        monkeypatch.setenv("BOARD_TOKEN", "from-env")
        config = HttpConfig(token_env="BOARD_TOKEN")

        gateway = HttpGateway.from_config(config, token="explicit")

        assert gateway._client.headers["Authorization"] == "Bearer explicit"
