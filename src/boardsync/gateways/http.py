"""HTTP gateway for the board REST API."""

from __future__ import annotations

import logging
import os
import time
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..models import Board, HttpConfig
from .errors import (
    GatewayAuthError,
    GatewayError,
    GatewayForbiddenError,
    GatewayNotFoundError,
)

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str | None:
    """Extract the server's ``error`` field from a response body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


class HttpGateway:
    """Board REST API client.

    Endpoints:
    - GET   /api/projects/{projectId}/board
    - PATCH /api/sections/{sectionId}        {"order": n}
    - PATCH /api/tasks/{taskId}/move         {"sectionId", "order", "projectId"}
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: API origin, e.g. https://app.example.com
            token: Bearer token (omitted from requests when None)
            timeout: Request timeout in seconds
            transport: Optional transport override
        """
        self.base_url = base_url.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: HttpConfig, token: str | None = None) -> HttpGateway:
        """Create a gateway from configuration.

        The token is taken from the argument, else from the environment
        variable named by ``config.token_env``.
        """
        if token is None:
            token = os.environ.get(config.token_env)
            if token:
                logger.debug("Using API token from %s", config.token_env)
            else:
                logger.warning("No API token found in %s", config.token_env)
        return cls(config.base_url, token=token, timeout=config.timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpGateway:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            GatewayAuthError: 401
            GatewayForbiddenError: 403
            GatewayNotFoundError: 404
            GatewayError: transport failure, other non-2xx, invalid body
        """
        logger.debug("%s %s: payload=%s", method, path, payload)

        start_time = time.monotonic()
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s %s failed after %.0fms: %s", method, path, elapsed_ms, e)
            raise GatewayError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        status = response.status_code

        if status >= 400:
            message = _error_message(response)
            logger.error("%s %s: HTTP %d %s (%.0fms)", method, path, status, message or "", elapsed_ms)
            if status == 401:
                raise GatewayAuthError(message or "Authentication failed. Check your API token.")
            if status == 403:
                raise GatewayForbiddenError(message or "Permission denied")
            if status == 404:
                raise GatewayNotFoundError(message or "Resource not found")
            raise GatewayError(message or f"HTTP {status}: {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            logger.error("%s %s: Invalid JSON response (%.0fms)", method, path, elapsed_ms)
            raise GatewayError(f"Invalid JSON response: {e}") from e

        if not isinstance(body, dict):
            raise GatewayError("Unexpected response body")
        if body.get("success") is False:
            raise GatewayError(body.get("error") or "Request was not successful")

        logger.info("%s %s: %d OK (%.0fms)", method, path, status, elapsed_ms)
        return body

    async def fetch_board(self, project_id: str) -> Board:
        """Fetch sections with their tasks pre-grouped and ordered."""
        body = await self._request("GET", f"/api/projects/{quote(project_id, safe='')}/board")
        sections = body.get("sections") or []
        try:
            return Board.from_payload(project_id, sections)
        except ValidationError as e:
            raise GatewayError(f"Invalid board payload: {e}") from e

    async def reorder_section(self, section_id: str, order: int) -> None:
        """Persist a section's order."""
        await self._request(
            "PATCH",
            f"/api/sections/{quote(section_id, safe='')}",
            {"order": order},
        )

    async def move_task(
        self,
        task_id: str,
        section_id: str,
        order: int,
        project_id: str,
    ) -> None:
        """Persist a task's section and index."""
        await self._request(
            "PATCH",
            f"/api/tasks/{quote(task_id, safe='')}/move",
            {"sectionId": section_id, "order": order, "projectId": project_id},
        )
