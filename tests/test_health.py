from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from aiohttp import test_utils

from nexus_core.health import HEALTH_RESPONSE_TEXT, create_health_app, start_health_server


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "path"), [("GET", "/"), ("GET", "/healthz"), ("POST", "/anything/else")])
async def test_every_route_answers_ok(method: str, path: str) -> None:
    async with test_utils.TestClient(test_utils.TestServer(create_health_app())) as client:
        response = await client.request(method, path)

        assert response.status == 200
        assert response.content_type == "text/plain"
        assert await response.text() == HEALTH_RESPONSE_TEXT


@pytest.mark.asyncio
async def test_bind_failure_is_not_fatal() -> None:
    with patch("nexus_core.health.web.TCPSite.start", new=AsyncMock(side_effect=OSError("address in use"))):
        runner = await start_health_server(8080, host="127.0.0.1")

    assert runner is None
