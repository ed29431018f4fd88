"""Liveness endpoint for external health checks."""

from __future__ import annotations

from typing import Optional

from aiohttp import web

from .logger import get_logger

logger = get_logger()

HEALTH_RESPONSE_TEXT = "Bot is running!"


async def handle_health(request: web.Request) -> web.Response:
    return web.Response(text=HEALTH_RESPONSE_TEXT, content_type="text/plain")


def create_health_app() -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handle_health)
    return app


async def start_health_server(port: int, host: str = "0.0.0.0") -> Optional[web.AppRunner]:
    """Start the liveness listener. Bind failures are logged and ignored."""
    runner = web.AppRunner(create_health_app())
    await runner.setup()
    try:
        await web.TCPSite(runner, host, port).start()
    except OSError as e:
        logger.warning("Could not start health-check server on port %s (ignoring): %s", port, e)
        await runner.cleanup()
        return None
    logger.info("Health-check server started on port %s", port)
    return runner
