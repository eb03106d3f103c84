"""Request dependencies."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import Request

from gateway.core.events import GatewayState
from gateway.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_INTERVAL = 0.5


class ClientDisconnected(Exception):
    """Raised when the caller went away before the work finished."""


def get_gateway_state(request: Request) -> GatewayState:
    """Return the shared gateway state installed at startup."""
    state: GatewayState | None = getattr(request.app.state, "gateway", None)
    if state is None:
        raise RuntimeError("gateway state is not initialised")
    return state


async def run_until_disconnected(
    request: Request,
    work: Awaitable[T],
    poll_interval: float | None = None,
) -> T:
    """Await ``work``, cancelling it if the client disconnects first.

    The disconnect flag is checked every ``poll_interval`` seconds, by
    default ``DISCONNECT_POLL_INTERVAL``.

    Raises:
        ClientDisconnected: If the client disconnected before completion
    """
    if poll_interval is None:
        poll_interval = DISCONNECT_POLL_INTERVAL
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                logger.info("client_disconnected", path=request.url.path)
                raise ClientDisconnected(request.url.path)
    finally:
        if not task.done():
            task.cancel()
