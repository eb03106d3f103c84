"""Application startup and shutdown events."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import FastAPI
from web3 import AsyncHTTPProvider, AsyncWeb3

from gateway.content.fetcher import ContentFetcher
from gateway.core.config import CONTENT_HASH_ABI, Settings
from gateway.core.errors import StartupError
from gateway.core.logging import get_logger
from gateway.resolver.chain import NameResolver

logger = get_logger(__name__)


@dataclass
class GatewayState:
    """Process-wide collaborators shared by every request."""

    settings: Settings
    resolver: NameResolver
    fetcher: ContentFetcher
    web3: AsyncWeb3 | None = None
    http_client: httpx.AsyncClient | None = None

    async def close(self) -> None:
        """Release network resources."""
        if self.http_client is not None:
            await self.http_client.aclose()
        if self.web3 is not None:
            await self.web3.provider.disconnect()


async def create_chain_client(settings: Settings) -> AsyncWeb3:
    """Create the shared chain client and verify the RPC node answers.

    Raises:
        StartupError: If the node cannot be reached
    """
    web3 = AsyncWeb3(AsyncHTTPProvider(settings.rpc_endpoint))
    try:
        connected = await asyncio.wait_for(
            web3.is_connected(), timeout=settings.RPC_TIMEOUT
        )
    except asyncio.TimeoutError:
        connected = False

    if not connected:
        await web3.provider.disconnect()
        # Never log the endpoint itself, it embeds the API key
        raise StartupError(f"Failed to connect to the RPC node at {settings.RPC_URL}")
    return web3


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.FETCH_TIMEOUT),
        follow_redirects=True,
    )


async def create_gateway_state(settings: Settings) -> GatewayState:
    """Build the shared resolver and fetcher for ``settings``."""
    web3 = await create_chain_client(settings)
    http_client = create_http_client(settings)
    return GatewayState(
        settings=settings,
        resolver=NameResolver(
            web3,
            settings.CONTRACT_ADDRESS,
            abi=CONTENT_HASH_ABI,
            timeout=settings.RPC_TIMEOUT,
        ),
        fetcher=ContentFetcher(
            http_client, settings.IPFS_GATEWAY, timeout=settings.FETCH_TIMEOUT
        ),
        web3=web3,
        http_client=http_client,
    )


def create_start_app_handler(
    app: FastAPI, settings: Settings
) -> Callable[[], Awaitable[None]]:
    """Create startup event handler.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        Startup handler function
    """

    async def start_app() -> None:
        # Tests install their own state before the app starts
        if getattr(app.state, "gateway", None) is not None:
            return

        app.state.gateway = await create_gateway_state(settings)
        logger.info(
            "chain_client_connected",
            rpc_url=settings.RPC_URL,
            contract=settings.CONTRACT_ADDRESS,
            gateway=settings.IPFS_GATEWAY,
            suffix=settings.NAME_SUFFIX,
            response_mode=settings.RESPONSE_MODE.value,
        )

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable[[], Awaitable[None]]:
    """Create shutdown event handler.

    Args:
        app: FastAPI application instance

    Returns:
        Shutdown handler function
    """

    async def stop_app() -> None:
        state: GatewayState | None = getattr(app.state, "gateway", None)
        if state is None:
            return
        try:
            await state.close()
            logger.info("application_shutdown_complete")
        except Exception as e:
            logger.error("application_shutdown_failed", error=str(e))
            raise

    return stop_app


def create_lifespan(
    settings: Settings,
) -> Callable[[FastAPI], Any]:
    """Wrap the startup and shutdown handlers in a lifespan context."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await create_start_app_handler(app, settings)()
        try:
            yield
        finally:
            await create_stop_app_handler(app)()

    return lifespan
