"""Tests for application startup and shutdown."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi import FastAPI
from pytest_mock import MockerFixture

from gateway.content.fetcher import ContentFetcher
from gateway.core.config import Settings
from gateway.core.errors import StartupError
from gateway.core.events import (
    GatewayState,
    create_chain_client,
    create_gateway_state,
    create_lifespan,
    create_start_app_handler,
    create_stop_app_handler,
)
from gateway.resolver.chain import NameResolver


@pytest.fixture
def connected_web3(mocker: MockerFixture) -> MagicMock:
    """Patch AsyncWeb3 so the node always answers."""
    web3 = MagicMock()
    web3.is_connected = AsyncMock(return_value=True)
    web3.provider.disconnect = AsyncMock()
    mocker.patch("gateway.core.events.AsyncWeb3", return_value=web3)
    mocker.patch("gateway.core.events.AsyncHTTPProvider")
    return web3


@pytest.mark.asyncio
async def test_chain_client_uses_keyed_endpoint(
    mocker: MockerFixture, test_settings: Settings
) -> None:
    web3 = MagicMock()
    web3.is_connected = AsyncMock(return_value=True)
    mocker.patch("gateway.core.events.AsyncWeb3", return_value=web3)
    provider = mocker.patch("gateway.core.events.AsyncHTTPProvider")

    assert await create_chain_client(test_settings) is web3
    provider.assert_called_once_with(
        "https://api-gateway.skymavis.com/rpc?apikey=test-key"
    )


@pytest.mark.asyncio
async def test_unreachable_node_aborts_startup(
    mocker: MockerFixture, test_settings: Settings
) -> None:
    web3 = MagicMock()
    web3.is_connected = AsyncMock(return_value=False)
    web3.provider.disconnect = AsyncMock()
    mocker.patch("gateway.core.events.AsyncWeb3", return_value=web3)
    mocker.patch("gateway.core.events.AsyncHTTPProvider")

    with pytest.raises(StartupError) as exc_info:
        await create_chain_client(test_settings)

    # The API key must not leak into the error
    assert "test-key" not in str(exc_info.value)
    web3.provider.disconnect.assert_awaited_once()


@pytest.mark.asyncio
async def test_silent_node_is_disconnected_before_aborting(
    mocker: MockerFixture, test_settings: Settings
) -> None:
    """Test a node that never answers is released after the RPC timeout."""

    async def never_answers() -> bool:
        await asyncio.sleep(10)
        return True

    web3 = MagicMock()
    web3.is_connected = never_answers
    web3.provider.disconnect = AsyncMock()
    mocker.patch("gateway.core.events.AsyncWeb3", return_value=web3)
    mocker.patch("gateway.core.events.AsyncHTTPProvider")
    test_settings.RPC_TIMEOUT = 0.05

    with pytest.raises(StartupError):
        await create_chain_client(test_settings)

    web3.provider.disconnect.assert_awaited_once()


@pytest.mark.asyncio
async def test_gateway_state_shares_one_client(
    connected_web3: MagicMock, test_settings: Settings
) -> None:
    state = await create_gateway_state(test_settings)
    try:
        assert isinstance(state.resolver, NameResolver)
        assert isinstance(state.fetcher, ContentFetcher)
        assert state.resolver.web3 is connected_web3
        assert state.web3 is connected_web3
        assert state.fetcher.client is state.http_client
        assert state.fetcher.timeout == test_settings.FETCH_TIMEOUT
        assert state.resolver.timeout == test_settings.RPC_TIMEOUT
    finally:
        await state.close()

    connected_web3.provider.disconnect.assert_awaited_once()
    assert state.http_client is not None
    assert state.http_client.is_closed


@pytest.mark.asyncio
async def test_start_handler_installs_state_once(
    connected_web3: MagicMock, test_settings: Settings
) -> None:
    app = FastAPI()
    app.state.gateway = None

    await create_start_app_handler(app, test_settings)()
    state = app.state.gateway
    assert isinstance(state, GatewayState)

    # A second start keeps the existing state
    await create_start_app_handler(app, test_settings)()
    assert app.state.gateway is state

    await create_stop_app_handler(app)()
    assert state.http_client is not None and state.http_client.is_closed


@pytest.mark.asyncio
async def test_stop_handler_without_state_is_noop() -> None:
    app = FastAPI()
    await create_stop_app_handler(app)()


@pytest.mark.asyncio
async def test_lifespan_propagates_startup_failure(
    mocker: MockerFixture, test_settings: Settings
) -> None:
    mocker.patch(
        "gateway.core.events.create_gateway_state",
        side_effect=StartupError("no node"),
    )
    app = FastAPI()
    app.state.gateway = None

    with pytest.raises(StartupError):
        async with create_lifespan(test_settings)(app):
            pass


@pytest.mark.asyncio
async def test_state_close_with_injected_collaborators(test_settings: Settings) -> None:
    client = httpx.AsyncClient()
    state = GatewayState(
        settings=test_settings,
        resolver=MagicMock(),
        fetcher=ContentFetcher(client, test_settings.IPFS_GATEWAY),
        http_client=client,
    )

    await state.close()

    assert client.is_closed
