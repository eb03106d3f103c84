"""Tests for error handling middleware."""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from httpx import AsyncClient
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from gateway.core.errors import (
    FetchError,
    GatewayError,
    InvalidInputError,
    ResolutionError,
)
from gateway.middleware.errors import (
    handle_gateway_error,
    handle_http_exception,
    handle_validation_error,
)


@pytest.fixture(autouse=True)
def setup_test_routes(test_app: FastAPI) -> None:
    """Setup test routes for error handling tests.

    The routes are inserted ahead of the catch-all name route.
    """

    async def http_error() -> None:
        raise HTTPException(status_code=418, detail="Teapot")

    async def input_error() -> None:
        raise InvalidInputError("bad input detail")

    async def resolution_error() -> None:
        raise ResolutionError("rpc said no: secret internals")

    async def fetch_error() -> None:
        raise FetchError("gateway said no: secret internals")

    async def unexpected_error() -> None:
        raise RuntimeError("boom: secret internals")

    async def validation_error(count: int) -> int:
        return count

    for path, endpoint in [
        ("/test/http-error", http_error),
        ("/test/input-error", input_error),
        ("/test/resolution-error", resolution_error),
        ("/test/fetch-error", fetch_error),
        ("/test/unexpected-error", unexpected_error),
        ("/test/validation-error", validation_error),
    ]:
        test_app.add_api_route(path, endpoint, methods=["GET"])
        # Move the new route ahead of /{name}
        test_app.router.routes.insert(0, test_app.router.routes.pop())


@pytest.mark.asyncio
async def test_http_exception_handling(test_app_async_client: AsyncClient) -> None:
    """Test handling of HTTPException."""
    response = await test_app_async_client.get("/test/http-error")

    assert response.status_code == 418
    data = response.json()
    assert data["error"] == "HTTPException"
    assert data["message"] == "Teapot"
    assert data["status_code"] == 418


@pytest.mark.asyncio
async def test_not_found_uses_envelope(test_app_async_client: AsyncClient) -> None:
    """Test unknown multi-segment paths get the JSON envelope."""
    response = await test_app_async_client.get("/no/such/path")

    assert response.status_code == HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Not Found"


@pytest.mark.asyncio
async def test_input_error_maps_to_400(test_app_async_client: AsyncClient) -> None:
    response = await test_app_async_client.get("/test/input-error")

    assert response.status_code == HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error"] == "InvalidInputError"
    assert data["message"] == "Invalid address"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path,message",
    [
        ("/test/resolution-error", "Failed to get content hash"),
        ("/test/fetch-error", "Failed to load content"),
    ],
)
async def test_upstream_errors_map_to_generic_500(
    test_app_async_client: AsyncClient, path: str, message: str
) -> None:
    response = await test_app_async_client.get(path)

    assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == message
    assert "secret internals" not in response.text


@pytest.mark.asyncio
async def test_unexpected_error_maps_to_500(test_app_async_client: AsyncClient) -> None:
    """Test unknown exceptions are caught by the middleware."""
    response = await test_app_async_client.get("/test/unexpected-error")

    assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error"] == "RuntimeError"
    assert data["message"] == "Internal Server Error"
    assert "secret internals" not in response.text
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_validation_error_maps_to_422(test_app_async_client: AsyncClient) -> None:
    """Test bad query parameters get the envelope and a 422."""
    response = await test_app_async_client.get("/test/validation-error?count=many")

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "RequestValidationError"
    assert data["message"] == "Invalid request"
    assert data["status_code"] == 422


def test_handlers_accept_their_exception_types(test_app: FastAPI) -> None:
    """Test each registered handler is keyed to the exception it formats."""
    assert test_app.exception_handlers[GatewayError] is handle_gateway_error
    assert test_app.exception_handlers[StarletteHTTPException] is handle_http_exception
    assert (
        test_app.exception_handlers[RequestValidationError] is handle_validation_error
    )
