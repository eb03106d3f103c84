"""Gateway routes."""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from gateway.api.deps import get_gateway_state, run_until_disconnected
from gateway.content.formatter import format_content
from gateway.core.errors import (
    FetchError,
    InvalidInputError,
    InvalidMultihashError,
    ResolutionError,
)
from gateway.core.events import GatewayState
from gateway.core.logging import get_logger
from gateway.resolver.multihash import from_b58_string
from gateway.resolver.namehash import namehash_hex

logger = get_logger(__name__)

router = APIRouter(default_response_class=JSONResponse)


# Fixed paths are registered before the catch-all name route


@router.get("/health")
async def health_check() -> Response:
    """Liveness probe with an empty body."""
    return Response(status_code=200)


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/hash/node/{name}")
async def node_hash(name: str) -> dict[str, str]:
    """
    Compute the namehash of a name.

    Returns
    -------
        ``{"hash": "<hex namehash>"}``
    """
    return {"hash": namehash_hex(name)}


@router.get("/hash/ipfs/{b58hash}")
async def ipfs_hash(b58hash: str) -> dict[str, str]:
    """
    Decode a Base58 multihash.

    Returns
    -------
        ``{"hash": "<hex multihash>"}``
    """
    try:
        raw = from_b58_string(b58hash)
    except InvalidMultihashError as exc:
        raise InvalidInputError(str(exc), public_message="Invalid hash") from exc
    return {"hash": raw.hex()}


async def resolve_and_fetch(state: GatewayState, name: str) -> Response:
    """Resolve ``name`` and relay its content."""
    try:
        b58hash = await state.resolver.resolve(name)
    except ResolutionError as exc:
        logger.error(
            "content_hash_failed",
            name=name,
            error=str(exc),
            cause=repr(exc.__cause__),
        )
        raise

    try:
        content = await state.fetcher.fetch(b58hash)
    except FetchError as exc:
        logger.error(
            "content_load_failed",
            name=name,
            hash=b58hash,
            error=str(exc),
            cause=repr(exc.__cause__),
        )
        raise

    return format_content(content, state.settings.RESPONSE_MODE)


@router.get("/{name}")
async def resolve_name(
    name: str,
    request: Request,
    state: GatewayState = Depends(get_gateway_state),
) -> Response:
    """
    Resolve a name and return its content.

    The name must end with the configured suffix; anything else is rejected
    before any network call is made.
    """
    if not name.endswith(state.settings.NAME_SUFFIX):
        raise InvalidInputError(f"name {name!r} lacks suffix {state.settings.NAME_SUFFIX}")

    return await run_until_disconnected(request, resolve_and_fetch(state, name))
