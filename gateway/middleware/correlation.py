"""Correlation ID middleware for request tracking."""

import re
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp
from structlog.contextvars import bind_contextvars, clear_contextvars

HEADER_NAME = "X-Request-ID"

# Upstream proxies may send their own ids; accept short opaque tokens
_CORRELATION_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle request correlation IDs.

    Assigns a correlation ID to each request and adds it to:
    - Request state
    - Response headers
    - Structured logging context
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    @staticmethod
    def is_valid_correlation_id(value: str | None) -> bool:
        """Check whether an incoming header value can be reused."""
        if not value:
            return False
        return bool(_CORRELATION_ID_RE.match(value))

    def get_correlation_id(self, request: Request) -> str:
        """Reuse a valid incoming ``X-Request-ID`` or generate a UUID4."""
        header_value = request.headers.get(HEADER_NAME, "")
        if self.is_valid_correlation_id(header_value):
            return header_value
        return str(uuid.uuid4())

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers
        """
        clear_contextvars()

        correlation_id = self.get_correlation_id(request)
        bind_contextvars(correlation_id=correlation_id)
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[HEADER_NAME] = correlation_id
        return response
