"""Request metrics middleware for Prometheus monitoring."""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from gateway.core.logging import get_logger
from gateway.core.metrics import REQUEST_DURATION, REQUESTS_TOTAL, RESPONSES_TOTAL

logger = get_logger(__name__)


def route_path(request: Request) -> str:
    """Return the route template for ``request``.

    Names and hashes are path parameters, so labelling by the raw path would
    create one series per name. The router records the matched route in the
    scope, so this is only meaningful once the request has been routed.
    """
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return str(path) if path else "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect request/response metrics.

    Records:
    - Total requests by method and route
    - Total responses by status code
    - Request duration histogram
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and record metrics.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers
        """
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            path = route_path(request)
            REQUESTS_TOTAL.labels(method=request.method, path=path).inc()
        duration = time.perf_counter() - start_time

        RESPONSES_TOTAL.labels(status_code=str(response.status_code)).inc()
        REQUEST_DURATION.labels(method=request.method).observe(duration)

        logger.info(
            "request_processed",
            method=request.method,
            path=request.url.path,
            route=path,
            status_code=response.status_code,
            duration=duration,
        )
        return response
