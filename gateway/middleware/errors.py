"""Error handling middleware."""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp

from gateway.api.deps import ClientDisconnected
from gateway.core.errors import GatewayError
from gateway.core.logging import get_logger

logger = get_logger(__name__)

# nginx's "client closed request"
HTTP_499_CLIENT_CLOSED_REQUEST = 499
HTTP_422_UNPROCESSABLE = 422


def _correlation_id(request: Request) -> str | None:
    correlation_id = getattr(request.state, "correlation_id", None)
    return str(correlation_id) if correlation_id is not None else None


def create_error_response(
    request: Request, error_type: str, message: str, status_code: int
) -> JSONResponse:
    """Create JSON error response with optional correlation ID."""
    correlation_id = _correlation_id(request)
    response = JSONResponse(
        status_code=status_code,
        content={
            "error": error_type,
            "message": message,
            "status_code": status_code,
            "correlation_id": correlation_id if correlation_id else "unknown",
        },
        media_type="application/json",
    )
    if correlation_id:
        response.headers["X-Request-ID"] = correlation_id
    return response


async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    """Map a ``GatewayError`` to its status and public message.

    The internal message is logged; only the public message is returned.
    """
    log = logger.warning if exc.status_code < HTTP_500_INTERNAL_SERVER_ERROR else logger.error
    log(
        "request_error",
        error_type=exc.__class__.__name__,
        error_message=str(exc),
        status_code=exc.status_code,
        path=request.url.path,
        method=request.method,
    )
    return create_error_response(
        request, exc.__class__.__name__, exc.public_message, exc.status_code
    )


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (404, 405, ...) in the error envelope."""
    response = create_error_response(
        request, "HTTPException", str(exc.detail), exc.status_code
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(
        "request_invalid",
        errors=exc.errors(),
        path=request.url.path,
        method=request.method,
    )
    return create_error_response(
        request,
        "RequestValidationError",
        "Invalid request",
        HTTP_422_UNPROCESSABLE,
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register the gateway's exception handlers on ``app``."""
    app.add_exception_handler(GatewayError, handle_gateway_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch anything the exception handlers did not and return a 500.

    Unexpected exceptions are logged with their traceback; the caller sees a
    generic message only.
    """

    def __init__(self, app: ASGIApp) -> None:
        """
        Initialize middleware.

        Args:
        ----
            app: The ASGI application
        """
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and handle errors.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers or error response
        """
        try:
            return await call_next(request)
        except ClientDisconnected:
            return Response(status_code=HTTP_499_CLIENT_CLOSED_REQUEST)
        except GatewayError as exc:
            return await handle_gateway_error(request, exc)
        except Exception as exc:
            logger.exception(
                "unhandled_error",
                error_type=exc.__class__.__name__,
                path=request.url.path,
                method=request.method,
            )
            return create_error_response(
                request,
                exc.__class__.__name__,
                "Internal Server Error",
                HTTP_500_INTERNAL_SERVER_ERROR,
            )
