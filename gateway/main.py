"""Main FastAPI application module."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gateway.api.routes import router
from gateway.core.config import Settings
from gateway.core.events import create_lifespan
from gateway.core.logging import configure_logging
from gateway.middleware.correlation import CorrelationMiddleware
from gateway.middleware.errors import ErrorHandlingMiddleware, add_exception_handlers
from gateway.middleware.metrics import MetricsMiddleware
from gateway.middleware.security import SecurityHeadersMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Assemble the gateway application.

    Args:
        settings: Settings to use, read from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings()

    app = FastAPI(
        title=settings.app_name,
        description="Resolve names to IPFS content through an on-chain registry",
        version=settings.version,
        default_response_class=JSONResponse,
        lifespan=create_lifespan(settings),
    )
    app.state.settings = settings
    app.state.gateway = None

    # Each add wraps the stack so far, so the order below is inside -> out:
    # 1. CORS (innermost)
    # 2. Security headers
    # 3. Correlation (adds request ID)
    # 4. Metrics (tracks all requests)
    # 5. Error handling (outermost - catches anything that escapes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)

    add_exception_handlers(app)
    app.include_router(router)
    return app


def create_default_app() -> FastAPI:
    """Application factory for ``uvicorn --factory``."""
    settings = Settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
    return create_app(settings)
