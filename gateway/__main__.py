"""Main entry point for the gateway server."""

import sys

import uvicorn

from gateway.core.config import Settings
from gateway.core.logging import configure_logging, get_logger
from gateway.main import create_app

logger = get_logger("gateway")


def main() -> None:
    """Run the gateway with uvicorn."""
    settings = Settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)

    logger.info("gateway_starting", host=settings.HOST, port=settings.PORT)
    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("gateway_stopped")
        sys.exit(0)
