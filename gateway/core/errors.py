"""Gateway error taxonomy.

Every error raised by the resolution pipeline derives from ``GatewayError``.
Each class carries the HTTP status it maps to and a public message that is
safe to return to callers; the exception's own message and chained cause are
only ever logged.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class GatewayError(Exception):
    """Base class for all gateway errors."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, *, public_message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class InvalidInputError(GatewayError):
    """Raised for malformed client input (bad name, bad hash)."""

    status_code = HTTP_400_BAD_REQUEST
    public_message = "Invalid address"


class ResolutionError(GatewayError):
    """Raised when a name cannot be resolved to a content hash."""

    public_message = "Failed to get content hash"


class FetchError(GatewayError):
    """Raised when content cannot be loaded from the gateway."""

    public_message = "Failed to load content"


class InvalidMultihashError(ValueError):
    """Raised when bytes or text do not form a valid multihash."""


class StartupError(Exception):
    """Raised when the application cannot initialise its chain client."""
