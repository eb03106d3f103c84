"""Application configuration."""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# contentHash(bytes32 node) returns (bytes)
CONTENT_HASH_ABI: list[dict[str, object]] = [
    {
        "inputs": [{"internalType": "bytes32", "name": "node", "type": "bytes32"}],
        "name": "contentHash",
        "outputs": [{"internalType": "bytes", "name": "", "type": "bytes"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class ResponseMode(str, Enum):
    """How resolved content is turned into a response."""

    CONTENT_TYPE = "content-type"
    HTML = "html"


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "RNS IPFS Gateway"
    version: str = "0.1.0"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8080, ge=1, le=65535)

    # CORS Settings
    cors_origins: list[str] = ["*"]

    # Chain Settings
    API_KEY: str = ""
    RPC_URL: str = "https://api-gateway.skymavis.com/rpc?apikey="
    CONTRACT_ADDRESS: str = "0xadb077d236d9e81fb24b96ae9cb8089ab9942d48"
    RPC_TIMEOUT: float = Field(default=25.0, gt=0)

    # Name Settings
    NAME_SUFFIX: str = ".ron"

    # Gateway Settings
    IPFS_GATEWAY: str = "https://ipfs.io"
    FETCH_TIMEOUT: float = Field(default=25.0, gt=0)
    RESPONSE_MODE: ResponseMode = ResponseMode.CONTENT_TYPE

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @field_validator("IPFS_GATEWAY")
    @classmethod
    def strip_gateway_slash(cls, value: str) -> str:
        """Drop trailing slashes so paths join cleanly."""
        return value.rstrip("/")

    @field_validator("NAME_SUFFIX")
    @classmethod
    def validate_suffix(cls, value: str) -> str:
        """Require a non-empty suffix."""
        if not value:
            raise ValueError("NAME_SUFFIX must not be empty")
        return value

    @property
    def rpc_endpoint(self) -> str:
        """Full RPC endpoint including the API key."""
        return f"{self.RPC_URL}{self.API_KEY}"
