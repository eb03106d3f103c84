"""Test configuration."""

import os
from pathlib import Path
from typing import List

import pytest

from gateway.core.logging import configure_logging

# Keep a developer's .env from leaking into the test settings
os.environ.setdefault("API_KEY", "test-key")
os.environ.setdefault("IPFS_GATEWAY", "https://gateway.test")

fixture = pytest.fixture


@fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


pytest_plugins: List[str] = [
    "tests.fixtures.chain",
    "tests.fixtures.api",
    "tests.fixtures.gateway",
]


@fixture(scope="session", autouse=True)
def configure_test_logging() -> None:
    """Configure logging once for the whole session."""
    configure_logging("debug", json_logs=False, testing=True)
