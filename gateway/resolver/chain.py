"""On-chain content hash resolution."""

import asyncio
from typing import Any

from web3 import AsyncWeb3
from web3.contract import AsyncContract

from gateway.core.config import CONTENT_HASH_ABI
from gateway.core.errors import (
    InvalidInputError,
    InvalidMultihashError,
    ResolutionError,
)
from gateway.core.logging import get_logger
from gateway.core.metrics import RESOLUTIONS_TOTAL
from gateway.resolver.multihash import decode_contenthash
from gateway.resolver.namehash import namehash

logger = get_logger(__name__)


class NameResolver:
    """Resolve names to Base58 content identifiers via the registry contract.

    The resolver wraps a single shared ``AsyncWeb3`` client and a contract
    object built once from the ``contentHash`` ABI. It holds no per-request
    state and is safe to share between concurrent requests.
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        contract_address: str,
        abi: list[dict[str, Any]] | None = None,
        timeout: float = 25.0,
    ) -> None:
        """
        Initialize resolver.

        Args:
        ----
            web3: Connected async web3 client
            contract_address: Registry contract address (any checksum case)
            abi: Contract ABI, defaults to the ``contentHash`` read
            timeout: Upper bound in seconds for the contract call
        """
        self.web3 = web3
        self.timeout = timeout
        self.contract: AsyncContract = web3.eth.contract(
            address=AsyncWeb3.to_checksum_address(contract_address),
            abi=abi or CONTENT_HASH_ABI,
        )

    async def get_content_hash(self, name: str) -> bytes:
        """Read the raw content hash bytes stored for ``name``."""
        try:
            node = namehash(name)
        except InvalidInputError as exc:
            raise ResolutionError(f"failed to hash name {name!r}") from exc

        try:
            return bytes(
                await asyncio.wait_for(
                    self.contract.functions.contentHash(node).call(),
                    timeout=self.timeout,
                )
            )
        except asyncio.TimeoutError as exc:
            raise ResolutionError(
                f"contentHash call timed out after {self.timeout}s"
            ) from exc
        except Exception as exc:
            raise ResolutionError(f"contentHash call failed: {exc}") from exc

    async def resolve(self, name: str) -> str:
        """
        Resolve ``name`` to a Base58 multihash string.

        Args:
        ----
            name: Full name including its suffix

        Returns:
        -------
            Base58 identifier suitable for an IPFS gateway path

        Raises:
        ------
            ResolutionError: On hashing, RPC, ABI or multihash failure
        """
        try:
            raw = await self.get_content_hash(name)
            try:
                multihash = decode_contenthash(raw)
            except InvalidMultihashError as exc:
                raise ResolutionError(
                    f"invalid content hash 0x{raw.hex()}: {exc}"
                ) from exc
        except ResolutionError:
            RESOLUTIONS_TOTAL.labels(outcome="error").inc()
            raise

        b58 = multihash.to_b58()
        RESOLUTIONS_TOTAL.labels(outcome="success").inc()
        logger.debug("content_hash_resolved", name=name, hash=b58)
        return b58
