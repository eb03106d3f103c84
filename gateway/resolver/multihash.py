"""Multihash codec.

A multihash is ``<varint code><varint length><digest>``. The Base58 form used
by IPFS gateways (``Qm...`` for sha2-256) is the bitcoin-alphabet encoding of
those raw bytes.

On-chain content hashes are either a bare multihash or an ENSIP-7
``ipfs-ns`` contenthash: the ``0xe3`` namespace varint followed by a binary
CID. ``decode_contenthash`` accepts both.
"""

from dataclasses import dataclass

import base58
from multiformats import CID, multihash

from gateway.core.errors import InvalidMultihashError

# ipfs-ns namespace code 0xe3 as an unsigned varint
IPFS_NS_PREFIX = bytes.fromhex("e301")

# Raised by multiformats for unknown codes, bad varints and size mismatches
MULTIFORMATS_ERRORS = (KeyError, ValueError, TypeError)


@dataclass(frozen=True)
class Multihash:
    """Decoded multihash."""

    code: int
    name: str
    digest: bytes

    @property
    def length(self) -> int:
        return len(self.digest)

    def to_bytes(self) -> bytes:
        return bytes(multihash.wrap(self.digest, self.code))

    def to_b58(self) -> str:
        return to_b58_string(self.to_bytes())

    def to_hex(self) -> str:
        return self.to_bytes().hex()


def encode(digest: bytes, hashfun: int | str) -> bytes:
    """Wrap a raw digest in a multihash.

    Args:
        digest: Raw digest bytes
        hashfun: Hash function code or registered name (e.g. ``"sha2-256"``)
    """
    try:
        return bytes(multihash.wrap(digest, hashfun))
    except MULTIFORMATS_ERRORS as exc:
        raise InvalidMultihashError(f"unknown hash function {hashfun!r}: {exc}") from exc


def decode(data: bytes) -> Multihash:
    """Decode raw multihash bytes.

    The hash function must be registered, the digest length must match the
    declared length exactly and no bytes may follow the digest.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise InvalidMultihashError(f"multihash must be bytes, got {type(data).__name__}")
    data = bytes(data)
    if len(data) < 2:
        raise InvalidMultihashError("multihash is too short")

    try:
        hashfun = multihash.from_digest(data)
        digest = bytes(multihash.unwrap(data))
    except MULTIFORMATS_ERRORS as exc:
        raise InvalidMultihashError(f"invalid multihash {data.hex()}: {exc}") from exc

    decoded = Multihash(code=hashfun.code, name=hashfun.name, digest=digest)
    if decoded.to_bytes() != data:
        raise InvalidMultihashError(f"multihash has trailing bytes: {data.hex()}")
    return decoded


def decode_contenthash(data: bytes) -> Multihash:
    """Decode an on-chain content hash into its multihash.

    Accepts a bare multihash or an ENSIP-7 ``ipfs-ns`` contenthash.
    """
    if not data:
        raise InvalidMultihashError("content hash is empty")
    if bytes(data[:2]) == IPFS_NS_PREFIX:
        try:
            cid = CID.decode(bytes(data[2:]))
        except MULTIFORMATS_ERRORS as exc:
            raise InvalidMultihashError(f"invalid ipfs-ns CID: {exc}") from exc
        return decode(bytes(cid.digest))
    return decode(data)


def to_b58_string(data: bytes) -> str:
    return base58.b58encode(data).decode("ascii")


def from_b58_string(value: str) -> bytes:
    """Decode a Base58 multihash string and validate it.

    Raises:
        InvalidMultihashError: If the text is not Base58 or not a multihash
    """
    if not value:
        raise InvalidMultihashError("empty multihash string")
    try:
        data = base58.b58decode(value)
    except ValueError as exc:
        raise InvalidMultihashError(f"invalid base58 string: {value!r}") from exc
    decode(data)
    return data
