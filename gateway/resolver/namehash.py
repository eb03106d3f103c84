"""ENS namehash."""

from ens import ENS
from ens.exceptions import InvalidName

from gateway.core.errors import InvalidInputError


def namehash(name: str) -> bytes:
    """Compute the 32-byte ENS namehash of ``name``.

    Labels are normalised (ENSIP-15) before hashing, so ``Foo.RON`` and
    ``foo.ron`` share a node.

    Raises:
        InvalidInputError: If the name cannot be normalised
    """
    try:
        return bytes(ENS.namehash(name))
    except (InvalidName, ValueError) as exc:
        raise InvalidInputError(f"invalid name {name!r}: {exc}") from exc


def namehash_hex(name: str) -> str:
    """Namehash as lowercase hex without a ``0x`` prefix."""
    return namehash(name).hex()
