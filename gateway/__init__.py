"""Name-to-content IPFS gateway."""

__version__ = "0.1.0"
