"""
Module 02 - Hashing Utilities
Keccak-256 hashing shared by the input hash codec and the Merkle tree.

This module provides:
- Keccak-256 (the pre-standard variant used by the EVM, not SHA3-256)
- Digest-to-integer conversion (big-endian)
- 0x-prefixed hex for digests carried in JSON

Digests are read big-endian so they match Solidity's uint256(keccak256(...)).
"""
from __future__ import annotations

from typing import Optional

from eth_utils import keccak

DIGEST_BYTES = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 digest of raw bytes.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def keccak256_int(data: bytes) -> int:
    """Keccak-256 digest of ``data`` read as a big-endian unsigned integer."""
    return int.from_bytes(keccak256(data), "big")


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def from_hex(value: str, length: Optional[int] = None) -> bytes:
    """
    Decode a 0x-prefixed hex string.

    Args:
        value: Hex string, prefix required
        length: If given, the exact number of bytes expected

    Raises:
        ValueError: on a missing prefix, bad characters or wrong length
    """
    if not value.startswith("0x"):
        raise ValueError(f"expected 0x-prefixed hex, got {value[:10]!r}")
    try:
        decoded = bytes.fromhex(value[2:])
    except ValueError as e:
        raise ValueError(f"invalid hex: {e}") from e
    if length is not None and len(decoded) != length:
        raise ValueError(f"expected {length} bytes, got {len(decoded)}")
    return decoded


__all__ = [
    "DIGEST_BYTES",
    "keccak256",
    "keccak256_int",
    "to_hex",
    "from_hex",
]
