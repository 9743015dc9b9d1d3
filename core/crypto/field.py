"""
Module 02 - Field Element Encodings

Big-endian byte encodings of BN254 scalar field elements.

Two encodings are in use:
- minimal: no leading zero bytes, zero encodes to b"" (roots in the input hash)
- padded: left-zero-padded to exactly 32 bytes (commitments, tree nodes)
"""
from __future__ import annotations


# Order of the BN254 (alt_bn128) scalar field, r.
SCALAR_FIELD_MODULUS: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

FIELD_ELEMENT_BYTES: int = 32


def is_field_element(value: int) -> bool:
    """True if ``value`` is the canonical representative of a scalar field element."""
    return 0 <= value < SCALAR_FIELD_MODULUS


def to_minimal_bytes(value: int) -> bytes:
    """
    Minimal big-endian encoding of a non-negative integer.

    Zero encodes to the empty byte string.

    Raises:
        ValueError: If value is negative
    """
    if value < 0:
        raise ValueError(f"Cannot encode negative integer: {value}")
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def to_padded_bytes(value: int, width: int = FIELD_ELEMENT_BYTES) -> bytes:
    """
    Big-endian encoding of ``value`` left-padded with zeros to ``width`` bytes.

    Values that need more than ``width`` bytes are never truncated.

    Raises:
        OverflowError: If value does not fit in ``width`` bytes
        ValueError: If value is negative
    """
    if value < 0:
        raise ValueError(f"Cannot encode negative integer: {value}")
    return value.to_bytes(width, "big")


__all__ = [
    "SCALAR_FIELD_MODULUS",
    "FIELD_ELEMENT_BYTES",
    "is_field_element",
    "to_minimal_bytes",
    "to_padded_bytes",
]
