"""
Core cryptographic utilities.

Module 02 provides keccak hashing and field-element byte encodings.
"""
from .hashing import (
    DIGEST_BYTES,
    keccak256,
    keccak256_int,
    to_hex,
    from_hex,
)
from .field import (
    SCALAR_FIELD_MODULUS,
    FIELD_ELEMENT_BYTES,
    is_field_element,
    to_minimal_bytes,
    to_padded_bytes,
)

__all__ = [
    "DIGEST_BYTES",
    "keccak256",
    "keccak256_int",
    "to_hex",
    "from_hex",
    "SCALAR_FIELD_MODULUS",
    "FIELD_ELEMENT_BYTES",
    "is_field_element",
    "to_minimal_bytes",
    "to_padded_bytes",
]
