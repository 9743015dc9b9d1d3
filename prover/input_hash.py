"""
Module 06 - Input Hash Codec

The single public input of a batch insertion proof is

    keccak256(
        uint32_be(startIndex)
        || minimal_be(preRoot)
        || minimal_be(postRoot)
        || pad32_be(idComms[0]) || ... || pad32_be(idComms[n-1])
    )

read as a big-endian unsigned integer. Big-endian throughout so the
on-chain verifier can rebuild the preimage with abi.encodePacked and no
byte swapping. This layout is a hard contract with the contract: any
change to field order, padding width or endianness breaks agreement.

Note that preRoot and postRoot are *not* padded (zero encodes to no
bytes at all), while every commitment occupies exactly 32 bytes.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from core.crypto.field import FIELD_ELEMENT_BYTES, to_minimal_bytes, to_padded_bytes
from core.crypto.hashing import keccak256_int
from core.schemas.errors import HashEncodingException
from core.schemas.params import MAX_START_INDEX, ProofParameters


class BatchCommitment(Protocol):
    """Anything carrying the fields the input hash commits to."""

    start_index: int
    pre_root: int
    post_root: int
    id_comms: Sequence[int]


def encode_input_hash_preimage(params: BatchCommitment) -> bytes:
    """
    Byte string hashed into the public input.

    Raises:
        HashEncodingException: if startIndex does not fit 32 bits or a
            commitment needs more than 32 bytes (never truncated)
    """
    if not 0 <= params.start_index <= MAX_START_INDEX:
        raise HashEncodingException(
            f"startIndex {params.start_index} does not fit in 4 bytes",
            details={"field_path": "startIndex"},
        )

    parts = [
        params.start_index.to_bytes(4, "big"),
        to_minimal_bytes(params.pre_root),
        to_minimal_bytes(params.post_root),
    ]
    for i, id_comm in enumerate(params.id_comms):
        try:
            parts.append(to_padded_bytes(id_comm, FIELD_ELEMENT_BYTES))
        except OverflowError:
            raise HashEncodingException(
                f"idComms[{i}] needs more than {FIELD_ELEMENT_BYTES} bytes",
                details={"field_path": f"idComms[{i}]"},
            ) from None
    return b"".join(parts)


def compute_input_hash(params: BatchCommitment) -> int:
    """Keccak-256 of the preimage as a big-endian integer. Pure and deterministic."""
    return keccak256_int(encode_input_hash_preimage(params))


def with_input_hash(params: ProofParameters) -> ProofParameters:
    """Copy of ``params`` with ``input_hash`` set from the codec."""
    return params.model_copy(update={"input_hash": compute_input_hash(params)})
