"""
Module 01 - Schemas
File: params.py

Purpose: Parameter bundle accepted by the prover and the fixed shape
configuration a proving system is set up for.

Wire contract (v1), JSON object with camelCase keys:
    inputHash     optional integer
    startIndex    integer in [0, 2^32)
    preRoot       integer
    postRoot      integer
    idComms       array of integers, one per inserted leaf
    merkleProofs  array of arrays of integers, one sibling path per leaf

Integers may be JSON numbers or strings: plain decimal digits, or hex digits
after a lowercase "0x". Signs, whitespace, underscores and "0X" are rejected.
Lengths are not checked here; see prover.shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


MAX_START_INDEX = 2**32 - 1

_INT_STRING = re.compile(r"0x[0-9a-fA-F]+|[0-9]+")


def parse_big_int(value: Any) -> int:
    """Parse a non-negative integer from a JSON number or a decimal/hex string."""
    if isinstance(value, bool):
        raise ValueError("booleans are not integers")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        if not _INT_STRING.fullmatch(value):
            raise ValueError(f"not an integer string: {value!r}")
        parsed = int(value[2:], 16) if value.startswith("0x") else int(value, 10)
    else:
        raise ValueError(f"expected integer or integer string, got {type(value).__name__}")
    if parsed < 0:
        raise ValueError(f"negative integers are not allowed: {parsed}")
    return parsed


BigInt = Annotated[int, BeforeValidator(parse_big_int)]


class ProofParameters(BaseModel):
    """
    Public and private inputs for one batch insertion proof.

    ``input_hash`` is optional when requesting a proof (the prover derives it)
    and is the only field that matters when verifying.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    input_hash: Optional[BigInt] = Field(
        default=None,
        alias="inputHash",
        description="Keccak-256 commitment to the batch; derived when absent",
    )
    start_index: BigInt = Field(
        ...,
        alias="startIndex",
        ge=0,
        le=MAX_START_INDEX,
        description="Index of the first inserted leaf",
    )
    pre_root: BigInt = Field(..., alias="preRoot", description="Tree root before the batch")
    post_root: BigInt = Field(..., alias="postRoot", description="Tree root after the batch")
    id_comms: list[BigInt] = Field(
        ...,
        alias="idComms",
        description="Identity commitments, one per inserted leaf, in insertion order",
    )
    merkle_proofs: list[list[BigInt]] = Field(
        ...,
        alias="merkleProofs",
        description="Sibling paths (leaf level first), one per inserted leaf",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the camelCase wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ProvingConfiguration:
    """Immutable (tree depth, batch size) pair fixed at setup time."""

    tree_depth: int
    batch_size: int

    def __post_init__(self) -> None:
        if self.tree_depth <= 0:
            raise ValueError(f"tree_depth must be positive, got {self.tree_depth}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.batch_size > 2**self.tree_depth:
            raise ValueError(
                f"batch_size {self.batch_size} exceeds tree capacity 2^{self.tree_depth}"
            )
