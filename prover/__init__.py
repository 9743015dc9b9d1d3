"""
Batch insertion prover.

Setup / Prove / Verify for fixed-depth Merkle tree batch insertions,
built on a pluggable proving backend.
"""

from prover.backend import (
    Proof,
    ProvingArtifacts,
    ProvingBackend,
    Relation,
    Witness,
    available_backends,
    get_backend,
    register_backend,
)
from prover.input_hash import compute_input_hash, encode_input_hash_preimage, with_input_hash
from prover.proving_system import ProvingSystem
from prover.shape import validate_field_elements, validate_shape

__all__ = [
    "Proof",
    "ProvingArtifacts",
    "ProvingBackend",
    "ProvingSystem",
    "Relation",
    "Witness",
    "available_backends",
    "compute_input_hash",
    "encode_input_hash_preimage",
    "get_backend",
    "register_backend",
    "validate_field_elements",
    "validate_shape",
    "with_input_hash",
]
