"""
Common test fixtures shared by all modules.

Provides factory functions for:
- ProofParameters describing a real batch insertion (via MerkleTree)
- FakeBackend, a trivial proving backend for orchestrator tests
"""

from __future__ import annotations

from typing import Any, Optional

from core.merkle.merkle_tree import MerkleTree
from core.schemas.params import ProofParameters, ProvingConfiguration
from prover.backend import Proof, ProvingBackend, Relation, Witness
from prover.input_hash import compute_input_hash


# =============================================================================
# Batch Factory
# =============================================================================

def make_id_comms(batch_size: int, seed: int = 1) -> list[int]:
    """Distinct small commitments."""
    return [seed * 1000 + i + 1 for i in range(batch_size)]


def make_batch_params(
    tree_depth: int = 4,
    batch_size: int = 2,
    start_index: int = 0,
    prefilled: int = 0,
    id_comms: Optional[list[int]] = None,
    with_hash: bool = False,
) -> ProofParameters:
    """
    Build parameters for inserting ``batch_size`` leaves at ``start_index``.

    ``prefilled`` leaves (positions 0..prefilled-1) are written before the
    batch so the pre-root is not the empty root.
    """
    tree = MerkleTree(tree_depth)
    for i in range(prefilled):
        tree.set_leaf(i, 7_000_000 + i)
    comms = id_comms if id_comms is not None else make_id_comms(batch_size)
    batch = tree.insert_batch(start_index, comms)
    params = ProofParameters(
        start_index=start_index,
        pre_root=batch.pre_root,
        post_root=batch.post_root,
        id_comms=comms,
        merkle_proofs=batch.proofs,
    )
    if with_hash:
        params = params.model_copy(update={"input_hash": compute_input_hash(params)})
    return params


# =============================================================================
# Fake Backend
# =============================================================================

class FakeBackend(ProvingBackend):
    """
    Backend that proves anything and records every call.

    A proof is valid exactly for the input hash it was produced from.
    """

    name = "fake"

    def __init__(
        self,
        fail_setup: bool = False,
        fail_prove: Optional[Exception] = None,
    ) -> None:
        self.fail_setup = fail_setup
        self.fail_prove = fail_prove
        self.compiled: list[ProvingConfiguration] = []
        self.witnesses: list[Witness] = []
        self.verified: list[tuple[list[int], Proof]] = []

    def compile(self, configuration: ProvingConfiguration) -> Relation:
        self.compiled.append(configuration)
        return Relation(configuration=configuration, scheme="fake")

    def setup(self, relation: Relation) -> tuple[Any, Any]:
        if self.fail_setup:
            raise RuntimeError("key generation exploded")
        return "pk", "vk"

    def prove(self, relation: Relation, proving_key: Any, witness: Witness) -> Proof:
        self.witnesses.append(witness)
        if self.fail_prove is not None:
            raise self.fail_prove
        return Proof(scheme="fake", payload={"input_hash": hex(witness.input_hash)})

    def verify(self, verifying_key: Any, public_inputs: list[int], proof: Proof) -> bool:
        self.verified.append((public_inputs, proof))
        return proof.payload.get("input_hash") == hex(public_inputs[0])
