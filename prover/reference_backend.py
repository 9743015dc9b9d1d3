"""
Module 07 - Reference Proving Backend

In-process backend for development and tests. It evaluates the batch
insertion relation directly and, when it holds, binds the public input
to a keyed keccak tag. Anyone holding the verifying key can check a
proof; anyone holding it can also forge one, so this is a designated
verifier scheme. It is not zero-knowledge and not succinct in any
cryptographic sense.

Relation (for depth d, batch size n):
    input_hash == keccak input hash of (start_index, pre_root, post_root, id_comms)
    root_0 = pre_root
    for i in 0..n-1, with index = start_index + i:
        compute_root(EMPTY_LEAF, index, merkle_proofs[i]) == root_i
        root_{i+1} = compute_root(id_comms[i], index, merkle_proofs[i])
    root_n == post_root

Tag:
    keccak256(secret || DOMAIN || uint32(d) || uint32(n) || uint256(input_hash))
"""

from __future__ import annotations

import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import TextIO

from core.crypto.hashing import DIGEST_BYTES, from_hex, keccak256, to_hex
from core.merkle.merkle_tree import EMPTY_LEAF, compute_root
from core.schemas.errors import BackendProveException, BackendVerifyException
from core.schemas.params import ProvingConfiguration
from prover.backend import Proof, ProvingBackend, Relation, Witness, register_backend
from prover.input_hash import compute_input_hash

logger = logging.getLogger(__name__)

SCHEME = "reference-keccak-mac"
DOMAIN = b"mbu-reference-v1"


@dataclass(frozen=True)
class ReferenceKey:
    """Shared secret used as both proving and verifying key."""
    secret: bytes
    configuration: ProvingConfiguration

    @property
    def key_id(self) -> str:
        return to_hex(keccak256(self.secret)[:8])

    def __repr__(self) -> str:
        return f"ReferenceKey(key_id={self.key_id!r}, configuration={self.configuration!r})"


class BatchInsertionRelation:
    """Direct evaluation of the batch insertion relation for one shape."""

    def __init__(self, configuration: ProvingConfiguration) -> None:
        self.configuration = configuration

    def check(self, witness: Witness) -> None:
        """
        Raises:
            BackendProveException: naming the first constraint that fails
        """
        depth = self.configuration.tree_depth
        batch_size = self.configuration.batch_size

        if len(witness.id_comms) != batch_size or len(witness.merkle_proofs) != batch_size:
            raise BackendProveException("witness does not match the compiled batch size")
        if any(len(path) != depth for path in witness.merkle_proofs):
            raise BackendProveException("witness does not match the compiled tree depth")

        if witness.input_hash != compute_input_hash(witness):
            raise BackendProveException("input hash does not commit to the batch")

        root = witness.pre_root
        for i, (id_comm, path) in enumerate(zip(witness.id_comms, witness.merkle_proofs)):
            index = witness.start_index + i
            if index >> depth:
                raise BackendProveException(
                    f"leaf index {index} is outside a tree of depth {depth}",
                    details={"index": i},
                )
            if compute_root(EMPTY_LEAF, index, path) != root:
                raise BackendProveException(
                    f"merkle proof {i} does not prove an empty leaf under the current root",
                    details={"index": i},
                )
            root = compute_root(id_comm, index, path)

        if root != witness.post_root:
            raise BackendProveException("post root does not match the inserted batch")


class ReferenceBackend(ProvingBackend):
    """Keyed-hash reference backend; see module docstring."""

    name = "reference"

    def compile(self, configuration: ProvingConfiguration) -> Relation:
        return Relation(
            configuration=configuration,
            scheme=SCHEME,
            compiled=BatchInsertionRelation(configuration),
        )

    def setup(self, relation: Relation) -> tuple[ReferenceKey, ReferenceKey]:
        key = ReferenceKey(secrets.token_bytes(32), relation.configuration)
        logger.debug(f"Generated reference key {key.key_id}")
        return key, key

    def _tag(self, key: ReferenceKey, input_hash: int) -> bytes:
        config = key.configuration
        return keccak256(
            key.secret
            + DOMAIN
            + config.tree_depth.to_bytes(4, "big")
            + config.batch_size.to_bytes(4, "big")
            + input_hash.to_bytes(32, "big")
        )

    def prove(self, relation: Relation, proving_key: ReferenceKey, witness: Witness) -> Proof:
        if witness.public_only:
            raise BackendProveException("cannot prove from a public-only witness")
        if witness.input_hash >> 256:
            raise BackendProveException("input hash does not fit in 256 bits")
        relation.compiled.check(witness)
        return Proof(
            scheme=SCHEME,
            payload={
                "key_id": proving_key.key_id,
                "tag": to_hex(self._tag(proving_key, witness.input_hash)),
            },
        )

    def verify(self, verifying_key: ReferenceKey, public_inputs: list[int], proof: Proof) -> bool:
        if proof.scheme != SCHEME:
            raise BackendVerifyException(f"unsupported proof scheme: {proof.scheme}")
        if len(public_inputs) != 1 or not 0 <= public_inputs[0] < 2**256:
            raise BackendVerifyException("expected exactly one 256-bit public input")
        tag = proof.payload.get("tag")
        if not isinstance(tag, str):
            raise BackendVerifyException("proof is missing its tag")
        try:
            tag_bytes = from_hex(tag, DIGEST_BYTES)
        except ValueError as e:
            raise BackendVerifyException(f"malformed proof tag: {e}") from e
        return hmac.compare_digest(tag_bytes, self._tag(verifying_key, public_inputs[0]))

    def export_verifier(self, verifying_key: ReferenceKey, writer: TextIO) -> None:
        config = verifying_key.configuration
        writer.write(_SOLIDITY_TEMPLATE.format(
            secret=verifying_key.secret.hex(),
            domain=DOMAIN.decode("ascii"),
            depth=config.tree_depth,
            batch_size=config.batch_size,
        ))


# The embedded secret is public once deployed; for local test chains only.
_SOLIDITY_TEMPLATE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

contract ReferenceBatchInsertionVerifier {{
    bytes32 private constant SECRET = hex"{secret}";
    bytes private constant DOMAIN = "{domain}";
    uint32 private constant TREE_DEPTH = {depth};
    uint32 private constant BATCH_SIZE = {batch_size};

    function verifyProof(uint256 inputHash, bytes32 tag) external pure returns (bool) {{
        return keccak256(
            abi.encodePacked(SECRET, DOMAIN, TREE_DEPTH, BATCH_SIZE, inputHash)
        ) == tag;
    }}
}}
"""


register_backend(ReferenceBackend.name, ReferenceBackend)


__all__ = ["BatchInsertionRelation", "ReferenceBackend", "ReferenceKey", "SCHEME"]
