"""
Module 03 - Fixed-Depth Merkle Tree

This module provides:
- merkle_parent: keccak-based parent hash reduced into the scalar field
- compute_root / verify_merkle_proof: sibling path evaluation
- MerkleTree: sparse tree with batch insertion that records the
  sibling path of every inserted leaf

Usage:
    from core.merkle import MerkleTree

    tree = MerkleTree(depth=20)
    batch = tree.insert_batch(0, id_comms)
    # batch.pre_root, batch.post_root, batch.proofs feed a prove request
"""
from .merkle_tree import (
    EMPTY_LEAF,
    BatchInsertion,
    MerkleProof,
    MerkleTree,
    compute_root,
    empty_subtree_roots,
    merkle_parent,
    verify_merkle_proof,
)


__all__ = [
    "EMPTY_LEAF",
    "BatchInsertion",
    "MerkleProof",
    "MerkleTree",
    "compute_root",
    "empty_subtree_roots",
    "merkle_parent",
    "verify_merkle_proof",
]
