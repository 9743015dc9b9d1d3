"""
Module 03 - Fixed-Depth Merkle Tree
Sparse binary Merkle tree of fixed depth over scalar field elements.

Owner: Protocol/Crypto Engineer
Module ID: M03

Commitment Rules (Hard Contracts):
1. Empty leaf: 0
2. Parent hashing: keccak256(pad32(left) || pad32(right)) mod r
3. Sibling paths are ordered leaf level first
4. Path direction at level k is bit k of the leaf index (LSB first):
   0 means the running node is the left child

Determinism Notes:
- Unset subtrees take the precomputed empty-subtree value for their level
- Leaf ordering is positional; nothing is sorted
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

from core.crypto.field import SCALAR_FIELD_MODULUS, to_padded_bytes
from core.crypto.hashing import keccak256_int


EMPTY_LEAF: int = 0


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion proof for one leaf of a fixed-depth tree.

    Attributes:
        leaf: The leaf value being proven
        index: Position of the leaf
        siblings: Sibling values from the leaf level up
        root: The root this proof is against
    """
    leaf: int
    index: int
    siblings: list[int]
    root: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(left: int, right: int) -> int:
    """Parent of two child nodes, reduced into the scalar field."""
    return keccak256_int(to_padded_bytes(left) + to_padded_bytes(right)) % SCALAR_FIELD_MODULUS


@lru_cache(maxsize=None)
def empty_subtree_roots(depth: int) -> tuple[int, ...]:
    """
    Roots of empty subtrees for heights 0..depth.

    ``empty_subtree_roots(d)[0]`` is the empty leaf and
    ``empty_subtree_roots(d)[d]`` is the root of an empty tree of depth d.
    """
    roots = [EMPTY_LEAF]
    for _ in range(depth):
        roots.append(merkle_parent(roots[-1], roots[-1]))
    return tuple(roots)


def compute_root(leaf: int, index: int, siblings: Sequence[int]) -> int:
    """Recompute the root reached by walking ``siblings`` up from ``leaf`` at ``index``."""
    node = leaf
    for level, sibling in enumerate(siblings):
        if (index >> level) & 1 == 0:
            node = merkle_parent(node, sibling)
        else:
            node = merkle_parent(sibling, node)
    return node


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """True if the proof's siblings lead from its leaf to its root."""
    if proof.index >> len(proof.siblings):
        return False
    return compute_root(proof.leaf, proof.index, proof.siblings) == proof.root


@dataclass(frozen=True)
class BatchInsertion:
    """
    Result of inserting consecutive leaves into a tree.

    ``proofs[i]`` is the sibling path of leaf ``start_index + i`` taken
    immediately before that leaf was written.
    """
    start_index: int
    leaves: list[int]
    pre_root: int
    post_root: int
    proofs: list[list[int]]


class MerkleTree:
    """
    Sparse fixed-depth Merkle tree.

    Only non-empty nodes are stored; everything else is derived from
    the empty-subtree roots.

    Example:
        >>> tree = MerkleTree(depth=4)
        >>> batch = tree.insert_batch(0, [11, 22])
        >>> batch.post_root == tree.root
        True
    """

    def __init__(self, depth: int) -> None:
        if depth <= 0:
            raise ValueError(f"Tree depth must be positive, got {depth}")
        self.depth = depth
        self._empty = empty_subtree_roots(depth)
        # (height, position) -> value; height 0 is the leaf level
        self._nodes: dict[tuple[int, int], int] = {}

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    @property
    def root(self) -> int:
        return self._node(self.depth, 0)

    def _node(self, height: int, position: int) -> int:
        return self._nodes.get((height, position), self._empty[height])

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.capacity:
            raise IndexError(
                f"Leaf index {index} out of range for tree of depth {self.depth}"
            )

    def leaf(self, index: int) -> int:
        self._check_index(index)
        return self._node(0, index)

    def set_leaf(self, index: int, value: int) -> int:
        """Write a leaf and rehash its path. Returns the new root."""
        self._check_index(index)
        self._nodes[(0, index)] = value
        position = index
        for height in range(self.depth):
            left = self._node(height, position & ~1)
            right = self._node(height, position | 1)
            position >>= 1
            self._nodes[(height + 1, position)] = merkle_parent(left, right)
        return self.root

    def siblings(self, index: int) -> list[int]:
        """Sibling path for the leaf at ``index``, leaf level first."""
        self._check_index(index)
        return [self._node(height, (index >> height) ^ 1) for height in range(self.depth)]

    def proof(self, index: int) -> MerkleProof:
        return MerkleProof(
            leaf=self.leaf(index),
            index=index,
            siblings=self.siblings(index),
            root=self.root,
        )

    def insert_batch(self, start_index: int, leaves: Sequence[int]) -> BatchInsertion:
        """
        Write ``leaves`` at consecutive positions from ``start_index``.

        Raises:
            IndexError: If the batch runs past the end of the tree
        """
        if leaves:
            self._check_index(start_index + len(leaves) - 1)
        pre_root = self.root
        proofs: list[list[int]] = []
        for offset, value in enumerate(leaves):
            index = start_index + offset
            proofs.append(self.siblings(index))
            self.set_leaf(index, value)
        return BatchInsertion(
            start_index=start_index,
            leaves=list(leaves),
            pre_root=pre_root,
            post_root=self.root,
            proofs=proofs,
        )
