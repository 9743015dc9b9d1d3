"""
Module 05 - Parameter Validation

Checks a ProofParameters bundle against the configuration a proving
system was set up for. Runs before any witness is built.
"""

from __future__ import annotations

from core.crypto.field import is_field_element
from core.schemas.errors import FieldRangeException, ShapeException
from core.schemas.params import ProofParameters


def validate_shape(params: ProofParameters, tree_depth: int, batch_size: int) -> None:
    """
    Check the length-bearing fields of ``params``.

    Checks run in order and the first violation is raised:
    1. len(id_comms) == batch_size
    2. len(merkle_proofs) == batch_size
    3. len(merkle_proofs[i]) == tree_depth, for each i

    Raises:
        ShapeException: naming the failed check (and index for check 3)
    """
    if len(params.id_comms) != batch_size:
        raise ShapeException(
            f"wrong number of identity commitments: {len(params.id_comms)}",
            check="id_comms",
            observed=len(params.id_comms),
            expected=batch_size,
        )
    if len(params.merkle_proofs) != batch_size:
        raise ShapeException(
            f"wrong number of merkle proofs: {len(params.merkle_proofs)}",
            check="merkle_proofs",
            observed=len(params.merkle_proofs),
            expected=batch_size,
        )
    for i, proof in enumerate(params.merkle_proofs):
        if len(proof) != tree_depth:
            raise ShapeException(
                f"wrong size of merkle proof for proof {i}: {len(proof)}",
                check="merkle_proof",
                observed=len(proof),
                expected=tree_depth,
                index=i,
            )


def validate_field_elements(params: ProofParameters) -> None:
    """
    Reject roots, commitments and path elements outside the scalar field.

    ``input_hash`` is a full 256-bit digest and is not checked.

    Raises:
        FieldRangeException: with the path of the first offending value
    """
    candidates: list[tuple[str, int]] = [
        ("preRoot", params.pre_root),
        ("postRoot", params.post_root),
    ]
    candidates.extend((f"idComms[{i}]", v) for i, v in enumerate(params.id_comms))
    for i, proof in enumerate(params.merkle_proofs):
        candidates.extend((f"merkleProofs[{i}][{j}]", v) for j, v in enumerate(proof))

    for path, value in candidates:
        if not is_field_element(value):
            raise FieldRangeException(f"{path} is not a canonical field element", field_path=path)
