"""
Module 08 - Proving System

Owns the compiled relation and key pair for one (tree depth, batch size)
configuration and exposes Setup / Prove / Verify on top of the shape
validator, the input hash codec and a proving backend.

Every failure is terminal for the call that raised it; nothing here
retries.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO

from core.schemas.errors import (
    BackendProveException,
    BackendSetupException,
    BackendVerifyException,
    ProverException,
)
from core.schemas.params import ProofParameters, ProvingConfiguration
from prover.backend import Proof, ProvingArtifacts, ProvingBackend, Witness, get_backend
from prover.input_hash import compute_input_hash
from prover.shape import validate_field_elements, validate_shape


module_logger = logging.getLogger(__name__)


class ProvingSystem:
    """
    Setup output plus the operations that use it.

    The artifacts are read-only after construction, so one instance can
    serve any number of concurrent prove/verify calls; each call builds
    its own witness.
    """

    def __init__(
        self,
        configuration: ProvingConfiguration,
        artifacts: ProvingArtifacts,
        backend: ProvingBackend,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.configuration = configuration
        self.artifacts = artifacts
        self.backend = backend
        self.logger = logger or module_logger

    @property
    def tree_depth(self) -> int:
        return self.configuration.tree_depth

    @property
    def batch_size(self) -> int:
        return self.configuration.batch_size

    @classmethod
    def setup(
        cls,
        tree_depth: int,
        batch_size: int,
        backend: ProvingBackend | str = "reference",
        logger: Optional[logging.Logger] = None,
    ) -> "ProvingSystem":
        """
        Compile the relation for the given shape and generate keys.

        Raises:
            BackendSetupException: on any failure; the caller must not
                serve traffic without a proving system
        """
        log = logger or module_logger
        try:
            configuration = ProvingConfiguration(tree_depth=tree_depth, batch_size=batch_size)
            if isinstance(backend, str):
                backend = get_backend(backend)
            log.info(
                f"Compiling relation (backend={backend.name}, "
                f"tree_depth={tree_depth}, batch_size={batch_size})"
            )
            relation = backend.compile(configuration)
            proving_key, verifying_key = backend.setup(relation)
        except BackendSetupException:
            raise
        except Exception as e:
            raise BackendSetupException(
                f"setup failed: {e}",
                details={"tree_depth": tree_depth, "batch_size": batch_size},
            ) from e

        log.info("Setup complete")
        return cls(
            configuration=configuration,
            artifacts=ProvingArtifacts(relation, proving_key, verifying_key),
            backend=backend,
            logger=log,
        )

    def prove(self, params: ProofParameters) -> Proof:
        """
        Validate ``params`` and produce a proof of the batch insertion.

        A missing ``input_hash`` is derived with the input hash codec.

        Raises:
            ShapeException / FieldRangeException: before any proving work
            HashEncodingException: if the input hash cannot be derived
            BackendProveException: if witness construction or proving fails
        """
        validate_shape(params, self.tree_depth, self.batch_size)
        validate_field_elements(params)

        input_hash = params.input_hash
        if input_hash is None:
            input_hash = compute_input_hash(params)
        witness = Witness.from_params(params, input_hash)

        self.logger.info("generating proof")
        try:
            proof = self.backend.prove(
                self.artifacts.relation, self.artifacts.proving_key, witness
            )
        except ProverException:
            raise
        except Exception as e:
            raise BackendProveException(f"proof generation failed: {e}") from e
        self.logger.info("proof generated successfully")
        return proof

    def verify(self, input_hash: int, proof: Proof) -> None:
        """
        Check ``proof`` against ``input_hash`` alone.

        Nothing but the hash is consulted, so the hash is the sole
        binding to the batch contents.

        Raises:
            BackendVerifyException: if the proof is invalid or malformed
        """
        witness = Witness.public(input_hash)
        try:
            ok = self.backend.verify(
                self.artifacts.verifying_key, witness.public_inputs(), proof
            )
        except ProverException:
            raise
        except Exception as e:
            raise BackendVerifyException(f"verification failed: {e}") from e
        if not ok:
            raise BackendVerifyException("proof is invalid for the given input hash")

    def export_verifier(self, writer: TextIO) -> None:
        """Write the on-chain verifier for this system's verifying key."""
        self.backend.export_verifier(self.artifacts.verifying_key, writer)
