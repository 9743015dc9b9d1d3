"""
Module 09 - API Dependencies

Dependency injection for the API. The ProverService wraps the proving
system with admission control and metrics and is stored on the app state.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from fastapi import Request

from api.metrics import PROOF_DURATION, PROOFS_IN_FLIGHT, PROOFS_TOTAL
from core.schemas.errors import ProverException
from core.schemas.params import ProofParameters
from prover.backend import Proof
from prover.proving_system import ProvingSystem

module_logger = logging.getLogger(__name__)


class ProverService:
    """
    Proving system behind a bounded admission gate.

    At most ``max_concurrent_proofs`` prove calls run at once; further
    callers block until a slot frees up. A started proof always runs to
    completion.
    """

    def __init__(
        self,
        proving_system: ProvingSystem,
        max_concurrent_proofs: int = 1,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if max_concurrent_proofs <= 0:
            raise ValueError("max_concurrent_proofs must be positive")
        self.proving_system = proving_system
        self.max_concurrent_proofs = max_concurrent_proofs
        self.logger = logger or module_logger
        self._slots = threading.BoundedSemaphore(max_concurrent_proofs)

    def prove(self, params: ProofParameters) -> Proof:
        """Run ``proving_system.prove`` once a slot is free."""
        with self._slots:
            PROOFS_IN_FLIGHT.inc()
            started = time.perf_counter()
            try:
                proof = self.proving_system.prove(params)
            except ProverException as e:
                PROOFS_TOTAL.labels(outcome="rejected").inc()
                self.logger.info(f"Prove request rejected: {e.code}: {e.message}")
                raise
            except Exception:
                PROOFS_TOTAL.labels(outcome="error").inc()
                raise
            finally:
                PROOF_DURATION.observe(time.perf_counter() - started)
                PROOFS_IN_FLIGHT.dec()
        PROOFS_TOTAL.labels(outcome="success").inc()
        return proof


def get_prover_service(request: Request) -> ProverService:
    """FastAPI dependency returning the service attached by create_app()."""
    return request.app.state.prover_service
