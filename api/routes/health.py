"""
Module 09 - Health Check Route

Liveness probe for the prover listener.
"""

from fastapi import APIRouter, Depends

from api.deps import ProverService, get_prover_service
from api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(service: ProverService = Depends(get_prover_service)) -> HealthResponse:
    """Service status plus the shape proofs are produced for."""
    return HealthResponse(
        ok=True,
        tree_depth=service.proving_system.tree_depth,
        batch_size=service.proving_system.batch_size,
    )
