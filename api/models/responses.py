"""
Module 09 - API Response Models

Pydantic models for API response serialization.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "mbu-prover"
    version: str = "v1"
    tree_depth: int = Field(..., description="Depth of the tree proofs are produced for")
    batch_size: int = Field(..., description="Number of insertions per proof")


class ErrorResponse(BaseModel):
    """Error envelope returned with 400 and 500 responses."""

    code: str = Field(..., description="malformed_body, proving_error or unexpected_error")
    message: str = Field(..., description="Human-readable error message")
