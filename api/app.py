"""
Module 09 - FastAPI Application

Prover application setup and configuration.

Usage:
    uvicorn --factory api.app:create_app_from_env

    # Or run both listeners (prover + metrics)
    python -m api.server
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.deps import ProverService
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    method_not_allowed_handler,
)
from api.routes import health, prove
from core.config.runtime import ServiceConfig
from prover.proving_system import ProvingSystem


def create_app(
    proving_system: ProvingSystem,
    max_concurrent_proofs: int = 1,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create the prover application around an already set up proving system."""

    app = FastAPI(
        title="MBU Prover API",
        description="""
HTTP API producing batch insertion proofs for a fixed-depth Merkle tree.

## Endpoints

- **POST /prove** - Prove a batch insertion, returns the proof
- **GET /health** - Health check

## Errors

- `400 malformed_body` - body is not a valid parameter bundle
- `400 proving_error` - parameters rejected or proving failed
- `500 unexpected_error` - internal failure
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
    )

    app.state.prover_service = ProverService(
        proving_system,
        max_concurrent_proofs=max_concurrent_proofs,
        logger=logger,
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(prove.router)

    return app


def create_app_from_env() -> FastAPI:
    """Load configuration, run setup and build the app (for ``uvicorn --factory``)."""
    config = ServiceConfig.load()
    proving_system = ProvingSystem.setup(
        config.prover.tree_depth,
        config.prover.batch_size,
        backend=config.prover.backend,
    )
    return create_app(proving_system, config.prover.max_concurrent_proofs)
