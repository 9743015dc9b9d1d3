"""
Module 09 - Prove Route

POST /prove: decode a parameter bundle, prove it, return the proof.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from api.deps import ProverService, get_prover_service
from api.errors import MalformedBodyError, ProvingError, UnexpectedError
from core.schemas.errors import ProverException, SerializationException
from core.schemas.params import ProofParameters


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proving"])


def _describe_validation_error(e: ValidationError) -> str:
    first = e.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    suffix = f" (and {e.error_count() - 1} more)" if e.error_count() > 1 else ""
    return f"{location}: {first.get('msg', 'invalid value')}{suffix}"


@router.post("/prove")
async def prove(
    request: Request,
    service: ProverService = Depends(get_prover_service),
) -> Response:
    """
    Produce a batch insertion proof.

    Proving is CPU-bound and runs on the threadpool so the event loop
    keeps serving other requests.
    """
    service.logger.info("received prove request")
    body = await request.body()
    try:
        params = ProofParameters.model_validate_json(body)
    except ValidationError as e:
        raise MalformedBodyError(_describe_validation_error(e)) from e

    try:
        proof = await run_in_threadpool(service.prove, params)
    except ProverException as e:
        raise ProvingError(e.message) from e

    try:
        content = proof.to_json()
    except SerializationException as e:
        logger.exception("Failed to serialize proof")
        raise UnexpectedError(e.message) from e

    return Response(content=content, status_code=200, media_type="application/json")
