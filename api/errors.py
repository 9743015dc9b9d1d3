"""
Module 09 - API Error Handling

Error envelope for the prover endpoint: ``{"code": ..., "message": ...}``.

    400 malformed_body    request body is not a valid parameter bundle
    400 proving_error     prove() rejected the bundle or the backend failed
    500 unexpected_error  anything else
    405 (empty body)      wrong method on a known route
"""

from fastapi import Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models.responses import ErrorResponse


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(self, code: str, message: str, status_code: int = 400):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message)


class MalformedBodyError(APIError):
    """Request body could not be decoded as proof parameters."""

    def __init__(self, message: str):
        super().__init__(code="malformed_body", message=message, status_code=400)


class ProvingError(APIError):
    """
    prove() failed.

    Shape and range violations are caller errors; backend failures may be
    either caller or server faults but are reported the same way.
    """

    def __init__(self, message: str):
        super().__init__(code="proving_error", message=message, status_code=400)


class UnexpectedError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(code="unexpected_error", message=message, status_code=500)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def method_not_allowed_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """405 with no body; every other HTTP error keeps FastAPI's default."""
    if exc.status_code == 405:
        return Response(status_code=405, headers=getattr(exc, "headers", None))
    return await http_exception_handler(request, exc)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=UnexpectedError(f"{type(exc).__name__}: {exc}").to_response().model_dump(),
    )
