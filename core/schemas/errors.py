"""
Module 01 - Schemas
File: errors.py

Purpose: Error taxonomy for the batch insertion prover.
Every failure inside setup/prove/verify is raised as a ProverException
subclass carrying a stable machine-readable code and structured details.
"""

from typing import Any


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the prover."""

    # Parameter errors (always attributable to the caller)
    SHAPE_MISMATCH = "SHAPE_MISMATCH"
    FIELD_OUT_OF_RANGE = "FIELD_OUT_OF_RANGE"

    # Encoding errors
    HASH_ENCODING_ERROR = "HASH_ENCODING_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"

    # Backend errors
    BACKEND_SETUP_ERROR = "BACKEND_SETUP_ERROR"
    BACKEND_PROVE_ERROR = "BACKEND_PROVE_ERROR"
    BACKEND_VERIFY_ERROR = "BACKEND_VERIFY_ERROR"

    # Configuration
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ProverException(Exception):
    """
    Base exception for all prover errors.

    Carries structured error information that the HTTP layer renders
    into its error envelope.
    """

    def __init__(
        self,
        message: str,
        code: str = "PROVER_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ParameterException(ProverException):
    """A parameter bundle was rejected before any cryptographic work began."""


class ShapeException(ParameterException):
    """
    Raised when a parameter bundle does not match the configured shape.

    ``check`` names the violated check (``id_comms``, ``merkle_proofs`` or
    ``merkle_proof``); per-proof violations also carry the offending index.
    """

    def __init__(
        self,
        message: str,
        check: str,
        observed: int,
        expected: int,
        index: int | None = None,
    ) -> None:
        details: dict[str, Any] = {
            "check": check,
            "observed": observed,
            "expected": expected,
        }
        if index is not None:
            details["index"] = index
        super().__init__(message=message, code=ErrorCodes.SHAPE_MISMATCH, details=details)
        self.check = check
        self.observed = observed
        self.expected = expected
        self.index = index


class FieldRangeException(ParameterException):
    """Raised when a value is not a canonical scalar field element."""

    def __init__(self, message: str, field_path: str) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.FIELD_OUT_OF_RANGE,
            details={"field_path": field_path},
        )
        self.field_path = field_path


class HashEncodingException(ProverException):
    """Raised when the input hash preimage cannot be encoded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.HASH_ENCODING_ERROR, details=details)


class BackendSetupException(ProverException):
    """Raised when compiling the relation or generating keys fails. Fatal at startup."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.BACKEND_SETUP_ERROR, details=details)


class BackendProveException(ProverException):
    """Raised when witness construction or proof generation fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.BACKEND_PROVE_ERROR, details=details)


class BackendVerifyException(ProverException):
    """Raised when a proof is invalid or the public witness is malformed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.BACKEND_VERIFY_ERROR, details=details)


class SerializationException(ProverException):
    """Raised when a successful result cannot be encoded for transport."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCodes.SERIALIZATION_ERROR, details=details)


class ConfigError(ProverException):
    """Raised when the service configuration is invalid."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details={"key": key} if key else None,
        )
        self.key = key
