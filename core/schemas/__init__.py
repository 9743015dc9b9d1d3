"""
Module 01 - Schemas
File: __init__.py

Purpose: Export the parameter model and error taxonomy.
"""

from .errors import (
    BackendProveException,
    BackendSetupException,
    BackendVerifyException,
    ConfigError,
    ErrorCodes,
    FieldRangeException,
    HashEncodingException,
    ParameterException,
    ProverException,
    SerializationException,
    ShapeException,
)
from .params import (
    MAX_START_INDEX,
    BigInt,
    ProofParameters,
    ProvingConfiguration,
    parse_big_int,
)

__all__ = [
    "BackendProveException",
    "BackendSetupException",
    "BackendVerifyException",
    "ConfigError",
    "ErrorCodes",
    "FieldRangeException",
    "HashEncodingException",
    "ParameterException",
    "ProverException",
    "SerializationException",
    "ShapeException",
    "MAX_START_INDEX",
    "BigInt",
    "ProofParameters",
    "ProvingConfiguration",
    "parse_big_int",
]
