"""
Runtime Configuration Module

Provides configuration loading for the prover service.
"""

from .runtime import ProverConfig, ServerConfig, ServiceConfig, parse_address

__all__ = [
    "ProverConfig",
    "ServerConfig",
    "ServiceConfig",
    "parse_address",
]
