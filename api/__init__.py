"""
Module 09 - Prover Service (FastAPI)

HTTP surface of the batch insertion prover:
- POST /prove - Produce a proof (prover listener)
- GET /health - Health check (prover listener)
- GET /metrics - Prometheus metrics (metrics listener)

Usage:
    python -m api.server
"""

__version__ = "0.1.0"
