"""
Module 09 - Metrics

Prometheus instruments for the prover and the app that exposes them on
the separate metrics listener.
"""

from fastapi import FastAPI, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


PROOFS_TOTAL = Counter(
    "mbu_proofs_total",
    "Prove requests by outcome",
    ["outcome"],
)
PROOF_DURATION = Histogram(
    "mbu_proof_duration_seconds",
    "Time spent inside prove(), including validation",
    buckets=(0.1, 0.5, 1, 2.5, 5, 10, 30, 60, 120, 300),
)
PROOFS_IN_FLIGHT = Gauge(
    "mbu_proofs_in_flight",
    "Proofs currently being generated",
)


def create_metrics_app(registry: CollectorRegistry = REGISTRY) -> FastAPI:
    """App serving GET /metrics in the Prometheus text format."""
    app = FastAPI(
        title="MBU Prover Metrics",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.get("/metrics")
    def metrics() -> Response:
        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    return app
