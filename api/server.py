"""
Module 09 - Server Lifecycle

Runs the prover app and the metrics app on two independent listeners,
each as a RunningJob, combined into one handle the process shuts down
once.

Usage:
    python -m api.server
"""

from __future__ import annotations

import logging
import signal
import sys
import threading
from typing import Optional

import uvicorn

from api.app import create_app
from api.metrics import create_metrics_app
from core.config.runtime import ServiceConfig, parse_address
from core.lifecycle.jobs import RunningJob, combine_jobs, spawn_job
from core.schemas.errors import BackendSetupException, ConfigError
from prover.proving_system import ProvingSystem


module_logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_server(app, address: str, shutdown_timeout_s: float) -> uvicorn.Server:
    host, port = parse_address(address)
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_config=None,
        timeout_graceful_shutdown=shutdown_timeout_s,
    )
    return uvicorn.Server(config)


def spawn_server_job(
    server: uvicorn.Server,
    label: str,
    shutdown_timeout_s: float = 30.0,
    logger: Optional[logging.Logger] = None,
) -> RunningJob:
    """
    Serve on a background thread.

    Shutdown stops accepting connections and waits up to
    ``shutdown_timeout_s`` for in-flight requests to drain. It cannot
    cancel a proof that is already running.
    """
    log = logger or module_logger
    stopped = threading.Event()

    def start() -> None:
        try:
            server.run()
        finally:
            stopped.set()

    def shutdown() -> None:
        log.info(f"shutting down {label}")
        server.should_exit = True
        if not stopped.wait(shutdown_timeout_s + 1):
            server.force_exit = True
            log.error(f"error when shutting down {label}: drain window of {shutdown_timeout_s}s exceeded")
            return
        log.info(f"{label} shut down")

    return spawn_job(start, shutdown, name=label)


def run(
    config: ServiceConfig,
    proving_system: ProvingSystem,
    logger: Optional[logging.Logger] = None,
) -> RunningJob:
    """
    Start the metrics and prover listeners.

    The returned job shuts down the metrics listener first, then the
    prover listener.
    """
    log = logger or module_logger
    timeout = config.server.shutdown_timeout_s

    metrics_server = build_server(create_metrics_app(), config.server.metrics_address, timeout)
    metrics_job = spawn_server_job(metrics_server, "metrics server", timeout, log)
    log.info(f"metrics server started (addr={config.server.metrics_address})")

    prover_app = create_app(
        proving_system,
        max_concurrent_proofs=config.prover.max_concurrent_proofs,
        logger=log,
    )
    prover_server = build_server(prover_app, config.server.prover_address, timeout)
    prover_job = spawn_server_job(prover_server, "prover server", timeout, log)
    log.info(f"app server started (addr={config.server.prover_address})")

    return combine_jobs(metrics_job, prover_job, name="prover service")


def main() -> int:
    """Load configuration, set up the proving system and serve until signalled."""
    try:
        config = ServiceConfig.load()
    except (ConfigError, FileNotFoundError) as e:
        configure_logging()
        module_logger.error(f"Invalid configuration: {e}")
        return 2

    configure_logging(config.server.log_level)
    log = logging.getLogger("mbu_prover")

    try:
        proving_system = ProvingSystem.setup(
            config.prover.tree_depth,
            config.prover.batch_size,
            backend=config.prover.backend,
            logger=log,
        )
    except BackendSetupException:
        log.exception("Setup failed; not serving")
        return 1

    job = run(config, proving_system, log)

    stop = threading.Event()

    def _on_signal(signum, frame) -> None:
        log.info(f"Received signal {signal.Signals(signum).name}")
        stop.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    while not stop.is_set() and job.is_running and not job.errors:
        stop.wait(0.5)

    job.shutdown()
    job.join(config.server.shutdown_timeout_s + 1)
    return 1 if job.errors else 0


if __name__ == "__main__":
    sys.exit(main())
