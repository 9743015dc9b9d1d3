"""
Runtime Configuration

Central configuration for the prover service: proof shape, listener
addresses and shutdown behaviour.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.schemas.errors import ConfigError

load_dotenv()


def parse_address(address: str) -> tuple[str, int]:
    """
    Split a ``host:port`` listener address.

    An empty host (``":3001"``) means all interfaces.

    Raises:
        ConfigError: if the address has no port or the port is invalid
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ConfigError(f"Address must be host:port, got {address!r}", key="address")
    try:
        port_number = int(port)
    except ValueError:
        raise ConfigError(f"Invalid port in address {address!r}", key="address") from None
    if not 0 <= port_number <= 65535:
        raise ConfigError(f"Port out of range in address {address!r}", key="address")
    return host.strip("[]") or "0.0.0.0", port_number


@dataclass
class ProverConfig:
    """Shape and admission control for the proving system."""
    tree_depth: int = 20
    batch_size: int = 100
    backend: str = "reference"
    max_concurrent_proofs: int = 1

    def __post_init__(self) -> None:
        for name in ("tree_depth", "batch_size", "max_concurrent_proofs"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}", key=name)


@dataclass
class ServerConfig:
    """Listener addresses and lifecycle settings."""
    prover_address: str = "0.0.0.0:3001"
    metrics_address: str = "0.0.0.0:9998"
    shutdown_timeout_s: float = 30.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name in ("prover_address", "metrics_address", "log_level"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigError(f"{name} must be a string, got {value!r}", key=name)
        parse_address(self.prover_address)
        parse_address(self.metrics_address)
        timeout = self.shutdown_timeout_s
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool):
            raise ConfigError(
                f"shutdown_timeout_s must be a number, got {timeout!r}", key="shutdown_timeout_s"
            )
        if self.shutdown_timeout_s < 0:
            raise ConfigError("shutdown_timeout_s must not be negative", key="shutdown_timeout_s")


@dataclass
class ServiceConfig:
    """
    Complete configuration for the prover service.

    Can be loaded from:
    - Environment variables (and a .env file)
    - JSON file
    - Programmatic construction
    """
    prover: ProverConfig = field(default_factory=ProverConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MBU_TREE_DEPTH: depth of the Merkle tree
        - MBU_BATCH_SIZE: number of insertions per proof
        - MBU_BACKEND: proving backend name
        - MBU_MAX_CONCURRENT_PROOFS: in-flight proof limit
        - MBU_PROVER_ADDRESS: prover listener host:port
        - MBU_METRICS_ADDRESS: metrics listener host:port
        - MBU_SHUTDOWN_TIMEOUT_S: drain window per listener
        - MBU_LOG_LEVEL: logging level name
        """
        overrides: dict[str, Any] = {}

        def _int(var: str) -> int:
            raw = os.environ[var]
            try:
                return int(raw)
            except ValueError:
                raise ConfigError(f"{var} must be an integer, got {raw!r}", key=var) from None

        # Prover settings
        if os.getenv("MBU_TREE_DEPTH"):
            overrides.setdefault("prover", {})["tree_depth"] = _int("MBU_TREE_DEPTH")
        if os.getenv("MBU_BATCH_SIZE"):
            overrides.setdefault("prover", {})["batch_size"] = _int("MBU_BATCH_SIZE")
        if os.getenv("MBU_BACKEND"):
            overrides.setdefault("prover", {})["backend"] = os.getenv("MBU_BACKEND")
        if os.getenv("MBU_MAX_CONCURRENT_PROOFS"):
            overrides.setdefault("prover", {})["max_concurrent_proofs"] = _int(
                "MBU_MAX_CONCURRENT_PROOFS"
            )

        # Server settings
        if os.getenv("MBU_PROVER_ADDRESS"):
            overrides.setdefault("server", {})["prover_address"] = os.getenv("MBU_PROVER_ADDRESS")
        if os.getenv("MBU_METRICS_ADDRESS"):
            overrides.setdefault("server", {})["metrics_address"] = os.getenv("MBU_METRICS_ADDRESS")
        if os.getenv("MBU_SHUTDOWN_TIMEOUT_S"):
            raw = os.environ["MBU_SHUTDOWN_TIMEOUT_S"]
            try:
                overrides.setdefault("server", {})["shutdown_timeout_s"] = float(raw)
            except ValueError:
                raise ConfigError(
                    f"MBU_SHUTDOWN_TIMEOUT_S must be a number, got {raw!r}",
                    key="MBU_SHUTDOWN_TIMEOUT_S",
                ) from None
        if os.getenv("MBU_LOG_LEVEL"):
            overrides.setdefault("server", {})["log_level"] = os.getenv("MBU_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_json_file(cls, path: str | Path) -> "ServiceConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceConfig":
        """Load configuration from a dictionary (supports partial data)."""
        prover_data = data.get("prover", {})
        server_data = data.get("server", {})
        try:
            prover = ProverConfig(**prover_data) if prover_data else ProverConfig()
            server = ServerConfig(**server_data) if server_data else ServerConfig()
        except TypeError as e:
            raise ConfigError(f"Unknown configuration key: {e}") from e
        return cls(prover=prover, server=server)

    @classmethod
    def load(cls, path: Optional[str | Path] = None) -> "ServiceConfig":
        """
        Load from ``path`` (or ``$MBU_CONFIG``) if given, then overlay
        environment variables.
        """
        path = path or os.getenv("MBU_CONFIG")
        config = cls.from_json_file(path) if path else cls()
        return config.with_env_overrides()

    def with_env_overrides(self) -> "ServiceConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        data = self.to_dict()
        for section, values in overrides.items():
            data[section].update(values)
        return self.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "prover": {
                "tree_depth": self.prover.tree_depth,
                "batch_size": self.prover.batch_size,
                "backend": self.prover.backend,
                "max_concurrent_proofs": self.prover.max_concurrent_proofs,
            },
            "server": {
                "prover_address": self.server.prover_address,
                "metrics_address": self.server.metrics_address,
                "shutdown_timeout_s": self.server.shutdown_timeout_s,
                "log_level": self.server.log_level,
            },
        }
