"""
Module 07 - Proving Backend Boundary

The proving scheme is an external capability. The orchestrator only
relies on four operations plus verifier export:

    compile(configuration)               -> Relation
    setup(relation)                      -> (proving_key, verifying_key)
    prove(relation, proving_key, witness) -> Proof
    verify(verifying_key, public_inputs, proof) -> bool
    export_verifier(verifying_key, writer)

Backends are looked up by name through ``get_backend`` so the service
can be pointed at a different scheme through configuration.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, TextIO

from core.schemas.errors import SerializationException
from core.schemas.params import ProofParameters, ProvingConfiguration


@dataclass(frozen=True)
class Relation:
    """A compiled relation for one (tree depth, batch size) shape."""
    configuration: ProvingConfiguration
    scheme: str
    compiled: Any = None


@dataclass(frozen=True)
class ProvingArtifacts:
    """Output of setup. Immutable and shared by all prove/verify calls."""
    relation: Relation
    proving_key: Any
    verifying_key: Any


@dataclass(frozen=True)
class Witness:
    """
    Assignment for the batch insertion relation.

    ``input_hash`` is the only public variable. A public-only witness
    leaves every private variable at its default.
    """
    input_hash: int
    start_index: int = 0
    pre_root: int = 0
    post_root: int = 0
    id_comms: tuple[int, ...] = ()
    merkle_proofs: tuple[tuple[int, ...], ...] = ()
    public_only: bool = False

    @classmethod
    def from_params(cls, params: ProofParameters, input_hash: int) -> "Witness":
        return cls(
            input_hash=input_hash,
            start_index=params.start_index,
            pre_root=params.pre_root,
            post_root=params.post_root,
            id_comms=tuple(params.id_comms),
            merkle_proofs=tuple(tuple(p) for p in params.merkle_proofs),
        )

    @classmethod
    def public(cls, input_hash: int) -> "Witness":
        return cls(input_hash=input_hash, public_only=True)

    def public_inputs(self) -> list[int]:
        return [self.input_hash]


@dataclass(frozen=True)
class Proof:
    """
    Opaque proof. ``payload`` is whatever the backend needs to verify it
    and must be JSON-serializable.
    """
    scheme: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"scheme": self.scheme, **self.payload}

    def to_json(self) -> str:
        """
        Raises:
            SerializationException: if the payload is not JSON-serializable
        """
        try:
            return json.dumps(self.to_dict())
        except (TypeError, ValueError) as e:
            raise SerializationException(f"failed to serialize proof: {e}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Proof":
        payload = dict(data)
        scheme = payload.pop("scheme", None)
        if not isinstance(scheme, str):
            raise ValueError("proof is missing its scheme")
        return cls(scheme=scheme, payload=payload)


class ProvingBackend(ABC):
    """Abstract proving scheme."""

    name: str

    @abstractmethod
    def compile(self, configuration: ProvingConfiguration) -> Relation:
        """Fix the relation's shape for ``configuration``."""

    @abstractmethod
    def setup(self, relation: Relation) -> tuple[Any, Any]:
        """One-time key generation. Returns (proving_key, verifying_key)."""

    @abstractmethod
    def prove(self, relation: Relation, proving_key: Any, witness: Witness) -> Proof:
        """Produce a proof that ``witness`` satisfies ``relation``."""

    @abstractmethod
    def verify(self, verifying_key: Any, public_inputs: list[int], proof: Proof) -> bool:
        """True if ``proof`` is valid for ``public_inputs``."""

    def export_verifier(self, verifying_key: Any, writer: TextIO) -> None:
        """Write on-chain verifier source for ``verifying_key``."""
        raise NotImplementedError(f"{self.name} backend cannot export a verifier")


_BACKENDS: dict[str, Callable[[], ProvingBackend]] = {}


def register_backend(name: str, factory: Callable[[], ProvingBackend]) -> None:
    _BACKENDS[name] = factory


def get_backend(name: str) -> ProvingBackend:
    """
    Instantiate a registered backend.

    Raises:
        KeyError: if no backend is registered under ``name``
    """
    if name not in _BACKENDS:
        # Built-in backends register on import
        import prover.reference_backend  # noqa: F401
    try:
        factory = _BACKENDS[name]
    except KeyError:
        raise KeyError(
            f"Unknown proving backend {name!r}; available: {sorted(_BACKENDS)}"
        ) from None
    return factory()


def available_backends() -> list[str]:
    import prover.reference_backend  # noqa: F401
    return sorted(_BACKENDS)


__all__ = [
    "Proof",
    "ProvingArtifacts",
    "ProvingBackend",
    "Relation",
    "Witness",
    "available_backends",
    "get_backend",
    "register_backend",
]
