"""
Module 09 - ProverService Tests

Admission control and outcome accounting around ProvingSystem.prove.
"""

import threading
import time

import pytest
from prometheus_client import REGISTRY

from api.deps import ProverService
from core.schemas.errors import ShapeException
from fixtures.common import FakeBackend, make_batch_params
from prover.proving_system import ProvingSystem


class SlowBackend(FakeBackend):
    """Records the peak number of concurrent prove calls."""

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def prove(self, relation, proving_key, witness):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.05)
        with self._lock:
            self.active -= 1
        return super().prove(relation, proving_key, witness)


def _prove_concurrently(service, count):
    params = make_batch_params()
    threads = [threading.Thread(target=service.prove, args=(params,)) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(5.0)


def _count(outcome):
    return REGISTRY.get_sample_value("mbu_proofs_total", {"outcome": outcome}) or 0.0


class TestAdmission:

    def test_single_slot_serializes_proofs(self):
        backend = SlowBackend()
        service = ProverService(ProvingSystem.setup(4, 2, backend=backend), max_concurrent_proofs=1)

        _prove_concurrently(service, 4)

        assert backend.peak == 1
        assert len(backend.witnesses) == 4

    def test_slots_bound_concurrency(self):
        backend = SlowBackend()
        service = ProverService(ProvingSystem.setup(4, 2, backend=backend), max_concurrent_proofs=2)

        _prove_concurrently(service, 6)

        assert 1 <= backend.peak <= 2
        assert len(backend.witnesses) == 6

    def test_non_positive_limit_rejected(self, fake_system):
        with pytest.raises(ValueError):
            ProverService(fake_system, max_concurrent_proofs=0)


class TestOutcomes:

    def test_success_counted(self, fake_system):
        service = ProverService(fake_system)
        before = _count("success")

        service.prove(make_batch_params())

        assert _count("success") == before + 1

    def test_rejection_counted_and_reraised(self, fake_system):
        service = ProverService(fake_system)
        before = _count("rejected")

        with pytest.raises(ShapeException):
            service.prove(make_batch_params(batch_size=3))

        assert _count("rejected") == before + 1

    def test_slot_released_after_failure(self, fake_system):
        service = ProverService(fake_system)

        with pytest.raises(ShapeException):
            service.prove(make_batch_params(batch_size=3))

        assert service.prove(make_batch_params()).scheme == "fake"
