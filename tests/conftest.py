"""
Pytest configuration and shared fixtures for the prover tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures.common import FakeBackend, make_batch_params  # noqa: E402
from prover.proving_system import ProvingSystem  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def batch_params():
    """Valid parameters for depth 4, batch size 2, inserting at 0."""
    return make_batch_params(tree_depth=4, batch_size=2)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def fake_system(fake_backend):
    """ProvingSystem (depth 4, batch 2) on the fake backend."""
    return ProvingSystem.setup(4, 2, backend=fake_backend)


@pytest.fixture(scope="session")
def reference_system():
    """ProvingSystem (depth 4, batch 2) on the reference backend."""
    return ProvingSystem.setup(4, 2, backend="reference")


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
