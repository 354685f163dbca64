"""Shared test fixtures."""
import pytest
from fastapi.testclient import TestClient

from voyagerisk.main import app


class FixedRandom:
    """Deterministic stand-in for random.random() in the simulated estimator."""

    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def zero_rng():
    return FixedRandom(0.0)


@pytest.fixture
def api_client():
    """TestClient over the full app (lifespan included)."""
    with TestClient(app) as client:
        yield client
