"""Shared fixtures: deterministic engine doubles and a wired test app."""

import threading
import time
from typing import List, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from semembed.common.metrics import MetricsCollector
from semembed.main import create_app
from semembed.runtime.inference_gate import InferenceGate
from semembed.runtime.state import ServiceState

TEST_MODEL = "BAAI/bge-small-en-v1.5"


def fake_vector(text: str) -> List[float]:
    """Deterministic 4-dimensional vector derived from the text."""
    return [
        float(len(text)),
        float(len(text.split())),
        float(sum(ord(ch) for ch in text) % 97),
        1.0,
    ]


class FakeEngine:
    """Deterministic engine; records every batch it was asked to embed."""

    def __init__(self):
        self.calls: List[List[str]] = []

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        return [fake_vector(text) for text in texts]


class FailingEngine:
    """Engine whose every call fails the way a tokenizer error would."""

    def __init__(self, message: str = "tokenizer rejected input"):
        self.message = message
        self.calls = 0

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        self.calls += 1
        raise RuntimeError(self.message)


class NonFiniteEngine:
    """Engine whose last vector carries a NaN or infinite component."""

    def __init__(self, bad_value: float = float("nan")):
        self.bad_value = bad_value

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        vectors = [fake_vector(text) for text in texts]
        vectors[-1][0] = self.bad_value
        return vectors


class RecordingEngine:
    """Slow engine recording call start/end times and overlap."""

    def __init__(self, delay: float = 0.05):
        self.delay = delay
        self.intervals: List[Tuple[float, float]] = []
        self.active = 0
        self.max_active = 0
        self._guard = threading.Lock()

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        start = time.perf_counter()
        time.sleep(self.delay)
        end = time.perf_counter()
        with self._guard:
            self.active -= 1
            self.intervals.append((start, end))
        return [fake_vector(text) for text in texts]


def make_state(engine, model_name: str = TEST_MODEL) -> ServiceState:
    return ServiceState(
        model_name=model_name,
        gate=InferenceGate(engine),
        metrics=MetricsCollector("semembed", registry=CollectorRegistry()),
    )


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def state(engine):
    return make_state(engine)


@pytest.fixture
def client(state):
    """Test client for an app serving the fake engine."""
    with TestClient(create_app(state)) as c:
        yield c


def sample(state: ServiceState, name: str) -> float:
    """Current value of an unlabeled sample, 0.0 if absent."""
    value = state.metrics.registry.get_sample_value(name)
    return value or 0.0
