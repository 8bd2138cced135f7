"""
Shared test doubles: a controllable clock, scripted provider clients and a
seeded in-memory canvas.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest

from config import ProviderDescriptor
from orchestration.provider_state import ProviderStateRegistry
from orchestration.rate_limiter import RateLimiter
from orchestration.circuit_breaker import CircuitBreaker
from services.canvas_store import InMemoryCanvasStore
from services.providers.base import ProviderClient, ProviderResponse


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProviderClient(ProviderClient):
    """
    Scripted provider. Each call pops the next item from `script`:
    a list of raw tool calls, a ProviderResponse, or an exception to raise.
    When the script runs out the last item repeats.
    """

    def __init__(self, name: str, script=None, credential: str = "test-key"):
        super().__init__(ProviderDescriptor(name=name, base_url="http://fake", model=f"{name}-model",
                                            credential=credential), max_tokens=256)
        self.script = list(script or [[]])
        self.calls = []

    def _call(self, command, tool_definitions, timeout):
        self.calls.append(command)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, ProviderResponse):
            return item
        return ProviderResponse(provider=self.name, model=self.model, tool_calls=item)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def state(clock):
    return ProviderStateRegistry(clock=clock, rate_limit=60, window_size=60)


@pytest.fixture
def rate_limiter(state):
    return RateLimiter(state)


@pytest.fixture
def breaker(state):
    return CircuitBreaker(state, threshold=5, cooldown_seconds=60, enabled=True)


@pytest.fixture
def store():
    return InMemoryCanvasStore()


@pytest.fixture
def canvas(store):
    return store.create_canvas("Test canvas", canvas_id="canvas-1")
