"""
Global test configuration: markers, environment isolation, scripted endpoints
"""

from collections.abc import Iterable
import os

import pytest

from gemini_tutor.client.models import EndpointRequest


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Call sites end to end against scripted endpoints",
        "allow_env_pollution: Keep GEMINI_* variables from the outer environment",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_gemini_env(request, monkeypatch):
    """Ensure a clean GEMINI_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)


# --- Core Fixtures ---


class ScriptedEndpoint:
    """Endpoint that replays a fixed script of texts and exceptions.

    Each ``generate`` call consumes the next entry: exceptions are raised,
    anything else is returned as the response text.
    """

    def __init__(self, script: Iterable[object]):
        self.script = list(script)
        self.requests: list[EndpointRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def generate(self, request: EndpointRequest) -> str | None:
        self.requests.append(request)
        if not self.script:
            raise AssertionError("ScriptedEndpoint ran out of scripted responses")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records waits without waiting"""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def delays_ms(self) -> list[float]:
        return [round(s * 1000, 3) for s in self.calls]

    @property
    def total_ms(self) -> float:
        return sum(self.delays_ms)


@pytest.fixture
def scripted_endpoint():
    """Factory for ScriptedEndpoint instances."""
    return ScriptedEndpoint


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()

