"""Shared fixtures for the APG test suite."""

import httpx
import pytest
from unittest.mock import patch


PROPOSAL_HTML = "<h3>Executive Summary</h3>..."


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "model": "test-model",
        "endpoint": "https://api.example.com/v1beta/models/{model}:generateContent",
        "request_timeout_s": 5,
        "max_attempts": 5,
        "base_delay_ms": 1000,
        "error_message": "The architect is overwhelmed, try again.",
    }
    with patch("apg.config._config", test_config):
        yield test_config


@pytest.fixture
def envelope():
    """A well-formed generateContent response."""
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": PROPOSAL_HTML}]}}
        ]
    }


@pytest.fixture
def sleeps():
    """Records backoff delays instead of waiting for them."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)

    return _sleep


class ScriptedTransport:
    """httpx transport handler replaying a script of responses/exceptions, one per request."""

    def __init__(self, script):
        self.script = list(script)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


@pytest.fixture
def scripted():
    """Factory: scripted(steps) -> (ScriptedTransport, httpx.AsyncClient)."""
    def _make(steps):
        transport = ScriptedTransport(steps)
        return transport, httpx.AsyncClient(transport=httpx.MockTransport(transport))

    return _make
