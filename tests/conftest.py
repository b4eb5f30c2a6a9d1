"""Shared fixtures: a clean configuration and fake HTTP transports for the tools."""

from typing import Callable

import httpx
import pytest

from gpt_agent.utils import config as config_module


@pytest.fixture(autouse=True)
def tool_env(monkeypatch):
    """Give every test the same tool settings and a fresh config cache."""
    monkeypatch.setenv("GEOCODE_API_KEY", "test-key")
    monkeypatch.setenv("SEARXNG_URL", "http://searx.test")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "5")
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def fake_http(monkeypatch):
    """
    Route a tool module's HTTP calls to an in-memory handler.

    Usage:
        requests = fake_http(weather, handler)
    """

    def install(module, handler: Callable[[httpx.Request], httpx.Response]) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        def client() -> httpx.AsyncClient:
            return httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))

        monkeypatch.setattr(module, "http_client", client)
        return seen

    return install
