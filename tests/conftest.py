from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from prometheus_client import CollectorRegistry

from httpserver.config import get_settings
from httpserver.main import create_app
from httpserver.observability.metrics import HttpMetrics


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "VERSION",
        "HOST",
        "PORT",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "SIMULATE_LATENCY",
        "SIMULATE_LATENCY_MAX_SECONDS",
        "METRICS_PATH_LABEL",
        "RECOVER_HANDLER_ERRORS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def metrics() -> HttpMetrics:
    return HttpMetrics(CollectorRegistry())


@pytest.fixture
async def api_client(metrics: HttpMetrics) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=create_app(metrics=metrics))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

