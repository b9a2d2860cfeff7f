"""Application wiring.

Run with ``python -m httpserver`` or ``uvicorn httpserver.main:app``.
"""

from __future__ import annotations

from fastapi import FastAPI

from httpserver.api.headers import echo_headers
from httpserver.api.health import healthz
from httpserver.config import Settings, get_settings
from httpserver.observability.logging import configure_logging
from httpserver.observability.metrics import HttpMetrics, get_metrics
from httpserver.server import Server


def create_server(settings: Settings | None = None, metrics: HttpMetrics | None = None) -> Server:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level.upper(), log_format=settings.log_format)

    server = Server(settings=settings, metrics=metrics or get_metrics())
    server.route("/healthz", healthz)
    server.route("/headers", echo_headers)
    return server


def create_app(settings: Settings | None = None, metrics: HttpMetrics | None = None) -> FastAPI:
    return create_server(settings, metrics).app


app = create_app()
