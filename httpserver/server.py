from __future__ import annotations

from dataclasses import dataclass

import structlog
import uvicorn
from fastapi import FastAPI

from httpserver.api.metrics import router as metrics_router
from httpserver.config import Settings
from httpserver.models.response import ROUTE_METHODS, Handler
from httpserver.observability.metrics import HttpMetrics
from httpserver.observability.middleware import instrument_handler


@dataclass(frozen=True)
class RouteEntry:
    path: str
    handler: Handler


class Server:
    """Exact-path route table on a FastAPI app; every route is instrumented."""

    def __init__(self, settings: Settings, metrics: HttpMetrics) -> None:
        self.settings = settings
        self.metrics = metrics
        self.routes: list[RouteEntry] = []
        self.app = FastAPI(
            title="httpserver",
            version=settings.version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
            redirect_slashes=False,
        )
        self.app.state.metrics = metrics
        self.app.state.settings = settings
        self.app.include_router(metrics_router)

    def route(self, path: str, handler: Handler) -> None:
        entry = RouteEntry(path=path, handler=handler)
        endpoint = instrument_handler(handler, metrics=self.metrics, settings=self.settings, route=path)
        self.app.add_route(path, endpoint, methods=ROUTE_METHODS, include_in_schema=False)
        self.routes.append(entry)

    def run(self) -> None:
        """Serve until the loop exits; failing to bind or serve is fatal."""
        log = structlog.get_logger("httpserver")
        log.info("http_server_start", host=self.settings.host, port=self.settings.port)
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_config=None,
        )
        try:
            uvicorn.Server(config).run()
        except SystemExit as exc:
            # uvicorn logs bind errors itself and exits with its own status code.
            if not exc.code:
                raise
            log.critical("http_server_failed", exit_code=exc.code)
            raise SystemExit(1) from exc
        except OSError as exc:
            log.critical("http_server_failed", error=str(exc))
            raise SystemExit(1) from exc
