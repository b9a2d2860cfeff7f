from __future__ import annotations

import random
import time
from http import HTTPStatus
from time import perf_counter
from typing import Callable

import structlog
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import Response

from httpserver.config import Settings
from httpserver.models.response import Handler, HandlerResponse
from httpserver.observability.client_ip import resolve_client_ip
from httpserver.observability.metrics import HttpMetrics


# Framing headers are computed by the transport for the body we actually send.
_TRANSPORT_HEADERS = {"content-length", "transfer-encoding", "connection"}
_DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


def request_uri(request: Request) -> str:
    """The request target as sent by the client: raw path plus query string."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = request.scope.get("path", "")
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


def peer_address(request: Request) -> str | None:
    if request.client is None:
        return None
    host, port = request.client.host, request.client.port
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _simulate_latency(settings: Settings) -> None:
    if settings.simulate_latency and settings.simulate_latency_max_seconds > 0:
        time.sleep(random.randrange(settings.simulate_latency_max_seconds))


def _call_handler(handler: Handler, request: Request, uri: str, recover: bool) -> HandlerResponse:
    if not recover:
        return handler(request)
    try:
        return handler(request)
    except Exception:
        structlog.get_logger("httpserver").exception("handler_failed", uri=uri)
        return HandlerResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR.value, body=HTTPStatus.INTERNAL_SERVER_ERROR.phrase)


def _to_transport(result: HandlerResponse, status: int) -> Response:
    response = Response(content=result.body, status_code=status)
    for name, values in result.headers.items():
        if name.lower() in _TRANSPORT_HEADERS:
            continue
        for value in values:
            response.headers.append(name, value)
    if "content-type" not in response.headers:
        response.headers["content-type"] = _DEFAULT_CONTENT_TYPE
    return response


def _record_request(
    metrics: HttpMetrics,
    *,
    method: str,
    path_label: str,
    client_ip: str,
    uri: str,
    status: int,
    duration: float,
) -> None:
    structlog.get_logger("access").info("request_out", client_ip=client_ip, uri=uri, code=status, proc_time=duration)
    metrics.observe_request(method, path_label, status, duration)


def instrument_handler(
    handler: Handler,
    *,
    metrics: HttpMetrics,
    settings: Settings,
    route: str,
) -> Callable[[Request], Response]:
    """Wrap a business handler with access logs, timing and HTTP metrics.

    The returned endpoint is synchronous, so Starlette runs it in its worker
    thread pool and the optional latency simulation only blocks this request.
    """

    def endpoint(request: Request) -> Response:
        start = perf_counter()
        _simulate_latency(settings)

        client_ip = resolve_client_ip(request.headers, peer_address(request))
        uri = request_uri(request)
        access = structlog.get_logger("access")
        access.info("request_in", client_ip=client_ip, uri=uri)

        result = _call_handler(handler, request, uri, settings.recover_handler_errors)
        status = result.status or HTTPStatus.OK.value
        duration = perf_counter() - start

        response = _to_transport(result, status)

        # Raw URIs make the path label unbounded; "route" mode uses the registered pattern.
        path_label = route if settings.metrics_path_label == "route" else uri
        # Starlette runs the background task once the response has been sent.
        response.background = BackgroundTask(
            _record_request,
            metrics,
            method=request.method,
            path_label=path_label,
            client_ip=client_ip,
            uri=uri,
            status=status,
            duration=duration,
        )
        return response

    endpoint.__name__ = getattr(handler, "__name__", "endpoint")
    return endpoint
