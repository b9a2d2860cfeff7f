from __future__ import annotations

from starlette.requests import Request

from httpserver.models.response import HandlerResponse


def healthz(request: Request) -> HandlerResponse:
    _ = request
    return HandlerResponse(body="ok")
