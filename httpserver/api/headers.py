from __future__ import annotations

from starlette.requests import Request

from httpserver.models.response import HandlerResponse


def echo_headers(request: Request) -> HandlerResponse:
    """Echo the request headers back, plus the running ``version``."""
    response = HandlerResponse()
    for name, value in request.headers.items():
        # Host describes this request's target, not something to echo.
        if name == "host":
            continue
        response.add_header(name, value)
    response.set_header("version", request.app.state.settings.version)
    return response
