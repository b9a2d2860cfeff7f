from __future__ import annotations

from fastapi import APIRouter, Request, Response

from httpserver.models.response import ROUTE_METHODS


router = APIRouter(tags=["metrics"])


@router.api_route("/metrics", methods=ROUTE_METHODS)
def metrics(request: Request) -> Response:
    registry = request.app.state.metrics
    return Response(content=registry.render(), media_type=registry.content_type)
