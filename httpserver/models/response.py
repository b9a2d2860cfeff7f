from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from starlette.requests import Request


Headers = dict[str, list[str]]


@dataclass
class HandlerResponse:
    """What a business handler returns; status 0 means "use 200"."""

    status: int = 0
    headers: Headers = field(default_factory=dict)
    body: str = ""

    def add_header(self, name: str, value: str) -> None:
        self.headers.setdefault(name, []).append(value)

    def set_header(self, name: str, value: str) -> None:
        """Replace every value of ``name`` (matched case-insensitively)."""
        for existing in [key for key in self.headers if key.lower() == name.lower()]:
            del self.headers[existing]
        self.headers[name] = [value]


Handler = Callable[[Request], HandlerResponse]

# Go-style muxes dispatch on path only; every method reaches the handler.
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
