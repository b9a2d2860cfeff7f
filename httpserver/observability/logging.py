from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


_CONFIGURED = False


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:f}"
    return str(value)


class PipeRenderer:
    """Render an event dict as ``<event>||key=value||key=value``.

    Keys listed in ``prefix_keys`` (timestamp, level) are written in front of the
    line separated by spaces; tracebacks go on the following lines.
    """

    def __init__(self, prefix_keys: tuple[str, ...] = ("timestamp", "level")) -> None:
        self._prefix_keys = prefix_keys

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
        prefix = [
            str(event_dict.pop(key)).upper() if key == "level" else str(event_dict.pop(key))
            for key in self._prefix_keys
            if key in event_dict
        ]
        event = event_dict.pop("event", "")
        trailer = [event_dict.pop(key) for key in ("stack", "exception") if key in event_dict]

        line = "||".join([str(event), *(f"{key}={_format_value(value)}" for key, value in event_dict.items())])
        if prefix:
            line = " ".join([*prefix, line])
        for block in trailer:
            line = f"{line}\n{block}"
        return line


def configure_logging(level: int | str = logging.INFO, log_format: str = "pipe") -> None:
    """Configure structlog + stdlib logging for pipe-delimited or JSON output.

    Safe to call multiple times (no-op after first call).
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Any = structlog.processors.JSONRenderer() if log_format == "json" else PipeRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # Keep uvicorn's own loggers consistent with our handler.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(level)

    _CONFIGURED = True
