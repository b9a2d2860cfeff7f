from __future__ import annotations

import argparse

from httpserver.config import get_settings
from httpserver.observability.logging import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="HTTP server with health, header echo and Prometheus metrics")
    parser.add_argument("--host", default=None, help="Listen address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Listen port (default: PORT or 8080)")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args()

    overrides = {
        key: value
        for key, value in {"host": args.host, "port": args.port, "log_level": args.log_level}.items()
        if value is not None
    }
    settings = get_settings().model_copy(update=overrides)
    configure_logging(level=settings.log_level.upper(), log_format=settings.log_format)

    # Importing the app module builds `app`, which would configure logging with defaults.
    from httpserver.main import create_server

    create_server(settings).run()


if __name__ == "__main__":
    main()
