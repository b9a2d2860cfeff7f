import socket

import pytest
import uvicorn
from prometheus_client import CollectorRegistry
from structlog.testing import capture_logs

from httpserver.config import Settings
from httpserver.observability.metrics import HttpMetrics
from httpserver.server import Server


def _server(port: int = 8080) -> Server:
    return Server(settings=Settings(HOST="127.0.0.1", PORT=port), metrics=HttpMetrics(CollectorRegistry()))


def _failures(logs: list[dict]) -> list[dict]:
    return [entry for entry in logs if entry["event"] == "http_server_failed"]


def test_startup_exit_from_uvicorn_becomes_status_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(self) -> None:
        raise SystemExit(3)

    monkeypatch.setattr(uvicorn.Server, "run", fail)

    with capture_logs() as logs:
        with pytest.raises(SystemExit) as excinfo:
            _server().run()

    assert excinfo.value.code == 1
    (failure,) = _failures(logs)
    assert failure["log_level"] == "critical"
    assert failure["exit_code"] == 3


def test_os_error_while_serving_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(self) -> None:
        raise OSError("address already in use")

    monkeypatch.setattr(uvicorn.Server, "run", fail)

    with capture_logs() as logs:
        with pytest.raises(SystemExit) as excinfo:
            _server().run()

    assert excinfo.value.code == 1
    (failure,) = _failures(logs)
    assert failure["log_level"] == "critical"
    assert failure["error"] == "address already in use"


def test_clean_exit_is_not_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    def stop(self) -> None:
        raise SystemExit(0)

    monkeypatch.setattr(uvicorn.Server, "run", stop)

    with capture_logs() as logs:
        with pytest.raises(SystemExit) as excinfo:
            _server().run()

    assert excinfo.value.code == 0
    assert _failures(logs) == []


def test_port_already_bound_exits_with_status_one() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
        taken.bind(("127.0.0.1", 0))
        taken.listen()
        port = taken.getsockname()[1]

        with capture_logs() as logs:
            with pytest.raises(SystemExit) as excinfo:
                _server(port).run()

    assert excinfo.value.code == 1
    assert len(_failures(logs)) == 1
