from httpserver.observability.logging import PipeRenderer


def test_pipe_renderer_formats_request_in() -> None:
    line = PipeRenderer(prefix_keys=())(None, "info", {"event": "request_in", "client_ip": "203.0.113.5", "uri": "/healthz"})
    assert line == "request_in||client_ip=203.0.113.5||uri=/healthz"


def test_pipe_renderer_formats_request_out_with_six_decimals() -> None:
    event = {
        "event": "request_out",
        "client_ip": "203.0.113.5",
        "uri": "/headers?a=b",
        "code": 200,
        "proc_time": 0.25,
    }
    line = PipeRenderer(prefix_keys=())(None, "info", event)
    assert line == "request_out||client_ip=203.0.113.5||uri=/headers?a=b||code=200||proc_time=0.250000"


def test_pipe_renderer_prefixes_timestamp_and_level() -> None:
    event = {"event": "request_in", "level": "info", "timestamp": "2024-01-01T00:00:00Z", "uri": "/healthz"}
    line = PipeRenderer()(None, "info", event)
    assert line == "2024-01-01T00:00:00Z INFO request_in||uri=/healthz"


def test_pipe_renderer_appends_exception_block() -> None:
    event = {"event": "handler_failed", "uri": "/broken", "exception": "Traceback ...\nRuntimeError: boom"}
    line = PipeRenderer(prefix_keys=())(None, "error", event)
    assert line == "handler_failed||uri=/broken\nTraceback ...\nRuntimeError: boom"
