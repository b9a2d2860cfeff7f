"""Observability helpers: structlog logging, Prometheus metrics and the route wrapper.

Every business route goes through ``instrument_handler`` which resolves the client
IP, emits the request_in/request_out access lines and records the HTTP metrics.
"""
