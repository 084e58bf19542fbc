"""Shared telemetry: logging setup, request-scoped log context, and OpenTelemetry config."""

from taskflow.shared.telemetry.logging import (
    RequestIdFilter,
    get_logger,
    request_id_var,
    setup_logging,
)
from taskflow.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    get_tracer,
    set_telemetry,
)

__all__ = [
    "RequestIdFilter",
    "get_logger",
    "request_id_var",
    "setup_logging",
    "TelemetryConfig",
    "get_telemetry",
    "get_tracer",
    "set_telemetry",
]
