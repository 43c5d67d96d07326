"""Logging setup, OpenTelemetry tracing, and span helpers."""

from onetime_access.shared.telemetry.logging import setup_logging
from onetime_access.shared.telemetry.telemetry import (
    TelemetryConfig,
    build_span_exporter,
    get_telemetry,
    set_telemetry,
)
from onetime_access.shared.telemetry.tracing import add_span_event, traced

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "build_span_exporter",
    "get_telemetry",
    "set_telemetry",
    "traced",
    "add_span_event",
]
