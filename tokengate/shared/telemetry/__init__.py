"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from tokengate.shared.telemetry.logging import setup_logging
from tokengate.shared.telemetry.telemetry import TelemetryConfig, build_exporter
from tokengate.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "build_exporter",
    "traced",
    "add_span_attributes",
    "add_span_event",
]
