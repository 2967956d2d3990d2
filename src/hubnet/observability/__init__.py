"""
Observability - Warning events, logging and metrics for hubnet.

Provides:
- Warning events delivered through a host-owned channel
- Structured logging with trace ID
- Per-motherboard routing metrics (counters, gauges, histograms)
"""

from hubnet.observability.logging import (
    set_trace_id,
    get_trace_id,
    configure_logging,
    get_logger,
    TraceContext,
    trace_scope,
    TraceFilter,
    JSONFormatter,
    ReadableFormatter,
)
from hubnet.observability.metrics import (
    Counter,
    Gauge,
    Histogram,
    MetricsRegistry,
)
from hubnet.observability.events import (
    WarningEvent,
    WarningChannel,
    WarningListener,
)

__all__ = [
    # Logging
    "set_trace_id",
    "get_trace_id",
    "configure_logging",
    "get_logger",
    "TraceContext",
    "trace_scope",
    "TraceFilter",
    "JSONFormatter",
    "ReadableFormatter",
    # Metrics
    "Counter",
    "Gauge",
    "Histogram",
    "MetricsRegistry",
    # Events
    "WarningEvent",
    "WarningChannel",
    "WarningListener",
]
