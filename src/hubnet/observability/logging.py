"""
Logging - Structured logging with trace ID propagation.

All hubnet loggers live under the "hubnet" namespace, which carries a
NullHandler so nothing is printed until the host configures logging.
Every send or broadcast runs inside a trace scope: the warnings and
traffic records produced by one routing chain share a trace ID.
"""

import logging
import json
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4


logging.getLogger("hubnet").addHandler(logging.NullHandler())

# Trace ID of the send/broadcast chain currently being routed
_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)


def set_trace_id(tid: UUID | str | None) -> None:
    """Set trace ID for current context."""
    _trace_id.set(str(tid) if tid else None)


def get_trace_id() -> str | None:
    """Get trace ID from current context."""
    return _trace_id.get()


class TraceFilter(logging.Filter):
    """Adds trace_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON for structured logging.

    Warning events attach their fields as ``extra_data``; those keys are
    merged into the top-level object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "trace_id": getattr(record, "trace_id", None),
        }

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ReadableFormatter(logging.Formatter):
    """
    Human-readable formatter for development.
    """

    def format(self, record: logging.LogRecord) -> str:
        tid = getattr(record, "trace_id", "-")
        tid_short = tid[:8] if tid and tid != "-" else "-"

        base = f"{record.levelname:<7} [{tid_short}] {record.name}: {record.getMessage()}"

        extra = getattr(record, "extra_data", None)
        if extra and extra.get("reason"):
            base += f" ({extra['reason']})"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def configure_logging(
    level: int | str = logging.WARNING,
    json_format: bool = False,
    stream: Any = None,
) -> None:
    """
    Configure hubnet logging.

    Args:
        level: Logging level
        json_format: Use JSON format (for machine consumption)
        stream: Output stream (default: stderr)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(TraceFilter())

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ReadableFormatter())

    hubnet_logger = logging.getLogger("hubnet")
    hubnet_logger.setLevel(level)
    hubnet_logger.handlers.clear()  # Drops the NullHandler too
    hubnet_logger.addHandler(handler)
    hubnet_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a hubnet component."""
    return logging.getLogger(f"hubnet.{name}")


class TraceContext:
    """
    Context manager binding a trace ID to the routing done inside it.

    Usage:
        with TraceContext(trace_id):
            app.send_message(message)  # warnings carry trace_id
    """

    def __init__(self, trace_id: UUID | str | None):
        self.trace_id = trace_id
        self._token = None

    def __enter__(self):
        self._token = _trace_id.set(
            str(self.trace_id) if self.trace_id else None
        )
        return self

    def __exit__(self, *args):
        if self._token is not None:
            _trace_id.reset(self._token)


def trace_scope() -> TraceContext:
    """
    Join the current trace, or start a new one for a fresh send chain.
    """
    return TraceContext(get_trace_id() or uuid4())
