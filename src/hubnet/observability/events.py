"""
Warning Events - Structured records emitted at routing decision points.

Every soft failure (False result) is reported as a WarningEvent through a
WarningChannel. The host owns the channel: it subscribes listeners, reads
the bounded history, or routes the stdlib log records the channel writes.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from hubnet.observability.logging import get_logger, get_trace_id
from hubnet.vocabulary import FailureReason, WarningSource


@dataclass(frozen=True)
class WarningEvent:
    """
    A single warning emitted by a board component.

    ``message`` holds the stable phrase hosts match on.
    """
    reason: FailureReason
    message: str
    source: WarningSource
    device_id: int | None = None
    port: int | None = None
    trace_id: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason": self.reason.value,
            "message": self.message,
            "source": self.source.value,
            "device_id": self.device_id,
            "port": self.port,
            "trace_id": self.trace_id,
            "timestamp": self.timestamp.isoformat(),
        }


WarningListener = Callable[[WarningEvent], None]


class WarningChannel:
    """
    Sink for warning events.

    Emitting logs the message at WARNING level on ``hubnet.<source>`` and
    then calls every subscribed listener in subscription order. Listener
    exceptions propagate to the operation that emitted the event.
    """

    def __init__(self, history_limit: int = 100):
        if history_limit <= 0:
            raise ValueError("history_limit must be positive")
        self._listeners: list[WarningListener] = []
        self._history: deque[WarningEvent] = deque(maxlen=history_limit)

    def subscribe(self, listener: WarningListener) -> None:
        """Register a listener for future events."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: WarningListener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(
        self,
        reason: FailureReason,
        message: str,
        source: WarningSource,
        device_id: int | None = None,
        port: int | None = None,
    ) -> WarningEvent:
        """Record, log and publish a warning event."""
        event = WarningEvent(
            reason=reason,
            message=message,
            source=source,
            device_id=device_id,
            port=port,
            trace_id=get_trace_id(),
        )
        self._history.append(event)

        get_logger(source.value).warning(
            message, extra={"extra_data": event.to_dict()}
        )

        for listener in list(self._listeners):
            listener(event)

        return event

    @property
    def events(self) -> list[WarningEvent]:
        """Retained events, oldest first."""
        return list(self._history)

    def last(self) -> WarningEvent | None:
        """Most recent event, or None."""
        return self._history[-1] if self._history else None

    def messages(self, reason: FailureReason | None = None) -> list[str]:
        """Retained messages, optionally filtered by reason."""
        return [
            e.message for e in self._history
            if reason is None or e.reason == reason
        ]

    def clear(self) -> None:
        """Drop retained events (listeners stay subscribed)."""
        self._history.clear()
