"""
Metrics - Routing counters owned by a motherboard.

Each motherboard carries its own MetricsRegistry; there is no
process-wide registry.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Any


class _Metric:
    """Named value guarded by a lock."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._lock = Lock()


class Counter(_Metric):
    """Monotonically increasing count."""

    def __init__(self, name: str, description: str = ""):
        super().__init__(name, description)
        self._value = 0

    def inc(self, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError("counter increments must be non-negative")
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0


class Gauge(_Metric):
    """Point-in-time value, overwritten on every update."""

    def __init__(self, name: str, description: str = ""):
        super().__init__(name, description)
        self._value = 0

    def set(self, value: int) -> None:
        with self._lock:
            self._value = value

    @property
    def value(self) -> int:
        return self._value

    def reset(self) -> None:
        self.set(0)


class Histogram(_Metric):
    """
    Running count, sum, min and max of observed values.
    """

    def __init__(self, name: str, description: str = ""):
        super().__init__(name, description)
        self.reset()

    def observe(self, value: float) -> None:
        with self._lock:
            self._count += 1
            self._sum += value
            self._min = value if self._min is None else min(self._min, value)
            self._max = value if self._max is None else max(self._max, value)

    @property
    def count(self) -> int:
        return self._count

    @property
    def avg(self) -> float:
        return self._sum / self._count if self._count else 0.0

    @property
    def min(self) -> float:
        return self._min if self._min is not None else 0.0

    @property
    def max(self) -> float:
        return self._max if self._max is not None else 0.0

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._sum = 0.0
            self._min: float | None = None
            self._max: float | None = None

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self._count,
            "sum": self._sum,
            "avg": self.avg,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class MetricsRegistry:
    """
    Routing metrics for one motherboard.
    """
    # Unicast
    messages_sent: Counter = field(
        default_factory=lambda: Counter("messages_sent", "Unicast messages routed")
    )
    messages_delivered: Counter = field(
        default_factory=lambda: Counter("messages_delivered", "Unicast messages handed to an application")
    )
    messages_failed: Counter = field(
        default_factory=lambda: Counter("messages_failed", "Unicast messages that were not delivered")
    )

    # Broadcast
    broadcasts_sent: Counter = field(
        default_factory=lambda: Counter("broadcasts_sent", "Broadcasts fanned out")
    )
    broadcast_deliveries: Counter = field(
        default_factory=lambda: Counter("broadcast_deliveries", "Broadcast handler invocations")
    )

    # Membership
    registered_devices: Gauge = field(
        default_factory=lambda: Gauge("registered_devices", "Devices in the device table")
    )

    # Payloads
    payload_bits: Histogram = field(
        default_factory=lambda: Histogram("payload_bits", "Payload length of routed traffic")
    )

    def to_dict(self) -> dict[str, Any]:
        """Export all metrics as dict."""
        return {
            "unicast": {
                "sent": self.messages_sent.value,
                "delivered": self.messages_delivered.value,
                "failed": self.messages_failed.value,
            },
            "broadcast": {
                "sent": self.broadcasts_sent.value,
                "deliveries": self.broadcast_deliveries.value,
            },
            "devices": self.registered_devices.value,
            "payload_bits": self.payload_bits.to_dict(),
        }

    def reset(self) -> None:
        """Zero every metric except the device gauge, which tracks live state."""
        self.messages_sent.reset()
        self.messages_delivered.reset()
        self.messages_failed.reset()
        self.broadcasts_sent.reset()
        self.broadcast_deliveries.reset()
        self.payload_bits.reset()
