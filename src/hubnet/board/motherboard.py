"""
Motherboard - Hub owning the device-ID namespace.

Routes unicast messages to the addressed device and fans broadcasts out
to every opted-in device. Devices are registered, not owned: adding a
device sets its back-reference, removing it clears the back-reference.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from hubnet.board.device import Device
from hubnet.errors import require_not_none
from hubnet.observability import (
    MetricsRegistry,
    WarningChannel,
    get_logger,
    get_trace_id,
    trace_scope,
)
from hubnet.schemas import Message, is_binary, PAYLOAD_FORMAT_WARNING
from hubnet.views import ReadOnlyMapping
from hubnet.vocabulary import DeliveryKind, FailureReason, WarningSource

logger = get_logger("motherboard")


@dataclass(frozen=True)
class TrafficRecord:
    """One unicast or broadcast routed by a motherboard."""
    kind: DeliveryKind
    payload: str
    delivered: bool
    recipient: int | None = None
    port: int | None = None
    reason: FailureReason | None = None
    fanout: tuple[int, ...] = ()  # Device IDs reached by a broadcast
    trace_id: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)


class Motherboard:
    """
    Central hub.

    Broadcast fan-out follows registration order; a device that changes
    identifier while attached moves to the end. Subclasses must not rely
    on the order.

    Membership is re-checked before each broadcast delivery: a device
    removed or re-keyed by an earlier handler is skipped, and a device
    added by a handler does not receive the broadcast in progress.
    """

    def __init__(
        self,
        warnings: WarningChannel | None = None,
        record_traffic: bool = False,
        traffic_limit: int = 1000,
        metrics: MetricsRegistry | None = None,
    ):
        if traffic_limit <= 0:
            raise ValueError("traffic_limit must be positive")
        self._devices: dict[int, Device] = {}
        self.warnings = warnings if warnings is not None else WarningChannel()
        self.metrics = metrics if metrics is not None else MetricsRegistry()
        self.record_traffic = record_traffic
        self._traffic: deque[TrafficRecord] = deque(maxlen=traffic_limit)

    def __repr__(self) -> str:
        return f"Motherboard(devices={sorted(self._devices)})"

    # =========================================================================
    # ROUTING
    # =========================================================================

    def send_message(self, message: Message) -> bool:
        """
        Route a unicast message to the device named by its recipient.

        Returns the target device's delivery result.
        """
        require_not_none(message, "message")
        with trace_scope():
            return self._route(message)

    def send_broadcast_message(self, payload: str) -> bool:
        """
        Hand a payload to every device that opted in to broadcasts.

        Returns True once fan-out completes; False only for an invalid payload.
        """
        require_not_none(payload, "payload")
        with trace_scope():
            if not is_binary(payload):
                self._warn(FailureReason.INVALID_PAYLOAD, PAYLOAD_FORMAT_WARNING)
                return False
            return self._fan_out(payload)

    def _route(self, message: Message) -> bool:
        metrics = self.metrics
        metrics.messages_sent.inc()
        metrics.payload_bits.observe(message.payload_bits)

        target = self._devices.get(message.recipient)
        if target is None:
            self._warn(
                FailureReason.UNKNOWN_RECIPIENT,
                "no device matches the message's recipient",
                device_id=message.recipient,
                port=message.port,
            )
            metrics.messages_failed.inc()
            self._record(
                DeliveryKind.UNICAST, message.payload, False,
                recipient=message.recipient, port=message.port,
                reason=FailureReason.UNKNOWN_RECIPIENT,
            )
            return False

        delivered = target.receive_message(message)
        if delivered:
            metrics.messages_delivered.inc()
        else:
            metrics.messages_failed.inc()
        self._record(
            DeliveryKind.UNICAST, message.payload, delivered,
            recipient=message.recipient, port=message.port,
            reason=None if delivered else FailureReason.NO_LISTENER,
        )
        logger.debug(f"Routed {message} delivered={delivered}")
        return delivered

    def _fan_out(self, payload: str) -> bool:
        metrics = self.metrics
        metrics.broadcasts_sent.inc()
        metrics.payload_bits.observe(len(payload))

        reached: list[int] = []
        for identifier, device in list(self._devices.items()):
            # Removed or re-keyed by an earlier handler
            if self._devices.get(identifier) is not device:
                continue
            if not device.receive_broadcast:
                continue
            device.receive_broadcast_message(payload)
            reached.append(identifier)
            metrics.broadcast_deliveries.inc()

        self._record(DeliveryKind.BROADCAST, payload, True, fanout=tuple(reached))
        logger.debug(f"Broadcast {payload!r} reached devices {reached}")
        return True

    # =========================================================================
    # MEMBERSHIP
    # =========================================================================

    def add_device(self, device: Device) -> bool:
        """
        Register a device under its own identifier.

        Fails when the identifier is taken or the device is attached to a
        motherboard already.
        """
        require_not_none(device, "device")
        if device.motherboard is not None:
            self._warn(
                FailureReason.ALREADY_ATTACHED,
                f"device with ID {device.identifier} is already connected to a motherboard",
                device_id=device.identifier,
            )
            return False
        if device.identifier in self._devices:
            self._warn(
                FailureReason.DUPLICATE_ID,
                f"couldn't connect device with ID {device.identifier} because the "
                f"motherboard already has a device with that ID",
                device_id=device.identifier,
            )
            return False

        self._devices[device.identifier] = device
        device._link(self)
        self.metrics.registered_devices.set(len(self._devices))
        logger.debug(f"Registered device {device.identifier}")
        return True

    def remove_device(self, identifier: int) -> bool:
        """Unregister the device with this identifier and clear its link."""
        device = self._devices.pop(identifier, None)
        if device is None:
            return False
        device._link(None)
        self.metrics.registered_devices.set(len(self._devices))
        logger.debug(f"Removed device {identifier}")
        return True

    def has_device_with_id(self, identifier: int) -> bool:
        return identifier in self._devices

    def device(self, identifier: int) -> Device | None:
        """Registered device with this identifier, or None."""
        return self._devices.get(identifier)

    def devices(self) -> ReadOnlyMapping[int, Device]:
        """Snapshot of identifier -> device."""
        return ReadOnlyMapping(self._devices)

    def _rekey_device(self, device: Device, identifier: int) -> None:
        """Move a registered device to a free identifier; Device.set_identifier calls this."""
        del self._devices[device.identifier]
        device._identifier = identifier
        self._devices[identifier] = device
        logger.debug(f"Device re-keyed to {identifier}")

    # =========================================================================
    # TRAFFIC LOG
    # =========================================================================

    def traffic(
        self,
        kind: DeliveryKind | None = None,
        recipient: int | None = None,
        delivered: bool | None = None,
    ) -> list[TrafficRecord]:
        """Query the traffic log with optional filters."""
        records = list(self._traffic)

        if kind is not None:
            records = [r for r in records if r.kind == kind]
        if recipient is not None:
            records = [r for r in records if r.recipient == recipient]
        if delivered is not None:
            records = [r for r in records if r.delivered == delivered]

        return records

    def clear_traffic(self) -> None:
        """Clear traffic log."""
        self._traffic.clear()

    def _record(
        self,
        kind: DeliveryKind,
        payload: str,
        delivered: bool,
        **details,
    ) -> None:
        if self.record_traffic:
            self._traffic.append(
                TrafficRecord(
                    kind=kind, payload=payload, delivered=delivered,
                    trace_id=get_trace_id(), **details,
                )
            )

    def _warn(
        self,
        reason: FailureReason,
        message: str,
        device_id: int | None = None,
        port: int | None = None,
    ) -> None:
        self.warnings.emit(
            reason,
            message,
            WarningSource.MOTHERBOARD,
            device_id=device_id,
            port=port,
        )
