"""
Application - Leaf endpoint bound to one port on one device.

An application keeps a fixed reference to its host device and may hold
at most one port on it at a time. Sends are checked here first so the
warning is raised closest to the caller; the device and motherboard
check again for callers that bypass the application.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from hubnet.errors import require_not_none
from hubnet.observability import WarningChannel, trace_scope
from hubnet.schemas import Message, is_binary, PAYLOAD_FORMAT_WARNING
from hubnet.vocabulary import FailureReason, WarningSource

if TYPE_CHECKING:
    from hubnet.board.device import Device


class Application(ABC):
    """
    Abstract application.

    Subclasses implement receive_message. Warnings share the host
    device's channel.
    """

    def __init__(self, device: "Device"):
        self._device = require_not_none(device, "device")

    def __repr__(self) -> str:
        return f"{type(self).__name__}@{id(self):x}(device={self._device.identifier})"

    @property
    def device(self) -> "Device":
        return self._device

    @property
    def warnings(self) -> WarningChannel:
        return self._device.warnings

    @property
    def port(self) -> int | None:
        """Port this application is bound to, or None."""
        return self._device.port_of(self)

    def connect_to_port(self, port: int) -> bool:
        """Bind to a port on the host device."""
        return self._device.add_application(port, self)

    def connected_to_a_port(self) -> bool:
        return self._device.is_application_connected(self)

    def disconnect(self) -> bool:
        """Release the bound port; False when not bound."""
        port = self.port
        if port is None:
            return False
        return self._device.remove_application(port)

    def send_message(self, message: Message) -> bool:
        """Send a unicast message through the host device."""
        require_not_none(message, "message")
        with trace_scope():
            if not self.connected_to_a_port():
                self._warn_not_bound()
                return False
            return self._device.send_message(message)

    def send_broadcast_message(self, payload: str) -> bool:
        """Broadcast a payload through the host device."""
        require_not_none(payload, "payload")
        with trace_scope():
            if not is_binary(payload):
                self._warn(FailureReason.INVALID_PAYLOAD, PAYLOAD_FORMAT_WARNING)
                return False
            if not self.connected_to_a_port():
                self._warn_not_bound()
                return False
            return self._device.send_broadcast_message(payload)

    @abstractmethod
    def receive_message(self, message: Message) -> None:
        """Handle a message delivered to this application's port."""
        pass

    def _warn_not_bound(self) -> None:
        self._warn(
            FailureReason.NOT_BOUND,
            f"application {self!r} is not connected to a port on device with ID "
            f"{self._device.identifier} so messages cannot be received",
        )

    def _warn(self, reason: FailureReason, message: str) -> None:
        self.warnings.emit(
            reason,
            message,
            WarningSource.APPLICATION,
            device_id=self._device.identifier,
            port=self.port,
        )
