"""
Device - Routing endpoint between a motherboard and its applications.

A device owns a port space: at most one application per port and at most
one port per application, kept as two tables that are exact inverses.
Outgoing traffic goes up to the attached motherboard; incoming unicast
traffic is dispatched to the application bound to the message's port.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from hubnet.errors import require_not_none
from hubnet.observability import WarningChannel, trace_scope
from hubnet.schemas import Message, is_binary, PAYLOAD_FORMAT_WARNING
from hubnet.views import ReadOnlyMapping
from hubnet.vocabulary import FailureReason, MembershipState, WarningSource

if TYPE_CHECKING:
    from hubnet.board.application import Application
    from hubnet.board.motherboard import Motherboard


class Device(ABC):
    """
    Abstract device.

    Subclasses decide what a broadcast means by implementing
    receive_broadcast_message. Warnings go to ``warnings``; a private
    channel is created when none is given.
    """

    def __init__(
        self,
        identifier: int,
        receive_broadcast: bool = False,
        warnings: WarningChannel | None = None,
    ):
        self._identifier = require_not_none(identifier, "identifier")
        self._port_mapping: dict[int, "Application"] = {}
        self._app_mapping: dict["Application", int] = {}
        self._receive_broadcast = receive_broadcast
        self._motherboard: "Motherboard | None" = None
        self.warnings = warnings if warnings is not None else WarningChannel()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(identifier={self._identifier})"

    # =========================================================================
    # SEND / RECEIVE
    # =========================================================================

    def send_message(self, message: Message) -> bool:
        """
        Send a unicast message up to the attached motherboard.

        Returns whether the message reached an application.
        """
        require_not_none(message, "message")
        with trace_scope():
            if self._motherboard is None:
                self._warn_not_attached()
                return False
            return self._motherboard.send_message(message)

    def send_broadcast_message(self, payload: str) -> bool:
        """
        Broadcast a payload through the attached motherboard.

        Returns whether the payload was valid and fanned out.
        """
        require_not_none(payload, "payload")
        with trace_scope():
            if not is_binary(payload):
                self._warn(FailureReason.INVALID_PAYLOAD, PAYLOAD_FORMAT_WARNING)
                return False
            if self._motherboard is None:
                self._warn_not_attached()
                return False
            return self._motherboard.send_broadcast_message(payload)

    def receive_message(self, message: Message) -> bool:
        """
        Deliver a message to the application bound to its port.

        Returns whether an application was listening on that port.
        """
        require_not_none(message, "message")
        application = self._port_mapping.get(message.port)
        if application is None:
            self._warn(
                FailureReason.NO_LISTENER,
                f"no application is listening on port {message.port} for device "
                f"with ID {self._identifier} to deliver the message to",
                port=message.port,
            )
            return False
        application.receive_message(message)
        return True

    @abstractmethod
    def receive_broadcast_message(self, payload: str) -> None:
        """Handle a broadcast payload; called once per broadcast while opted in."""
        pass

    # =========================================================================
    # IDENTIFIER
    # =========================================================================

    @property
    def identifier(self) -> int:
        return self._identifier

    def set_identifier(self, identifier: int) -> bool:
        """
        Change this device's identifier.

        A detached device may take any identifier. An attached device is
        re-keyed on its motherboard unless that motherboard already lists
        the identifier, which includes this device's current identifier.
        """
        require_not_none(identifier, "identifier")
        hub = self._motherboard
        if hub is None:
            self._identifier = identifier
            return True

        if hub.has_device_with_id(identifier):
            self._warn(
                FailureReason.DUPLICATE_ID,
                f"couldn't change the ID of device with ID {self._identifier} to "
                f"{identifier} because the motherboard already has a device with that ID",
            )
            return False

        hub._rekey_device(self, identifier)
        return True

    # =========================================================================
    # APPLICATIONS
    # =========================================================================

    def port_mapping(self) -> ReadOnlyMapping[int, "Application"]:
        """Snapshot of port -> application."""
        return ReadOnlyMapping(self._port_mapping)

    def app_mapping(self) -> ReadOnlyMapping["Application", int]:
        """Snapshot of application -> port."""
        return ReadOnlyMapping(self._app_mapping)

    def is_application_connected(self, application: "Application") -> bool:
        return application in self._app_mapping

    def port_of(self, application: "Application") -> int | None:
        """Port the application is bound to on this device, or None."""
        return self._app_mapping.get(application)

    def add_application(self, port: int, application: "Application") -> bool:
        """
        Bind an application to a free port.

        Fails when the application is hosted by another device, the port
        is taken, or the application already holds a port.
        """
        require_not_none(port, "port")
        require_not_none(application, "application")

        if application.device is not self:
            self._warn(
                FailureReason.FOREIGN_APPLICATION,
                f"application {application!r} couldn't be connected to port {port} on "
                f"device with ID {self._identifier} because it is hosted by device "
                f"with ID {application.device.identifier}",
                port=port,
            )
            return False

        occupant = self._port_mapping.get(port)
        if occupant is not None:
            self._warn(
                FailureReason.PORT_TAKEN,
                f"application {application!r} couldn't be connected to port {port} on "
                f"device with ID {self._identifier} because the port is already taken "
                f"by application {occupant!r}",
                port=port,
            )
            return False

        bound_port = self._app_mapping.get(application)
        if bound_port is not None:
            self._warn(
                FailureReason.APP_ALREADY_BOUND,
                f"this application {application!r} is already connected to port "
                f"{bound_port} so it was not connected to given port {port}",
                port=port,
            )
            return False

        self._port_mapping[port] = application
        self._app_mapping[application] = port
        return True

    def remove_application(self, port: int) -> bool:
        """Unbind whatever application holds the port."""
        application = self._port_mapping.pop(port, None)
        if application is None:
            return False
        del self._app_mapping[application]
        return True

    # =========================================================================
    # BROADCAST OPT-IN
    # =========================================================================

    @property
    def receive_broadcast(self) -> bool:
        return self._receive_broadcast

    def set_receive_broadcast(self, receive_broadcast: bool) -> None:
        self._receive_broadcast = receive_broadcast

    # =========================================================================
    # MOTHERBOARD
    # =========================================================================

    @property
    def motherboard(self) -> "Motherboard | None":
        return self._motherboard

    @property
    def membership_state(self) -> MembershipState:
        if self._motherboard is None:
            return MembershipState.UNREGISTERED
        return MembershipState.REGISTERED

    def connected_to_motherboard(self) -> bool:
        return self._motherboard is not None

    def set_motherboard(self, motherboard: "Motherboard") -> bool:
        """
        Attach to a motherboard under this device's identifier.

        Returns False if the motherboard already has a device with this
        identifier or this device is attached elsewhere.
        """
        require_not_none(motherboard, "motherboard")
        return motherboard.add_device(self)

    def detach(self) -> bool:
        """Leave the attached motherboard; False when already detached."""
        if self._motherboard is None:
            return False
        return self._motherboard.remove_device(self._identifier)

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _link(self, motherboard: "Motherboard | None") -> None:
        """Set the motherboard back-reference; only a Motherboard calls this."""
        self._motherboard = motherboard

    def _warn_not_attached(self) -> None:
        self._warn(
            FailureReason.NOT_ATTACHED,
            f"couldn't send message from device with ID {self._identifier} "
            f"because it is not connected to a motherboard",
        )

    def _warn(self, reason: FailureReason, message: str, port: int | None = None) -> None:
        self.warnings.emit(
            reason,
            message,
            WarningSource.DEVICE,
            device_id=self._identifier,
            port=port,
        )
