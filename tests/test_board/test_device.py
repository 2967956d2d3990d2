"""Tests for Device send/receive, identifiers and port bindings."""

import pytest

from hubnet.board import Motherboard, check_device
from hubnet.errors import NullArgumentError, UnmodifiableViewError
from hubnet.schemas import Message, PAYLOAD_FORMAT_WARNING
from hubnet.vocabulary import FailureReason, MembershipState, WarningSource


class TestSendMessage:
    """Tests for Device.send_message."""

    def test_detached_device_cannot_send(self, make_device, channel):
        """A device without a motherboard fails and names its ID."""
        sender = make_device(1)

        assert sender.send_message(Message(2, 2, "100")) is False
        event = channel.last()
        assert event.reason == FailureReason.NOT_ATTACHED
        assert event.source == WarningSource.DEVICE
        assert event.device_id == 1
        assert (
            "couldn't send message from device with ID 1 because it is not "
            "connected to a motherboard"
        ) in event.message

    def test_send_progression(self, hub, make_device, make_app, channel):
        """Each missing hop produces its own failure until delivery succeeds."""
        sender = make_device(1)
        message = Message(2, 2, "100")
        sender.set_motherboard(hub)

        assert sender.send_message(message) is False
        assert channel.last().reason == FailureReason.UNKNOWN_RECIPIENT

        receiver = make_device(2)
        receiver.set_motherboard(hub)
        assert sender.send_message(message) is False
        assert channel.last().reason == FailureReason.NO_LISTENER

        application = make_app(receiver)
        application.connect_to_port(2)
        assert sender.send_message(message) is True
        assert application.received == [message]

    def test_none_message(self, make_device):
        with pytest.raises(NullArgumentError):
            make_device(1).send_message(None)


class TestSendBroadcastMessage:
    """Tests for Device.send_broadcast_message."""

    def test_invalid_payload(self, hub, make_device, channel):
        device = make_device(1, receive_broadcast=True)
        device.set_motherboard(hub)

        assert device.send_broadcast_message("10x") is False
        assert channel.last().reason == FailureReason.INVALID_PAYLOAD
        assert PAYLOAD_FORMAT_WARNING in channel.last().message
        assert device.broadcasts == []

    def test_payload_checked_before_attachment(self, make_device, channel):
        """A bad payload is reported even when the device is detached."""
        assert make_device(1).send_broadcast_message("") is False
        assert channel.last().reason == FailureReason.INVALID_PAYLOAD

    def test_detached(self, make_device, channel):
        assert make_device(4).send_broadcast_message("1") is False
        assert channel.last().reason == FailureReason.NOT_ATTACHED
        assert "device with ID 4" in channel.last().message

    def test_attached(self, hub, make_device):
        device = make_device(1, receive_broadcast=True)
        device.set_motherboard(hub)
        assert device.send_broadcast_message("11") is True
        assert device.broadcasts == ["11"]

    def test_none_payload(self, make_device):
        with pytest.raises(NullArgumentError):
            make_device(1).send_broadcast_message(None)


class TestReceiveMessage:
    """Tests for Device.receive_message."""

    def test_no_listener(self, make_device, make_app, last_warning):
        message = Message(2, 2, "100")
        device = make_device(2)
        application = make_app(device)

        assert device.receive_message(message) is False
        assert (
            "no application is listening on port 2 for device with ID 2 "
            "to deliver the message to"
        ) in last_warning()

        application.connect_to_port(2)
        assert device.receive_message(message) is True
        assert application.received == [message]

    def test_warning_cites_port_and_device(self, make_device, channel):
        device = make_device(7)
        device.receive_message(Message(7, 9, "1"))
        event = channel.last()
        assert event.port == 9
        assert event.device_id == 7

    def test_dispatches_only_to_port_owner(self, make_device, make_app):
        device = make_device(1)
        first, second = make_app(device), make_app(device)
        first.connect_to_port(1)
        second.connect_to_port(2)

        device.receive_message(Message(1, 2, "0"))
        assert first.received == []
        assert second.received == [Message(1, 2, "0")]


class TestIdentifier:
    """Tests for identifier reads and changes."""

    def test_identifier(self, make_device):
        assert make_device(1).identifier == 1

    def test_detached_change(self, make_device):
        device = make_device(1)
        assert device.set_identifier(3) is True
        assert device.identifier == 3

    def test_attached_change(self, hub, make_device):
        """Attached devices are re-keyed on their motherboard."""
        device = make_device(1)
        assert device.set_identifier(3) is True
        device.set_motherboard(hub)

        # The motherboard already lists ID 3: this device itself
        assert device.set_identifier(3) is False

        assert device.set_identifier(5) is True
        assert 5 in hub.devices()
        assert 3 not in hub.devices()
        assert hub.device(5) is device

    def test_conflict_with_other_device(self, hub, make_device, channel):
        first, second = make_device(1), make_device(2)
        first.set_motherboard(hub)
        second.set_motherboard(hub)

        assert first.set_identifier(2) is False
        assert first.identifier == 1
        assert hub.device(2) is second
        assert channel.last().reason == FailureReason.DUPLICATE_ID

    def test_same_id_repeated_while_attached(self, hub, make_device):
        """Repeating an identifier change while attached fails on the second call."""
        device = make_device(1)
        device.set_motherboard(hub)
        assert device.set_identifier(8) is True
        assert device.set_identifier(8) is False
        assert device.identifier == 8
        assert list(hub.devices()) == [8]


class TestApplications:
    """Tests for port bindings."""

    def test_port_mapping_snapshot(self, make_device, make_app):
        device = make_device(1)
        application = make_app(device)

        assert device.port_mapping() == {}
        with pytest.raises(UnmodifiableViewError):
            device.port_mapping()[2] = application

        device.add_application(2, application)
        assert device.port_mapping() == {2: application}
        assert device.app_mapping() == {application: 2}

    def test_snapshot_does_not_follow_later_changes(self, make_device, make_app):
        device = make_device(1)
        application = make_app(device)
        snapshot = device.port_mapping()
        device.add_application(1, application)
        assert snapshot == {}

    def test_app_mapping_read_only(self, make_device, make_app):
        device = make_device(1)
        application = make_app(device)
        device.add_application(1, application)
        with pytest.raises(UnmodifiableViewError):
            device.app_mapping().pop(application)

    def test_add_application(self, make_device, make_app, channel):
        device = make_device(1)
        app1, app2 = make_app(device), make_app(device)

        assert device.add_application(1, app1) is True
        assert device.add_application(1, app2) is False
        assert channel.last().reason == FailureReason.PORT_TAKEN
        assert device.add_application(2, app2) is True

    def test_port_taken_message(self, make_device, make_app, last_warning):
        device = make_device(1)
        app1, app2 = make_app(device), make_app(device)
        device.add_application(1, app1)
        device.add_application(1, app2)

        assert (
            f"application {app2!r} couldn't be connected to port 1 on device with "
            f"ID 1 because the port is already taken by application {app1!r}"
        ) in last_warning()
        assert device.port_mapping() == {1: app1}

    def test_already_bound_message(self, make_device, make_app, channel):
        device = make_device(1)
        application = make_app(device)
        device.add_application(4, application)

        assert device.add_application(6, application) is False
        event = channel.last()
        assert event.reason == FailureReason.APP_ALREADY_BOUND
        assert (
            f"this application {application!r} is already connected to port 4 "
            f"so it was not connected to given port 6"
        ) in event.message
        assert device.port_mapping() == {4: application}

    def test_foreign_application_rejected(self, make_device, make_app, channel):
        """Only applications hosted by this device may bind to its ports."""
        device, other = make_device(1), make_device(2)
        stranger = make_app(other)

        assert device.add_application(1, stranger) is False
        event = channel.last()
        assert event.reason == FailureReason.FOREIGN_APPLICATION
        assert "because it is hosted by device with ID 2" in event.message
        assert device.port_mapping() == {}
        assert device.app_mapping() == {}
        assert check_device(device).valid

    def test_remove_application(self, make_device, make_app):
        device = make_device(1)
        app1, app2 = make_app(device), make_app(device)
        device.add_application(1, app1)
        device.add_application(2, app2)

        assert device.remove_application(1) is True
        assert device.remove_application(1) is False
        assert device.remove_application(2) is True
        assert device.app_mapping() == {}

    def test_add_then_remove_restores_state(self, make_device, make_app):
        device = make_device(1)
        resident, visitor = make_app(device), make_app(device)
        device.add_application(1, resident)
        before_ports, before_apps = dict(device.port_mapping()), dict(device.app_mapping())

        device.add_application(2, visitor)
        device.remove_application(2)

        assert device.port_mapping() == before_ports
        assert device.app_mapping() == before_apps

    def test_tables_stay_inverse(self, make_device, make_app):
        device = make_device(1)
        apps = [make_app(device) for _ in range(4)]
        for port, app in enumerate(apps):
            device.add_application(port, app)
        device.add_application(0, apps[1])
        device.remove_application(2)
        apps[2].connect_to_port(9)

        result = check_device(device)
        assert result.valid, result.errors

    def test_none_application(self, make_device):
        with pytest.raises(NullArgumentError):
            make_device(1).add_application(1, None)


class TestBroadcastFlag:
    """Tests for broadcast opt-in."""

    def test_receive_broadcast(self, make_device):
        assert make_device(1, receive_broadcast=True).receive_broadcast is True

    def test_set_receive_broadcast(self, make_device):
        device = make_device(1, receive_broadcast=True)
        device.set_receive_broadcast(False)
        assert device.receive_broadcast is False
        device.set_receive_broadcast(True)
        assert device.receive_broadcast is True


class TestMotherboardLink:
    """Tests for attachment and detachment."""

    def test_connected_to_motherboard(self, make_device):
        device = make_device(1, receive_broadcast=True)
        assert device.connected_to_motherboard() is False
        assert device.membership_state == MembershipState.UNREGISTERED

        motherboard = Motherboard()
        device.set_motherboard(motherboard)
        assert device.connected_to_motherboard() is True
        assert device.motherboard is motherboard
        assert device.membership_state == MembershipState.REGISTERED

    def test_set_motherboard_duplicate(self, make_device):
        motherboard = Motherboard()
        device1 = make_device(1)
        duplicate = make_device(1, receive_broadcast=True)

        assert device1.set_motherboard(motherboard) is True
        assert duplicate.set_motherboard(motherboard) is False
        assert duplicate.motherboard is None

    def test_cannot_attach_twice(self, make_device):
        device = make_device(1)
        first, second = Motherboard(), Motherboard()
        assert device.set_motherboard(first) is True
        assert device.set_motherboard(second) is False
        assert device.motherboard is first
        assert not second.has_device_with_id(1)

    def test_detach(self, hub, make_device):
        device = make_device(1)
        assert device.detach() is False
        device.set_motherboard(hub)
        assert device.detach() is True
        assert device.motherboard is None
        assert not hub.has_device_with_id(1)

    def test_none_motherboard(self, make_device):
        with pytest.raises(NullArgumentError):
            make_device(1).set_motherboard(None)

    def test_repr(self, make_device):
        assert repr(make_device(3)) == "RecordingDevice(identifier=3)"
