"""
Shared fixtures for hubnet tests.

Provides concrete recording subclasses of Device and Application, a
warning channel shared by every component a test builds, and restores the
trace ID and the 'hubnet' logger between tests.
"""

import logging

import pytest

from hubnet.board import Application, Device, Motherboard
from hubnet.observability import WarningChannel, set_trace_id


class RecordingDevice(Device):
    """Device that records every broadcast it receives."""

    def __init__(self, identifier, receive_broadcast=False, warnings=None):
        super().__init__(identifier, receive_broadcast, warnings)
        self.broadcasts: list[str] = []

    def receive_broadcast_message(self, payload: str) -> None:
        self.broadcasts.append(payload)


class RecordingApplication(Application):
    """Application that records every message delivered to it."""

    def __init__(self, device):
        super().__init__(device)
        self.received = []

    def receive_message(self, message) -> None:
        self.received.append(message)


@pytest.fixture(autouse=True)
def clean_state():
    """Reset the trace ID and the hubnet logger around each test."""
    set_trace_id(None)
    yield
    set_trace_id(None)
    hubnet_logger = logging.getLogger("hubnet")
    hubnet_logger.handlers.clear()
    hubnet_logger.addHandler(logging.NullHandler())
    hubnet_logger.setLevel(logging.NOTSET)
    hubnet_logger.propagate = True


@pytest.fixture
def channel() -> WarningChannel:
    return WarningChannel()


@pytest.fixture
def hub(channel) -> Motherboard:
    return Motherboard(warnings=channel, record_traffic=True)


@pytest.fixture
def make_device(channel):
    """Factory for recording devices sharing the test's warning channel."""
    def make(identifier: int, receive_broadcast: bool = False) -> RecordingDevice:
        return RecordingDevice(identifier, receive_broadcast, warnings=channel)
    return make


@pytest.fixture
def make_app():
    """Factory for recording applications."""
    def make(device) -> RecordingApplication:
        return RecordingApplication(device)
    return make


@pytest.fixture
def last_warning(channel):
    """Message of the most recent warning, or an empty string."""
    def last() -> str:
        event = channel.last()
        return event.message if event else ""
    return last
