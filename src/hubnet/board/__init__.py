"""
Board - Motherboard, devices and applications.

- Motherboard: owns the device-ID namespace and routes traffic
- Device: owns a port space and dispatches to applications
- Application: leaf endpoint bound to one port
"""

from hubnet.board.device import Device
from hubnet.board.application import Application
from hubnet.board.motherboard import Motherboard, TrafficRecord
from hubnet.board.membership import (
    LEGAL_TRANSITIONS,
    CheckResult,
    validate_transition,
    check_device,
    check_topology,
)

__all__ = [
    "Device",
    "Application",
    "Motherboard",
    "TrafficRecord",
    "LEGAL_TRANSITIONS",
    "CheckResult",
    "validate_transition",
    "check_device",
    "check_topology",
]
