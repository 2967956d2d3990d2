"""
hubnet - In-process message bus for a simulated motherboard topology.

A Motherboard registers Devices by ID, Devices bind Applications to ports,
and Applications exchange unicast and broadcast messages through the hub.
"""

from hubnet.schemas import Message, is_binary
from hubnet.board import Application, Device, Motherboard
from hubnet.config import BoardConfig, create_motherboard

__version__ = "0.1.0"

__all__ = [
    "Message",
    "is_binary",
    "Application",
    "Device",
    "Motherboard",
    "BoardConfig",
    "create_motherboard",
    "__version__",
]
