"""
Schemas - Value objects carried over the bus.
"""

from hubnet.schemas.message import Message, is_binary, PAYLOAD_FORMAT_WARNING

__all__ = [
    "Message",
    "is_binary",
    "PAYLOAD_FORMAT_WARNING",
]
