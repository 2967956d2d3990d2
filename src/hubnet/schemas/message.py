"""
Message - Unicast value routed from an application to a device port.

A message names its recipient device, the port on that device and a
binary-string payload. Messages are immutable; equality and hashing are
structural over the three fields.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


PAYLOAD_FORMAT_WARNING = "payload is not in the correct format (binary string)"

_BINARY_DIGITS = frozenset("01")


def is_binary(value: object) -> bool:
    """
    True iff value is a non-empty string made only of '0' and '1'.
    """
    if not isinstance(value, str) or not value:
        return False
    return set(value) <= _BINARY_DIGITS


class Message(BaseModel):
    """
    Unicast message.

    Construction fails with a ValidationError when the payload is not a
    binary string or any field is missing.
    """

    recipient: int = Field(
        ...,
        description="Identifier of the device the message is addressed to"
    )

    port: int = Field(
        ...,
        description="Port on the recipient device selecting the application"
    )

    payload: str = Field(
        ...,
        description="Binary string ('0'/'1' characters, non-empty)"
    )

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        json_schema_extra={
            "examples": [
                {"recipient": 2, "port": 2, "payload": "100"}
            ]
        },
    )

    def __init__(self, recipient: int, port: int, payload: str, **data):
        super().__init__(recipient=recipient, port=port, payload=payload, **data)

    @field_validator("payload")
    @classmethod
    def payload_must_be_binary(cls, value: str) -> str:
        if not is_binary(value):
            raise ValueError(PAYLOAD_FORMAT_WARNING)
        return value

    @property
    def payload_bits(self) -> int:
        """Number of bits carried by the payload."""
        return len(self.payload)

    def __str__(self) -> str:
        return f"Message(recipient={self.recipient}, port={self.port}, payload={self.payload!r})"
