"""
Tests for the Message value and binary-string validation.
"""

import pytest
from pydantic import ValidationError

from hubnet.schemas import Message, is_binary, PAYLOAD_FORMAT_WARNING


class TestIsBinary:
    """Tests for the binary-string predicate."""

    @pytest.mark.parametrize("value", ["0", "1", "01010", "100", "1" * 64])
    def test_valid(self, value):
        assert is_binary(value) is True

    @pytest.mark.parametrize("value", ["", "100a", "not binary", "2", " 01", "0 1", "01\n"])
    def test_invalid(self, value):
        assert is_binary(value) is False

    @pytest.mark.parametrize("value", [None, 101, b"101", ["1", "0"]])
    def test_non_strings(self, value):
        """Non-string inputs are never binary strings."""
        assert is_binary(value) is False


class TestMessage:
    """Tests for Message construction and value semantics."""

    def test_create_positional(self):
        """Positional construction mirrors (recipient, port, payload)."""
        msg = Message(2, 3, "100")
        assert msg.recipient == 2
        assert msg.port == 3
        assert msg.payload == "100"

    def test_create_keywords(self):
        msg = Message(recipient=2, port=2, payload="1")
        assert msg == Message(2, 2, "1")

    def test_invalid_payload_rejected(self):
        """Non-binary payloads fail construction with the format phrase."""
        with pytest.raises(ValidationError) as exc_info:
            Message(1, 1, "xyz")
        assert PAYLOAD_FORMAT_WARNING in str(exc_info.value)

    def test_empty_payload_rejected(self):
        with pytest.raises(ValidationError):
            Message(1, 1, "")

    def test_none_payload_rejected(self):
        with pytest.raises(ValidationError):
            Message(1, 1, None)

    def test_strict_integers(self):
        """Recipient and port are not coerced from strings or booleans."""
        with pytest.raises(ValidationError):
            Message("1", 1, "1")
        with pytest.raises(ValidationError):
            Message(1, True, "1")

    def test_immutable(self):
        """Messages cannot be mutated after construction."""
        msg = Message(1, 1, "1")
        with pytest.raises(ValidationError):
            msg.payload = "0"

    def test_structural_equality_and_hash(self):
        a = Message(2, 2, "100")
        b = Message(2, 2, "100")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b, Message(2, 2, "101")}) == 2

    def test_inequality_per_field(self):
        base = Message(1, 1, "1")
        assert base != Message(2, 1, "1")
        assert base != Message(1, 2, "1")
        assert base != Message(1, 1, "0")

    def test_payload_bits(self):
        assert Message(1, 1, "10110").payload_bits == 5

    def test_str(self):
        assert str(Message(2, 2, "100")) == "Message(recipient=2, port=2, payload='100')"
