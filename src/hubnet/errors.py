"""
Errors - Hard failures raised by the bus.

Routine failures are reported as warning events with a False result;
only programming errors are raised.
"""

from typing import TypeVar

from hubnet.vocabulary import FailureReason

T = TypeVar("T")


class HubnetError(Exception):
    """Base class for errors raised by hubnet."""
    reason: FailureReason | None = None


class NullArgumentError(HubnetError, TypeError):
    """A required argument was None."""
    reason = FailureReason.NULL_ARGUMENT

    def __init__(self, name: str):
        self.argument = name
        super().__init__(f"{name} must not be None")


class UnmodifiableViewError(HubnetError, TypeError):
    """A read-only snapshot was mutated."""
    reason = FailureReason.UNMODIFIABLE_VIEW

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"read-only view does not support {operation}")


def require_not_none(value: T | None, name: str) -> T:
    """Return value, raising NullArgumentError when it is None."""
    if value is None:
        raise NullArgumentError(name)
    return value
