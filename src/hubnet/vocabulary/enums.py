"""
Vocabulary enums - the shared language of the bus.

Failure reasons, membership states and delivery kinds referenced by the
board components, warning events and metrics.
"""

from enum import Enum


# =============================================================================
# FAILURES
# =============================================================================

class FailureReason(str, Enum):
    """
    Why an operation did not complete.

    Hard failures (NULL_ARGUMENT, UNMODIFIABLE_VIEW) are raised.
    Every other reason is reported as a warning event plus a False result.
    """
    NULL_ARGUMENT = "NULL_ARGUMENT"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    NOT_ATTACHED = "NOT_ATTACHED"
    UNKNOWN_RECIPIENT = "UNKNOWN_RECIPIENT"
    NO_LISTENER = "NO_LISTENER"
    PORT_TAKEN = "PORT_TAKEN"
    APP_ALREADY_BOUND = "APP_ALREADY_BOUND"
    DUPLICATE_ID = "DUPLICATE_ID"
    FOREIGN_APPLICATION = "FOREIGN_APPLICATION"
    ALREADY_ATTACHED = "ALREADY_ATTACHED"
    NOT_BOUND = "NOT_BOUND"
    UNMODIFIABLE_VIEW = "UNMODIFIABLE_VIEW"

    @property
    def is_hard(self) -> bool:
        """True for reasons that surface as exceptions."""
        return self in (FailureReason.NULL_ARGUMENT, FailureReason.UNMODIFIABLE_VIEW)


# =============================================================================
# MEMBERSHIP
# =============================================================================

class MembershipState(str, Enum):
    """
    Registration state of a device with respect to a motherboard.
    """
    UNREGISTERED = "UNREGISTERED"  # No hub reference
    REGISTERED = "REGISTERED"      # Present in exactly one hub's device table


# =============================================================================
# ROUTING
# =============================================================================

class DeliveryKind(str, Enum):
    """Kind of traffic routed through a motherboard."""
    UNICAST = "unicast"
    BROADCAST = "broadcast"


class WarningSource(str, Enum):
    """Component that emitted a warning event."""
    APPLICATION = "application"
    DEVICE = "device"
    MOTHERBOARD = "motherboard"
