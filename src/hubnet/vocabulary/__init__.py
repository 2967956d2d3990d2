"""
Vocabulary - Enumerated types forming the shared language of the bus.
"""

from hubnet.vocabulary.enums import (
    FailureReason,
    MembershipState,
    DeliveryKind,
    WarningSource,
)

__all__ = [
    "FailureReason",
    "MembershipState",
    "DeliveryKind",
    "WarningSource",
]
