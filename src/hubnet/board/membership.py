"""
Membership - Device registration state machine and topology invariants.

A device is UNREGISTERED until a motherboard adds it, stays REGISTERED
while it changes identifier, and returns to UNREGISTERED when removed.
check_topology verifies the bidirectional links between a motherboard,
its devices and their applications.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hubnet.vocabulary import MembershipState

if TYPE_CHECKING:
    from hubnet.board.device import Device
    from hubnet.board.motherboard import Motherboard


# =============================================================================
# TRANSITION TABLE
# =============================================================================

# from_state -> set of legal to_states
# REGISTERED -> REGISTERED is an identifier change while attached
LEGAL_TRANSITIONS: dict[MembershipState, set[MembershipState]] = {
    MembershipState.UNREGISTERED: {
        MembershipState.REGISTERED,
    },
    MembershipState.REGISTERED: {
        MembershipState.REGISTERED,
        MembershipState.UNREGISTERED,
    },
}


@dataclass
class CheckResult:
    """Result of a membership or topology check."""
    valid: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def success(cls) -> "CheckResult":
        return cls(valid=True)

    @classmethod
    def failure(cls, errors: list[str]) -> "CheckResult":
        return cls(valid=False, errors=errors)

    def merge(self, other: "CheckResult") -> "CheckResult":
        """Combine two results."""
        return CheckResult(
            valid=self.valid and other.valid,
            errors=self.errors + other.errors,
        )


def validate_transition(
    from_state: MembershipState,
    to_state: MembershipState,
) -> CheckResult:
    """Check that moving between two membership states is legal."""
    if to_state in LEGAL_TRANSITIONS.get(from_state, set()):
        return CheckResult.success()
    return CheckResult.failure(
        [f"illegal membership transition {from_state.value} -> {to_state.value}"]
    )


# =============================================================================
# TOPOLOGY INVARIANTS
# =============================================================================

def check_device(device: "Device") -> CheckResult:
    """
    Verify a device's port and application tables are exact inverses.
    """
    errors: list[str] = []
    ports = device.port_mapping()
    apps = device.app_mapping()

    if len(ports) != len(apps):
        errors.append(
            f"device {device.identifier}: {len(ports)} ports but {len(apps)} applications"
        )

    for port, app in ports.items():
        if apps.get(app) != port:
            errors.append(
                f"device {device.identifier}: port {port} maps to {app!r} "
                f"but that application maps to {apps.get(app)}"
            )
        if app.device is not device:
            errors.append(
                f"device {device.identifier}: {app!r} on port {port} belongs to another device"
            )

    hub = device.motherboard
    if hub is not None and hub.device(device.identifier) is not device:
        errors.append(
            f"device {device.identifier}: attached motherboard does not list it under its identifier"
        )

    return CheckResult(valid=not errors, errors=errors)


def check_topology(hub: "Motherboard") -> CheckResult:
    """
    Verify every registered device is keyed by its own identifier, points
    back to this motherboard, and has consistent port tables.
    """
    result = CheckResult.success()

    for identifier, device in hub.devices().items():
        errors: list[str] = []
        if device.identifier != identifier:
            errors.append(
                f"device registered under {identifier} reports identifier {device.identifier}"
            )
        if device.motherboard is not hub:
            errors.append(f"device {identifier} does not point back to this motherboard")
        result = result.merge(CheckResult(valid=not errors, errors=errors))
        result = result.merge(check_device(device))

    return result
