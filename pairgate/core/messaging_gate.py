"""Messaging Gate — combines every precondition for unlocking direct messages.

Invariants:
    - unlocked = location_ok AND mutual_interest AND shared_context AND dual_confirmed
    - first_blocker chains the checks in fixed order — first error wins:
      location → mutual interest → shared context → dual confirmation
    - All functions are PURE: no IO, no state, no side effects
    - Return error dict on violation, None on success

Design Decisions:
    - Pure functions over method dispatch: testable without fakes
    - Inputs resolved by the shell (services/coordination_engine.py) into GateInputs,
      so this module never touches stores, locks or providers
"""

from dataclasses import dataclass

from pairgate.core.domain_types import GateCheck


@dataclass(frozen=True)
class GateInputs:
    location_ok: bool
    mutual_interest: bool
    shared_context: bool
    dual_confirmed: bool


@dataclass(frozen=True)
class GateResult:
    location_ok: bool
    mutual_interest: bool
    shared_context: bool
    dual_confirmed: bool
    unlocked: bool
    blocked_by: GateCheck | None
    message: str | None = None


def check_location(inputs: GateInputs) -> dict | None:
    """Rule 1: candidate must be inside the viewer's discovery scope."""
    if not inputs.location_ok:
        return {
            "status": "blocked",
            "gate": GateCheck.LOCATION,
            "message": "Outside your current discovery area.",
        }
    return None


def check_mutual_interest(inputs: GateInputs) -> dict | None:
    """Rule 2: both couples must have expressed interest."""
    if not inputs.mutual_interest:
        return {
            "status": "blocked",
            "gate": GateCheck.MUTUAL_INTEREST,
            "message": "Interest has not been expressed on both sides yet.",
        }
    return None


def check_shared_context(inputs: GateInputs) -> dict | None:
    """Rule 3: co-membership in at least one lounge or event."""
    if not inputs.shared_context:
        return {
            "status": "blocked",
            "gate": GateCheck.SHARED_CONTEXT,
            "message": "Join a shared lounge or event first.",
        }
    return None


def check_dual_confirmation(inputs: GateInputs) -> dict | None:
    """Rule 4: both partners must have confirmed opening the conversation."""
    if not inputs.dual_confirmed:
        return {
            "status": "blocked",
            "gate": GateCheck.DUAL_CONFIRMATION,
            "message": "Both partners need to confirm.",
        }
    return None


def first_blocker(inputs: GateInputs) -> dict | None:
    """Chain all gate checks. Returns first error or None."""
    return (
        check_location(inputs)
        or check_mutual_interest(inputs)
        or check_shared_context(inputs)
        or check_dual_confirmation(inputs)
    )


def evaluate_gate(inputs: GateInputs) -> GateResult:
    blocker = first_blocker(inputs)
    return GateResult(
        location_ok=inputs.location_ok,
        mutual_interest=inputs.mutual_interest,
        shared_context=inputs.shared_context,
        dual_confirmed=inputs.dual_confirmed,
        unlocked=blocker is None,
        blocked_by=blocker["gate"] if blocker else None,
        message=blocker["message"] if blocker else None,
    )
