"""Founding Access — one-time, capped override of tier time windows.

Invariants:
    - eligible is set only at signup, and only if a valid token was redeemed
    - active flips at most once per viewer and never flips back
    - Activation needs: a confirmed dual-confirmation action AND a live interest
      AND the tenure predicate (allow-all unless enforcement is configured)
    - The acknowledgement notice is shown once; it auto-dismisses after a timeout
    - Founding access never changes the interest limit

Design Decisions:
    - check_activation_conditions is PURE and returns the list of unmet conditions
      (empty = ready), mirroring the gate checks
    - Tenure is pluggable (MinimumTenure / allow_any_tenure); enforcement is opt-in
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from pairgate.core.domain_types import FOUNDING_TENURE_DAYS


@dataclass
class FoundingAccessState:
    """Per-viewer founding access flags — pure dataclass, no IO."""

    eligible: bool = False
    active: bool = False
    acknowledged: bool = False
    activated_at: datetime | None = None

    @property
    def watching(self) -> bool:
        """Whether the activation watcher still has work to do for this viewer."""
        return self.eligible and not self.active

    def activate(self, now: datetime) -> None:
        self.active = True
        self.activated_at = now

    def notice_pending(self, now: datetime, timeout: timedelta) -> bool:
        """Whether the one-time notice should still be shown. Auto-acknowledges on timeout."""
        if not self.active or self.acknowledged:
            return False
        if self.activated_at is not None and now - self.activated_at >= timeout:
            self.acknowledged = True
            return False
        return True


def allow_any_tenure(account_created_at: datetime | None, now: datetime) -> bool:
    return True


@dataclass(frozen=True)
class MinimumTenure:
    """Account age must be at least `days`. Unknown creation time fails closed."""
    days: int = FOUNDING_TENURE_DAYS

    def __call__(self, account_created_at: datetime | None, now: datetime) -> bool:
        if account_created_at is None:
            return False
        return now - account_created_at >= timedelta(days=self.days)


def check_activation_conditions(
    has_confirmed_action: bool,
    has_live_interest: bool,
    tenure_ok: bool = True,
) -> list[str]:
    missing = []
    if not has_confirmed_action:
        missing.append("confirmed_action")
    if not has_live_interest:
        missing.append("live_interest")
    if not tenure_ok:
        missing.append("tenure")
    return missing
