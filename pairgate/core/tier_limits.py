"""Tier Limits — time windows per tier, one shared volume limit.

Invariants:
    - interest_limit is the same object for every tier
    - founding access selects premium windows without billing
    - Presence confirmations use the RSVP window
"""

from dataclasses import dataclass
from datetime import timedelta

from pairgate.core.domain_types import INTEREST_LIMIT, ActionKind, Tier


@dataclass(frozen=True)
class TierLimits:
    interest_limit: int
    message_ttl: timedelta
    rsvp_ttl: timedelta

    def ttl_for(self, kind: ActionKind) -> timedelta:
        if kind == ActionKind.MESSAGING:
            return self.message_ttl
        return self.rsvp_ttl


FREE_LIMITS = TierLimits(
    interest_limit=INTEREST_LIMIT,
    message_ttl=timedelta(hours=72),
    rsvp_ttl=timedelta(hours=48),
)
PREMIUM_LIMITS = TierLimits(
    interest_limit=INTEREST_LIMIT,
    message_ttl=timedelta(hours=168),
    rsvp_ttl=timedelta(hours=96),
)


def effective_tier(tier: Tier, founding_active: bool) -> Tier:
    """Active founding access lifts a free account to founding; premium stays premium."""
    if founding_active and tier == Tier.FREE:
        return Tier.FOUNDING
    return tier


def has_extended_windows(tier: Tier) -> bool:
    return tier in (Tier.PREMIUM, Tier.FOUNDING)


def limits_for(
    tier: Tier,
    free: TierLimits = FREE_LIMITS,
    premium: TierLimits = PREMIUM_LIMITS,
) -> TierLimits:
    return premium if has_extended_windows(tier) else free
