"""Dual-Confirmation — generic two-party, TTL-bounded commit protocol.

One state machine serves messaging unlock, event attendance and presence:

    absent ──tap──▶ pending ──other partner taps──▶ confirmed (latch)
                    │   ▲
          retract   │   │ tap (one flag still set)
                    ▼   │
                  absent (both flags cleared)

    pending ──age > ttl (sweep or late tap)──▶ expired (terminal)
    expired ──tap──▶ pending (fresh instance_id)

Invariants:
    - confirmed iff both flags were set while the instance was not expired
    - confirmed is a one-way latch: further taps on the id are no-ops
    - expired instances never confirm; a tap on an expired id starts a fresh instance
    - ttl is fixed when the instance starts; later tier changes never move the deadline
    - All functions are PURE: they return new DualConfirmAction values, never mutate

Design Decisions:
    - Composite identity owner:kind:target maps to one action id, so the three
      use sites share one implementation
    - instance_id distinguishes successive attempts on the same id
    - Serialization per id is the shell's job (services/action_store.py)
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from uuid import uuid4

from pairgate.core.domain_types import ActionKind, ActionStatus, Partner


@dataclass(frozen=True)
class DualConfirmAction:
    id: str
    instance_id: str
    kind: ActionKind
    target_id: str
    owner_id: str
    partner1: bool
    partner2: bool
    status: ActionStatus
    created_at: datetime
    ttl: timedelta

    @property
    def deadline(self) -> datetime:
        return self.created_at + self.ttl

    def flag(self, partner: Partner) -> bool:
        return self.partner1 if partner == Partner.PARTNER1 else self.partner2

    def is_overdue(self, now: datetime) -> bool:
        return self.status == ActionStatus.PENDING and (now - self.created_at) > self.ttl


class TapTransition(str, Enum):
    STARTED = "started"
    TAPPED = "tapped"
    RESTARTED = "restarted"
    RETRACTED = "retracted"
    DELETED = "deleted"
    CONFIRMED = "confirmed"
    ALREADY_CONFIRMED = "already_confirmed"


@dataclass(frozen=True)
class TapResult:
    """Outcome of one tap. action=None means the id is back to absent."""
    action: DualConfirmAction | None
    transition: TapTransition


def action_id_for(owner_id: str, kind: ActionKind, target_id: str) -> str:
    return f"{owner_id}:{kind.value}:{target_id}"


def absent_action(
    action_id: str, kind: ActionKind, target_id: str, owner_id: str, now: datetime,
) -> DualConfirmAction:
    """Neutral placeholder for an id with no stored action."""
    return DualConfirmAction(
        id=action_id, instance_id="", kind=kind, target_id=target_id,
        owner_id=owner_id, partner1=False, partner2=False,
        status=ActionStatus.ABSENT, created_at=now, ttl=timedelta(0),
    )


def start_action(
    action_id: str,
    kind: ActionKind,
    target_id: str,
    owner_id: str,
    partner: Partner,
    ttl: timedelta,
    now: datetime,
) -> DualConfirmAction:
    return DualConfirmAction(
        id=action_id,
        instance_id=uuid4().hex,
        kind=kind,
        target_id=target_id,
        owner_id=owner_id,
        partner1=partner == Partner.PARTNER1,
        partner2=partner == Partner.PARTNER2,
        status=ActionStatus.PENDING,
        created_at=now,
        ttl=ttl,
    )


def apply_tap(
    current: DualConfirmAction | None,
    *,
    action_id: str,
    kind: ActionKind,
    target_id: str,
    owner_id: str,
    partner: Partner,
    ttl: timedelta,
    now: datetime,
) -> TapResult:
    """Compute the next state of an action id after one partner taps."""
    if current is None:
        return TapResult(
            start_action(action_id, kind, target_id, owner_id, partner, ttl, now),
            TapTransition.STARTED,
        )

    if current.status == ActionStatus.CONFIRMED:
        return TapResult(current, TapTransition.ALREADY_CONFIRMED)

    if current.status == ActionStatus.EXPIRED or current.is_overdue(now):
        return TapResult(
            start_action(action_id, kind, target_id, owner_id, partner, ttl, now),
            TapTransition.RESTARTED,
        )

    field_name = partner.value
    if current.flag(partner):
        retracted = replace(current, **{field_name: False})
        if not retracted.partner1 and not retracted.partner2:
            return TapResult(None, TapTransition.DELETED)
        return TapResult(retracted, TapTransition.RETRACTED)

    tapped = replace(current, **{field_name: True})
    if tapped.partner1 and tapped.partner2:
        return TapResult(
            replace(tapped, status=ActionStatus.CONFIRMED), TapTransition.CONFIRMED,
        )
    return TapResult(tapped, TapTransition.TAPPED)


def expire_if_overdue(
    action: DualConfirmAction, now: datetime,
) -> DualConfirmAction | None:
    """Return the expired copy of an overdue pending action, else None.

    Confirmed and already-expired actions are never touched (sweep is idempotent).
    """
    if not action.is_overdue(now):
        return None
    return replace(action, status=ActionStatus.EXPIRED)
