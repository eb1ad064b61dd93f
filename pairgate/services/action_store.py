"""Action Store — single-writer owner of every dual-confirmation action.

Invariants:
    - Every mutation of an action id (tap, retract, sweep) runs under that id's lock
    - Two taps on the same id are applied as serialized read-modify-write; both
      flags survive regardless of arrival order
    - Sweeps touch only overdue pending actions — idempotent
    - Missing ids read as an ABSENT placeholder, never raise
    - An id lock lives only while its action exists or a caller holds or waits on it

Design Decisions:
    - One threading.Lock per action id plus one guard lock for the dicts; the guard
      is never held while waiting for an id lock (no lock-order cycles)
    - Id locks are reference-counted under the guard, so a deleted id never
      hands a stale lock to a later caller
    - Transitions delegated to core/dual_confirm.py — this module only serializes
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pairgate.core.domain_types import ActionKind, ActionStatus, Partner
from pairgate.core.dual_confirm import (
    DualConfirmAction, TapTransition,
    absent_action, apply_tap, expire_if_overdue,
)
from pairgate.core.errors import ErrorCode

logger = logging.getLogger(__name__)


@dataclass
class _IdLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class ActionStore:
    """In-memory dual-confirmation actions keyed by composite action id."""

    def __init__(self):
        self._actions: dict[str, DualConfirmAction] = {}
        self._locks: dict[str, _IdLock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def _locked(self, action_id: str):
        with self._guard:
            entry = self._locks.get(action_id)
            if entry is None:
                entry = self._locks[action_id] = _IdLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0 and action_id not in self._actions:
                    del self._locks[action_id]

    def _read(self, action_id: str) -> DualConfirmAction | None:
        with self._guard:
            return self._actions.get(action_id)

    def _write(self, action_id: str, action: DualConfirmAction | None) -> None:
        with self._guard:
            if action is None:
                self._actions.pop(action_id, None)
            else:
                self._actions[action_id] = action

    def get(self, action_id: str) -> DualConfirmAction | None:
        return self._read(action_id)

    def tap(
        self,
        action_id: str,
        kind: ActionKind,
        target_id: str,
        partner: Partner,
        ttl: timedelta,
        now: datetime,
        owner_id: str = "",
    ) -> DualConfirmAction:
        """Apply one partner tap. Returns the resulting state (ABSENT if deleted)."""
        with self._locked(action_id):
            result = apply_tap(
                self._read(action_id),
                action_id=action_id, kind=kind, target_id=target_id,
                owner_id=owner_id, partner=partner, ttl=ttl, now=now,
            )
            self._write(action_id, result.action)

        if result.transition == TapTransition.RESTARTED:
            logger.info(
                f"Tap on expired action {action_id} started a fresh instance",
                extra={
                    "action_id": action_id, "kind": kind.value,
                    "error_code": ErrorCode.ACTION_EXPIRED.value,
                },
            )
        else:
            logger.debug(
                f"Action {action_id} {result.transition.value}",
                extra={"action_id": action_id, "kind": kind.value},
            )
        if result.action is None:
            return absent_action(action_id, kind, target_id, owner_id, now)
        return result.action

    def sweep(self, now: datetime) -> list[str]:
        """Expire every pending action past its deadline. Returns transitioned ids."""
        with self._guard:
            candidates = [
                action_id for action_id, action in self._actions.items()
                if action.status == ActionStatus.PENDING
            ]

        transitioned = []
        for action_id in candidates:
            with self._locked(action_id):
                current = self._read(action_id)
                expired = expire_if_overdue(current, now) if current else None
                if expired is None:
                    continue
                self._write(action_id, expired)
            transitioned.append(action_id)
        return transitioned

    def owned_by(self, owner_id: str) -> list[DualConfirmAction]:
        with self._guard:
            return [a for a in self._actions.values() if a.owner_id == owner_id]

    def has_confirmed(self, owner_id: str) -> bool:
        return any(
            a.status == ActionStatus.CONFIRMED for a in self.owned_by(owner_id)
        )

    def confirmed_targets(self, owner_id: str, kind: ActionKind) -> set[str]:
        return {
            a.target_id for a in self.owned_by(owner_id)
            if a.kind == kind and a.status == ActionStatus.CONFIRMED
        }

    def __len__(self) -> int:
        with self._guard:
            return len(self._actions)
