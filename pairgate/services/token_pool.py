"""Founding Token Pool — process-wide single-use invitation tokens with a hard cap.

Invariants:
    - Each token is consumed at most once
    - granted never exceeds cap and never decreases
    - redeem() on invalid input (empty, unknown, consumed, pool at cap) returns
      False and mutates nothing
    - Every check-then-mutate runs under one global lock

Design Decisions:
    - Owned by the CoordinationEngine (created at startup, never implicitly reset),
      not a module-level global
    - Redemption consumes the token; the grant is recorded only when access
      actually activates (record_grant)
"""

import logging
import threading
from typing import Iterable

from pairgate.core.domain_types import FOUNDING_CAP
from pairgate.core.errors import ErrorCode

logger = logging.getLogger(__name__)


class FoundingTokenPool:
    def __init__(self, tokens: Iterable[str], cap: int = FOUNDING_CAP):
        self._tokens = set(tokens)
        self._cap = cap
        self._granted = 0
        self._lock = threading.Lock()

    @property
    def cap(self) -> int:
        return self._cap

    @property
    def granted(self) -> int:
        with self._lock:
            return self._granted

    @property
    def remaining_tokens(self) -> int:
        with self._lock:
            return len(self._tokens)

    def redeem(self, token: str | None) -> bool:
        token = (token or "").strip()
        with self._lock:
            if not token or self._granted >= self._cap or token not in self._tokens:
                valid = False
            else:
                self._tokens.discard(token)
                valid = True
        if not valid:
            logger.info(
                "Founding token rejected",
                extra={"error_code": ErrorCode.INVALID_TOKEN.value},
            )
        return valid

    def record_grant(self) -> bool:
        """Count one activated grant. False once the cap is reached."""
        with self._lock:
            if self._granted >= self._cap:
                return False
            self._granted += 1
            return True
