"""Interest Ledger — at most one outstanding intent per candidate, capped per viewer.

Invariants:
    - live_count never exceeds the limit, under any sequence of expressions/retractions
    - The limit is identical for every tier (tiers extend time, never volume)
    - Re-expressing the same intent retracts it; retraction always succeeds
    - Switching the intent on an existing entry does not consume a slot
    - Mutuality needs an outstanding entry AND an external reciprocity signal

Design Decisions:
    - check_interest_capacity is PURE and returns an error dict (None on success);
      the shell applies toggle() under the viewer lock, same split as gate checks
"""

from dataclasses import dataclass, field

from pairgate.core.domain_types import INTEREST_LIMIT, IntentTag


@dataclass
class InterestLedger:
    """Per-viewer outbound interests — candidate id → intent."""

    entries: dict[str, IntentTag] = field(default_factory=dict)

    @property
    def live_count(self) -> int:
        return len(self.entries)

    @property
    def has_live_entry(self) -> bool:
        return bool(self.entries)

    def intent_for(self, candidate_id: str) -> IntentTag | None:
        return self.entries.get(candidate_id)

    def is_retraction(self, candidate_id: str, intent: IntentTag) -> bool:
        return self.entries.get(candidate_id) == intent

    def toggle(self, candidate_id: str, intent: IntentTag) -> bool:
        """Apply an expression. Returns True if it was a retraction.

        Callers must run check_interest_capacity first.
        """
        if self.is_retraction(candidate_id, intent):
            del self.entries[candidate_id]
            return True
        self.entries[candidate_id] = intent
        return False


def check_interest_capacity(
    ledger: InterestLedger,
    candidate_id: str,
    intent: IntentTag,
    limit: int = INTEREST_LIMIT,
) -> dict | None:
    """Reject a NEW entry once the ledger holds `limit` live entries."""
    if ledger.is_retraction(candidate_id, intent):
        return None
    if candidate_id in ledger.entries:
        return None
    if ledger.live_count >= limit:
        return {
            "status": "error",
            "error_code": "CAP_REACHED",
            "message": (
                f"Interest limit reached ({ledger.live_count}/{limit}). "
                f"Retract an interest to express a new one."
            ),
            "limit": limit,
        }
    return None


def has_mutual_interest(
    ledger: InterestLedger, candidate_id: str, reciprocated: bool,
) -> bool:
    return candidate_id in ledger.entries and reciprocated
