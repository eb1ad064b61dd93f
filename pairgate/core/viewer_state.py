"""Viewer State — in-memory per-couple state the engine reads and mutates.

Invariants:
    - One ViewerState per viewer id; it is only mutated under that viewer's lock
    - A never-registered viewer gets a default state: unresolved location
      (fail-open), local scope, free tier, empty ledger
    - Drafts are keyed by lounge / place; at most one draft per key
    - Bookmarks are only accepted while extended windows are in effect
    - has_coordinated only goes false → true; the upgrade prompt needs it, a
      free effective tier and no prior dismissal
    - Event attendance is not stored here: it is read from confirmed RSVP actions

Design Decisions:
    - Dataclass with computed properties: pure, deterministic, testable without mocks
    - Durable lounge responses live on the shared lounge board, not here —
      they are visible to every member of the lounge
"""

from dataclasses import dataclass, field
from datetime import datetime

from pairgate.core.cosign import Draft, PresenceRecord
from pairgate.core.domain_types import DiscoveryScope, Tier
from pairgate.core.founding_access import FoundingAccessState
from pairgate.core.interest_ledger import InterestLedger
from pairgate.core.region_graph import Location
from pairgate.core.tier_limits import effective_tier, has_extended_windows


def unresolved_location() -> Location:
    return Location(city="", state="", region=None)


@dataclass
class ViewerState:
    """Per-viewer coordination state — pure dataclass, no IO."""

    viewer_id: str

    # === Discovery ===
    location: Location = field(default_factory=unresolved_location)
    scope: DiscoveryScope = DiscoveryScope.LOCAL
    cross_border: bool = False
    partner_ages: tuple[int, int] | None = None

    # === Account ===
    tier: Tier = Tier.FREE
    account_created_at: datetime | None = None
    founding: FoundingAccessState = field(default_factory=FoundingAccessState)

    # === Outbound interest ===
    ledger: InterestLedger = field(default_factory=InterestLedger)

    # === Shared context ===
    lounges_joined: set[str] = field(default_factory=set)

    # === Saved conversations and places ===
    bookmarks: set[str] = field(default_factory=set)
    place_likes: set[str] = field(default_factory=set)

    # === Coordination tracker ===
    has_coordinated: bool = False
    upgrade_prompt_dismissed: bool = False

    # === Co-sign drafts and presence ===
    lounge_drafts: dict[str, Draft] = field(default_factory=dict)
    presence_drafts: dict[str, Draft] = field(default_factory=dict)
    presence: dict[str, PresenceRecord] = field(default_factory=dict)

    @property
    def effective_tier(self) -> Tier:
        return effective_tier(self.tier, self.founding.active)

    @property
    def extended_windows(self) -> bool:
        return has_extended_windows(self.effective_tier)

    @property
    def upgrade_prompt_due(self) -> bool:
        return (
            self.has_coordinated
            and self.effective_tier == Tier.FREE
            and not self.upgrade_prompt_dismissed
        )

    def toggle_lounge(self, lounge_id: str) -> bool:
        """Join or leave a lounge. Returns the new membership."""
        if lounge_id in self.lounges_joined:
            self.lounges_joined.discard(lounge_id)
            return False
        self.lounges_joined.add(lounge_id)
        return True

    def toggle_bookmark(self, candidate_id: str) -> bool:
        """Save or unsave a conversation. Silently ignored without extended windows."""
        if not self.extended_windows:
            return candidate_id in self.bookmarks
        if candidate_id in self.bookmarks:
            self.bookmarks.discard(candidate_id)
            return False
        self.bookmarks.add(candidate_id)
        return True

    def toggle_place_like(self, place_id: str) -> bool:
        if place_id in self.place_likes:
            self.place_likes.discard(place_id)
            return False
        self.place_likes.add(place_id)
        return True

    def shares_context_with(
        self,
        lounges: frozenset[str],
        events: frozenset[str],
        attending: set[str],
    ) -> bool:
        """Co-membership in a lounge, or in an event we confirmed attendance for."""
        return bool(self.lounges_joined & lounges or attending & events)
