"""Coordination Engine — the operation surface a hosting application calls.

Invariants:
    - Owns every process-wide store (actions, token pool, viewers, lounge board);
      created once at startup by init_engine() and never implicitly reset
    - Every mutation goes through the owning store's lock; the engine never holds
      an action lock while taking a viewer lock
    - The founding activation watcher runs after every tap and every intent
      expression, and fires at most once per viewer
    - has_coordinated latches on the first confirmed action a viewer owns and
      never resets
    - No operation raises for "not found": unknown viewers get defaults, unknown
      candidates fail open on location and closed on everything else

Design Decisions:
    - Facade over the pure core: rules live in core/, this module resolves inputs
      (clock, catalog, stores) around them
    - Clock injected (Clock protocol) so sweeps and TTLs are testable without sleeping
"""

import copy
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from pairgate.config import Settings
from pairgate.core.cosign import (
    LOUNGE_RESPONSE_VISIBILITY, Draft, LoungeResponse, PresenceRecord,
    presence_is_active, ratify_lounge_draft, ratify_presence_draft,
)
from pairgate.core.domain_types import (
    ActionKind, ActionStatus, DiscoveryScope, IntentOutcome, IntentTag,
    Partner, PresenceSlot, Tier,
)
from pairgate.core.dual_confirm import DualConfirmAction, absent_action, action_id_for
from pairgate.core.errors import EngineNotReadyError, ErrorCode
from pairgate.core.founding_access import (
    MinimumTenure, allow_any_tenure, check_activation_conditions,
)
from pairgate.core.interest_ledger import check_interest_capacity, has_mutual_interest
from pairgate.core.messaging_gate import GateInputs, GateResult, evaluate_gate
from pairgate.core.region_graph import DEFAULT_REGION_GRAPH, Location, RegionGraph
from pairgate.core.repository_protocols import CandidateCatalog, Clock, TenurePredicate
from pairgate.core.scope_filter import (
    EventListing, in_scope, is_age_compatible, is_event_visible,
)
from pairgate.core.tier_limits import (
    FREE_LIMITS, PREMIUM_LIMITS, TierLimits, limits_for,
)
from pairgate.core.viewer_state import ViewerState
from pairgate.services.action_store import ActionStore
from pairgate.services.candidate_directory import InMemoryCandidateDirectory
from pairgate.services.lounge_board import LoungeBoard
from pairgate.services.token_pool import FoundingTokenPool
from pairgate.services.viewer_registry import ViewerRegistry

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CoordinationEngine:
    """Consent-gated coordination: scope, interest, dual confirmation, founding access."""

    def __init__(
        self,
        *,
        graph: RegionGraph = DEFAULT_REGION_GRAPH,
        catalog: CandidateCatalog | None = None,
        founding_tokens: tuple[str, ...] = (),
        founding_cap: int = 30,
        free_limits: TierLimits = FREE_LIMITS,
        premium_limits: TierLimits = PREMIUM_LIMITS,
        tenure: TenurePredicate = allow_any_tenure,
        notice_timeout: timedelta = timedelta(seconds=8),
        lounge_visibility: timedelta = LOUNGE_RESPONSE_VISIBILITY,
        local_tz: tzinfo = timezone.utc,
        clock: Clock = utc_now,
    ):
        self.graph = graph
        self.catalog = catalog or InMemoryCandidateDirectory(graph)
        self.actions = ActionStore()
        self.tokens = FoundingTokenPool(founding_tokens, founding_cap)
        self.viewers = ViewerRegistry()
        self.lounges = LoungeBoard(lounge_visibility)
        self._free_limits = free_limits
        self._interest_limit = free_limits.interest_limit
        self._premium_limits = premium_limits
        self._tenure = tenure
        self._notice_timeout = notice_timeout
        self._local_tz = local_tz
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utc_now) -> "CoordinationEngine":
        graph = (
            RegionGraph.from_json_file(settings.region_graph_path)
            if settings.region_graph_path else DEFAULT_REGION_GRAPH
        )
        tenure = (
            MinimumTenure(settings.founding_tenure_days)
            if settings.founding_enforce_tenure else allow_any_tenure
        )
        return cls(
            graph=graph,
            founding_tokens=tuple(settings.founding_tokens),
            founding_cap=settings.founding_cap,
            free_limits=settings.free_limits(),
            premium_limits=settings.premium_limits(),
            tenure=tenure,
            notice_timeout=timedelta(seconds=settings.founding_notice_seconds),
            lounge_visibility=timedelta(days=settings.lounge_response_visibility_days),
            local_tz=ZoneInfo(settings.local_timezone),
            clock=clock,
        )

    def now(self) -> datetime:
        return self._clock()

    @property
    def interest_limit(self) -> int:
        return self._interest_limit

    # ─── Viewers ─────────────────────────────────────────────────

    def register_viewer(
        self,
        viewer_id: str,
        city: str,
        state: str,
        *,
        tier: Tier = Tier.FREE,
        partner_ages: tuple[int, int] | None = None,
        founding_token: str | None = None,
        account_created_at: datetime | None = None,
    ) -> ViewerState:
        """Signup: resolve location once, redeem an invitation token if given."""
        location = self.resolve_location(city, state)
        with self.viewers.locked(viewer_id) as viewer:
            viewer.location = location
            viewer.tier = tier
            viewer.partner_ages = partner_ages
            viewer.account_created_at = account_created_at or self.now()
            if founding_token and not viewer.founding.eligible:
                viewer.founding.eligible = self.redeem_founding_token(founding_token)
            logger.info(
                f"Viewer registered in {location.region or 'unresolved region'}",
                extra={"viewer_id": viewer_id},
            )
            return copy.deepcopy(viewer)

    def viewer(self, viewer_id: str) -> ViewerState:
        """Snapshot of a viewer's state, safe to read without the lock."""
        with self.viewers.locked(viewer_id) as viewer:
            return copy.deepcopy(viewer)

    def update_discovery(
        self, viewer_id: str, scope: DiscoveryScope, cross_border: bool = False,
    ) -> ViewerState:
        with self.viewers.locked(viewer_id) as viewer:
            viewer.scope = scope
            viewer.cross_border = cross_border
            return copy.deepcopy(viewer)

    def set_tier(self, viewer_id: str, tier: Tier) -> ViewerState:
        """Change billing tier. Pending actions keep the deadline they started with."""
        with self.viewers.locked(viewer_id) as viewer:
            viewer.tier = tier
            return copy.deepcopy(viewer)

    def limits_for_viewer(self, viewer_id: str) -> TierLimits:
        with self.viewers.locked(viewer_id) as viewer:
            tier = viewer.effective_tier
        return limits_for(tier, self._free_limits, self._premium_limits)

    # ─── Region Graph & Scope Filter ─────────────────────────────

    def resolve_location(self, city: str, state: str) -> Location:
        location = self.graph.resolve(city, state)
        if not location.resolved:
            logger.debug(
                f"Unresolved location {location.place_key!r}, visibility fails open",
                extra={"error_code": ErrorCode.UNRESOLVED_LOCATION.value},
            )
        return location

    def in_scope(
        self,
        viewer: Location,
        candidate: Location,
        scope: DiscoveryScope,
        cross_border: bool = False,
    ) -> bool:
        return in_scope(viewer, candidate, scope, cross_border, self.graph)

    def candidate_in_scope(self, viewer_id: str, candidate_id: str) -> bool:
        candidate_location = self.catalog.location_of(candidate_id)
        if candidate_location is None:
            return True
        with self.viewers.locked(viewer_id) as viewer:
            location, scope, cross_border = viewer.location, viewer.scope, viewer.cross_border
        return self.in_scope(location, candidate_location, scope, cross_border)

    def is_event_visible(self, event: EventListing, viewer_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            location, scope, cross_border = viewer.location, viewer.scope, viewer.cross_border
        return is_event_visible(event, location, scope, cross_border, self.graph)

    def is_age_compatible(self, viewer_id: str, candidate_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            ages = viewer.partner_ages
        return is_age_compatible(ages, self.catalog.ages_of(candidate_id))

    # ─── Interest Ledger ─────────────────────────────────────────

    def express_intent(
        self, viewer_id: str, candidate_id: str, intent: IntentTag,
    ) -> IntentOutcome:
        """Record, switch or retract an intent. Atomic per viewer."""
        with self.viewers.locked(viewer_id) as viewer:
            error = check_interest_capacity(
                viewer.ledger, candidate_id, intent, self._interest_limit,
            )
            if error:
                logger.info(
                    error["message"],
                    extra={"viewer_id": viewer_id, "error_code": error["error_code"]},
                )
                return IntentOutcome.CAP_REACHED
            viewer.ledger.toggle(candidate_id, intent)
            self.check_founding_activation(viewer_id)
        return IntentOutcome.ACCEPTED

    def has_mutual_interest(self, viewer_id: str, candidate_id: str) -> bool:
        reciprocated = self.catalog.has_reciprocated(candidate_id, viewer_id)
        with self.viewers.locked(viewer_id) as viewer:
            return has_mutual_interest(viewer.ledger, candidate_id, reciprocated)

    # ─── Dual Confirmation ───────────────────────────────────────

    def tap_confirm(
        self,
        action_id: str,
        kind: ActionKind,
        target_id: str,
        partner: Partner,
        ttl: timedelta,
        owner_id: str = "",
    ) -> DualConfirmAction:
        action = self.actions.tap(
            action_id, kind, target_id, partner, ttl, self.now(), owner_id,
        )
        if owner_id:
            if action.status == ActionStatus.CONFIRMED:
                self.record_coordination(owner_id)
            self.check_founding_activation(owner_id)
        return action

    def tap_for_viewer(
        self, viewer_id: str, kind: ActionKind, target_id: str, partner: Partner,
    ) -> DualConfirmAction:
        """Tap with the id and TTL derived from the viewer's current tier."""
        ttl = self.limits_for_viewer(viewer_id).ttl_for(kind)
        return self.tap_confirm(
            action_id_for(viewer_id, kind, target_id),
            kind, target_id, partner, ttl, owner_id=viewer_id,
        )

    def get_action(
        self, viewer_id: str, kind: ActionKind, target_id: str,
    ) -> DualConfirmAction:
        action_id = action_id_for(viewer_id, kind, target_id)
        action = self.actions.get(action_id)
        if action is None:
            return absent_action(action_id, kind, target_id, viewer_id, self.now())
        return action

    def sweep_expirations(self, now: datetime | None = None) -> list[str]:
        transitioned = self.actions.sweep(now or self.now())
        if transitioned:
            logger.info(
                f"Expired {len(transitioned)} pending action(s)",
                extra={"transitioned": len(transitioned)},
            )
        return transitioned

    # ─── Messaging Gate ──────────────────────────────────────────

    def can_message(self, viewer_id: str, candidate_id: str) -> GateResult:
        location_ok = self.candidate_in_scope(viewer_id, candidate_id)
        mutual = self.has_mutual_interest(viewer_id, candidate_id)
        attending = self.actions.confirmed_targets(viewer_id, ActionKind.RSVP)
        with self.viewers.locked(viewer_id) as viewer:
            shared = viewer.shares_context_with(
                self.catalog.lounges_of(candidate_id),
                self.catalog.events_of(candidate_id),
                attending,
            )
        action = self.get_action(viewer_id, ActionKind.MESSAGING, candidate_id)
        return evaluate_gate(GateInputs(
            location_ok=location_ok,
            mutual_interest=mutual,
            shared_context=shared,
            dual_confirmed=action.status == ActionStatus.CONFIRMED,
        ))

    # ─── Founding Access ─────────────────────────────────────────

    def redeem_founding_token(self, token: str | None) -> bool:
        return self.tokens.redeem(token)

    def redeem_for_viewer(self, viewer_id: str, token: str | None) -> bool:
        """Post-signup redemption. An already-eligible viewer consumes no token."""
        with self.viewers.locked(viewer_id) as viewer:
            if not viewer.founding.eligible:
                viewer.founding.eligible = self.redeem_founding_token(token)
            eligible = viewer.founding.eligible
        if eligible:
            self.check_founding_activation(viewer_id)
        return eligible

    def check_founding_activation(self, viewer_id: str) -> bool:
        """Activation watcher. Returns whether founding access is active."""
        with self.viewers.locked(viewer_id) as viewer:
            if not viewer.founding.watching:
                return viewer.founding.active
            now = self.now()
            missing = check_activation_conditions(
                has_confirmed_action=self.actions.has_confirmed(viewer_id),
                has_live_interest=viewer.ledger.has_live_entry,
                tenure_ok=self._tenure(viewer.account_created_at, now),
            )
            if missing:
                return False
            if not self.tokens.record_grant():
                logger.warning(
                    "Founding cap reached before activation",
                    extra={"viewer_id": viewer_id, "error_code": ErrorCode.CAP_REACHED.value},
                )
                return False
            viewer.founding.activate(now)
            logger.info("Founding access activated", extra={"viewer_id": viewer_id})
            return True

    def founding_notice_pending(self, viewer_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            return viewer.founding.notice_pending(self.now(), self._notice_timeout)

    def acknowledge_founding(self, viewer_id: str) -> None:
        with self.viewers.locked(viewer_id) as viewer:
            if viewer.founding.active:
                viewer.founding.acknowledged = True

    # ─── Coordination Tracker ────────────────────────────────────

    def record_coordination(self, viewer_id: str) -> bool:
        """Latch has_coordinated on the first confirmed action. Returns True on the flip."""
        with self.viewers.locked(viewer_id) as viewer:
            if viewer.has_coordinated:
                return False
            viewer.has_coordinated = True
        logger.info("First coordination confirmed", extra={"viewer_id": viewer_id})
        return True

    def upgrade_prompt_due(self, viewer_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            return viewer.upgrade_prompt_due

    def dismiss_upgrade_prompt(self, viewer_id: str) -> None:
        with self.viewers.locked(viewer_id) as viewer:
            viewer.upgrade_prompt_dismissed = True

    # ─── Lounges & Bookmarks ─────────────────────────────────────

    def toggle_lounge(self, viewer_id: str, lounge_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            return viewer.toggle_lounge(lounge_id)

    def toggle_bookmark(self, viewer_id: str, candidate_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            return viewer.toggle_bookmark(candidate_id)

    def toggle_place_like(self, viewer_id: str, place_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            return viewer.toggle_place_like(place_id)

    # ─── Draft / Co-sign ─────────────────────────────────────────

    def draft_lounge_response(
        self, viewer_id: str, lounge_id: str, text: str, partner: Partner,
    ) -> Draft:
        draft = Draft(content=text, drafted_by=partner, created_at=self.now())
        with self.viewers.locked(viewer_id) as viewer:
            viewer.lounge_drafts[lounge_id] = draft
        return draft

    def ratify_lounge_response(
        self, viewer_id: str, lounge_id: str, partner: Partner,
    ) -> LoungeResponse | None:
        with self.viewers.locked(viewer_id) as viewer:
            draft = viewer.lounge_drafts.pop(lounge_id, None)
        if draft is None:
            return None
        return self.lounges.post(ratify_lounge_draft(draft, lounge_id, partner, self.now()))

    def discard_lounge_draft(self, viewer_id: str, lounge_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            return viewer.lounge_drafts.pop(lounge_id, None) is not None

    def lounge_responses(self, lounge_id: str) -> list[LoungeResponse]:
        return self.lounges.visible(lounge_id, self.now())

    def draft_presence(
        self, viewer_id: str, place_id: str, slot: PresenceSlot, partner: Partner,
    ) -> Draft:
        draft = Draft(content=slot.value, drafted_by=partner, created_at=self.now())
        with self.viewers.locked(viewer_id) as viewer:
            viewer.presence_drafts[place_id] = draft
        return draft

    def ratify_presence(
        self, viewer_id: str, place_id: str, partner: Partner,
    ) -> PresenceRecord | None:
        with self.viewers.locked(viewer_id) as viewer:
            draft = viewer.presence_drafts.pop(place_id, None)
            if draft is None:
                return None
            record = ratify_presence_draft(draft, place_id, partner, self.now())
            viewer.presence[place_id] = record
            return record

    def discard_presence_draft(self, viewer_id: str, place_id: str) -> bool:
        with self.viewers.locked(viewer_id) as viewer:
            return viewer.presence_drafts.pop(place_id, None) is not None

    def presence_counts(self, place_id: str, now: datetime | None = None) -> dict[str, int]:
        """Fuzzy aggregate of active presence by slot — never who, only how many.

        Slot boundaries are evaluated in the configured local timezone.
        """
        now = now or self.now()
        counts = {slot.value: 0 for slot in PresenceSlot}
        for state in self.viewers.all_states():
            with self.viewers.locked(state.viewer_id) as viewer:
                record = viewer.presence.get(place_id)
            if record is not None and presence_is_active(record, now, self._local_tz):
                counts[record.slot.value] += 1
        return counts


# Singleton (initialized on startup)
engine: CoordinationEngine | None = None


def init_engine(settings: Settings, clock: Clock = utc_now) -> CoordinationEngine:
    global engine
    engine = CoordinationEngine.from_settings(settings, clock)
    return engine


def get_engine() -> CoordinationEngine:
    """FastAPI dependency for the process-wide engine."""
    if engine is None:
        raise EngineNotReadyError()
    return engine
