"""Scope Filter — decides whether a candidate location is visible to a viewer.

Invariants:
    - Unresolved geography on either side is ALWAYS visible (fail-open)
    - The country boundary check precedes every scope rule
    - travel is country-wide; nearby is one adjacency hop; local is same region
      (plus one hop when the viewer's locale is sparse)
    - Virtual and travel events are always visible — labeled, never filtered
    - All functions are PURE: no IO, no state

Design Decisions:
    - Graph passed in (default DEFAULT_REGION_GRAPH): tests and deployments swap
      graphs without touching the rules
"""

from dataclasses import dataclass

from pairgate.core.domain_types import (
    AGE_TOLERANCE_YEARS, Density, DiscoveryScope, EventType,
)
from pairgate.core.region_graph import DEFAULT_REGION_GRAPH, Location, RegionGraph


@dataclass(frozen=True)
class EventListing:
    """A scheduled gathering as the catalog describes it."""
    event_id: str
    event_type: EventType
    location_label: str = ""

    @property
    def labeled_as_travel(self) -> bool:
        return self.event_type == EventType.TRAVEL


def in_scope(
    viewer: Location,
    candidate: Location,
    scope: DiscoveryScope,
    cross_border: bool = False,
    graph: RegionGraph = DEFAULT_REGION_GRAPH,
) -> bool:
    if not viewer.resolved or not candidate.resolved:
        return True

    if viewer.country != candidate.country and not cross_border:
        return False

    if scope == DiscoveryScope.TRAVEL:
        return True

    same_region = viewer.region == candidate.region
    neighbor = graph.are_adjacent(viewer.region, candidate.region)

    if scope == DiscoveryScope.LOCAL:
        if same_region:
            return True
        # Sparse locales auto-include one neighbor ring so the feed isn't empty
        return graph.density_of(viewer) == Density.SPARSE and neighbor

    if scope == DiscoveryScope.NEARBY:
        return same_region or neighbor

    return False


def is_event_visible(
    event: EventListing,
    viewer: Location,
    scope: DiscoveryScope,
    cross_border: bool = False,
    graph: RegionGraph = DEFAULT_REGION_GRAPH,
) -> bool:
    if event.event_type in (EventType.VIRTUAL, EventType.TRAVEL):
        return True
    event_location = graph.resolve_label(event.location_label)
    return in_scope(viewer, event_location, scope, cross_border, graph)


def is_age_compatible(
    viewer_ages: tuple[int, int] | None,
    candidate_ages: tuple[int, int] | None,
    tolerance: int = AGE_TOLERANCE_YEARS,
) -> bool:
    """Each partner within ±tolerance years of the other couple's corresponding partner.

    Missing ages on either side never filter (same fail-open rule as geography).
    """
    if not viewer_ages or not candidate_ages:
        return True
    return all(
        abs(mine - theirs) <= tolerance
        for mine, theirs in zip(viewer_ages, candidate_ages)
    )
