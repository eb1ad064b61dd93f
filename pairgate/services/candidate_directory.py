"""Candidate Directory — in-memory stand-in for the external profile catalog.

Implements the CandidateCatalog protocol from core/repository_protocols.py.
Reciprocity comes from catalog data (which viewers a candidate has shown
interest in), not from the engine's own ledger.
"""

import threading
from dataclasses import dataclass, field

from pairgate.core.region_graph import DEFAULT_REGION_GRAPH, Location, RegionGraph


@dataclass(frozen=True)
class CandidateProfile:
    candidate_id: str
    location_label: str = ""
    lounges: frozenset[str] = field(default_factory=frozenset)
    events: frozenset[str] = field(default_factory=frozenset)
    reciprocated_viewers: frozenset[str] = field(default_factory=frozenset)
    partner_ages: tuple[int, int] | None = None


class InMemoryCandidateDirectory:
    def __init__(self, graph: RegionGraph = DEFAULT_REGION_GRAPH):
        self._graph = graph
        self._profiles: dict[str, CandidateProfile] = {}
        self._lock = threading.Lock()

    def upsert(self, profile: CandidateProfile) -> CandidateProfile:
        with self._lock:
            self._profiles[profile.candidate_id] = profile
        return profile

    def get(self, candidate_id: str) -> CandidateProfile | None:
        with self._lock:
            return self._profiles.get(candidate_id)

    def location_of(self, candidate_id: str) -> Location | None:
        profile = self.get(candidate_id)
        if profile is None:
            return None
        return self._graph.resolve_label(profile.location_label)

    def lounges_of(self, candidate_id: str) -> frozenset[str]:
        profile = self.get(candidate_id)
        return profile.lounges if profile else frozenset()

    def events_of(self, candidate_id: str) -> frozenset[str]:
        profile = self.get(candidate_id)
        return profile.events if profile else frozenset()

    def ages_of(self, candidate_id: str) -> tuple[int, int] | None:
        profile = self.get(candidate_id)
        return profile.partner_ages if profile else None

    def has_reciprocated(self, candidate_id: str, viewer_id: str) -> bool:
        profile = self.get(candidate_id)
        return profile is not None and viewer_id in profile.reciprocated_viewers
