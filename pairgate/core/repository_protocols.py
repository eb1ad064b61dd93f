"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Everything the engine consumes but does not compute is reached through a Protocol
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Reciprocity is an external capability: the engine never derives
      "they are interested in us" from its own ledger
    - Sync methods: every implementation is in-memory and non-blocking
"""

from datetime import datetime
from typing import Protocol

from pairgate.core.region_graph import Location


class Clock(Protocol):
    def __call__(self) -> datetime: ...


class TenurePredicate(Protocol):
    """Decides whether an account is old enough for founding access."""
    def __call__(self, account_created_at: datetime | None, now: datetime) -> bool: ...


class ReciprocityProvider(Protocol):
    """Source of the reciprocal half of mutual interest."""
    def has_reciprocated(self, candidate_id: str, viewer_id: str) -> bool: ...


class CandidateCatalog(ReciprocityProvider, Protocol):
    """Contract for the external profile catalog — implemented by shell."""
    def location_of(self, candidate_id: str) -> Location | None: ...
    def lounges_of(self, candidate_id: str) -> frozenset[str]: ...
    def events_of(self, candidate_id: str) -> frozenset[str]: ...
    def ages_of(self, candidate_id: str) -> tuple[int, int] | None: ...
