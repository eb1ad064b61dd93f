"""Viewer & Discovery Schemas — Pydantic models for signup, scope and catalog input.

Invariants:
    - city/state are stripped; empty strings are allowed (location resolves as unresolved)
    - partner_ages, when given, has exactly two entries in 18..120
    - founding_token is never echoed back in any response

Design Decisions:
    - Enums from core/domain_types used directly as field types: Pydantic validates them
"""

from pydantic import BaseModel, Field, field_validator

from pairgate.core.domain_types import DiscoveryScope, EventType, Tier
from pairgate.core.region_graph import Location
from pairgate.core.viewer_state import ViewerState


class LocationModel(BaseModel):
    city: str
    state: str
    region: str | None
    country: str

    @classmethod
    def of(cls, location: Location) -> "LocationModel":
        return cls(
            city=location.city, state=location.state,
            region=location.region, country=location.country,
        )


class LocationQuery(BaseModel):
    city: str = Field(max_length=120)
    state: str = Field(max_length=60)

    @field_validator("city", "state")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class ViewerRegister(LocationQuery):
    """Signup — location, tier, optional ages and invitation token."""
    tier: Tier = Tier.FREE
    partner_ages: tuple[int, int] | None = None
    founding_token: str | None = Field(None, max_length=64)

    @field_validator("partner_ages")
    @classmethod
    def check_ages(cls, v: tuple[int, int] | None) -> tuple[int, int] | None:
        if v is not None and any(age < 18 or age > 120 for age in v):
            raise ValueError("partner ages must be between 18 and 120")
        return v


class DiscoveryUpdate(BaseModel):
    scope: DiscoveryScope
    cross_border: bool = False


class TierUpdate(BaseModel):
    tier: Tier


class FoundingStatus(BaseModel):
    eligible: bool
    active: bool
    acknowledged: bool


class ViewerResponse(BaseModel):
    viewer_id: str
    location: LocationModel
    scope: DiscoveryScope
    cross_border: bool
    tier: Tier
    effective_tier: Tier
    interests: dict[str, str]
    lounges_joined: list[str]
    bookmarks: list[str]
    place_likes: list[str]
    has_coordinated: bool
    founding: FoundingStatus

    @classmethod
    def of(cls, state: ViewerState) -> "ViewerResponse":
        return cls(
            viewer_id=state.viewer_id,
            location=LocationModel.of(state.location),
            scope=state.scope,
            cross_border=state.cross_border,
            tier=state.tier,
            effective_tier=state.effective_tier,
            interests={k: v.value for k, v in state.ledger.entries.items()},
            lounges_joined=sorted(state.lounges_joined),
            bookmarks=sorted(state.bookmarks),
            place_likes=sorted(state.place_likes),
            has_coordinated=state.has_coordinated,
            founding=FoundingStatus(
                eligible=state.founding.eligible,
                active=state.founding.active,
                acknowledged=state.founding.acknowledged,
            ),
        )


class UpgradePrompt(BaseModel):
    due: bool


class CandidateUpsert(BaseModel):
    """Catalog entry pushed by the hosting application."""
    location: str = Field("", max_length=200)
    lounges: list[str] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list)
    reciprocated_viewers: list[str] = Field(default_factory=list)
    partner_ages: tuple[int, int] | None = None


class EventQuery(BaseModel):
    event_id: str
    event_type: EventType
    location: str = Field("", max_length=200)


class VisibilityResponse(BaseModel):
    visible: bool
    labeled_travel: bool = False
