"""Discovery Routes — location resolution, candidate scope and event visibility.

Invariants:
    - Unresolved locations are returned as-is (region null), never rejected
    - Scope answers are booleans only: the candidate's location is never echoed
"""

from fastapi import APIRouter, Depends

from pairgate.core.scope_filter import EventListing
from pairgate.schemas.viewer import (
    EventQuery, LocationModel, LocationQuery, VisibilityResponse,
)
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1", tags=["discovery"])


@router.post("/locations/resolve", response_model=LocationModel)
async def resolve_location(
    body: LocationQuery, engine: CoordinationEngine = Depends(get_engine),
):
    return LocationModel.of(engine.resolve_location(body.city, body.state))


@router.get(
    "/viewers/{viewer_id}/candidates/{candidate_id}/scope",
    response_model=VisibilityResponse,
)
async def candidate_scope(
    viewer_id: str,
    candidate_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    """Whether the candidate falls inside the viewer's discovery scope."""
    return VisibilityResponse(
        visible=engine.candidate_in_scope(viewer_id, candidate_id),
    )


@router.post(
    "/viewers/{viewer_id}/events/visibility", response_model=VisibilityResponse,
)
async def event_visibility(
    viewer_id: str,
    body: EventQuery,
    engine: CoordinationEngine = Depends(get_engine),
):
    event = EventListing(
        event_id=body.event_id,
        event_type=body.event_type,
        location_label=body.location,
    )
    return VisibilityResponse(
        visible=engine.is_event_visible(event, viewer_id),
        labeled_travel=event.labeled_as_travel,
    )
