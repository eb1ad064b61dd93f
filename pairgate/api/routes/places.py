"""Place Routes — likes, co-signed presence and fuzzy per-slot counts.

Invariants:
    - Counts never identify who is present, only how many couples per slot
"""

from fastapi import APIRouter, Depends, status

from pairgate.core.errors import DraftNotFoundError, ErrorContext
from pairgate.schemas.coordination import (
    DraftResponse, PresenceCounts, PresenceDraftRequest, PresenceResponse,
    RatifyRequest, ToggleResponse,
)
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1", tags=["places"])


@router.put(
    "/viewers/{viewer_id}/places/{place_id}/presence/draft",
    response_model=DraftResponse,
)
async def put_presence_draft(
    viewer_id: str,
    place_id: str,
    body: PresenceDraftRequest,
    engine: CoordinationEngine = Depends(get_engine),
):
    draft = engine.draft_presence(viewer_id, place_id, body.slot, body.partner)
    return DraftResponse(content=draft.content, drafted_by=draft.drafted_by)


@router.post(
    "/viewers/{viewer_id}/places/{place_id}/presence/ratify",
    response_model=PresenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def ratify_presence(
    viewer_id: str,
    place_id: str,
    body: RatifyRequest,
    engine: CoordinationEngine = Depends(get_engine),
):
    record = engine.ratify_presence(viewer_id, place_id, body.partner)
    if record is None:
        raise DraftNotFoundError(place_id, ErrorContext(viewer_id=viewer_id))
    return PresenceResponse.of(record)


@router.delete(
    "/viewers/{viewer_id}/places/{place_id}/presence/draft",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def discard_presence_draft(
    viewer_id: str,
    place_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    engine.discard_presence_draft(viewer_id, place_id)


@router.get("/places/{place_id}/presence", response_model=PresenceCounts)
async def presence_counts(
    place_id: str, engine: CoordinationEngine = Depends(get_engine),
):
    return PresenceCounts(**engine.presence_counts(place_id))


@router.post(
    "/viewers/{viewer_id}/places/{place_id}/like", response_model=ToggleResponse,
)
async def toggle_place_like(
    viewer_id: str,
    place_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    return ToggleResponse(enabled=engine.toggle_place_like(viewer_id, place_id))
