"""Messaging Routes — gate evaluation and bookmarks.

Invariants:
    - The gate response always names the first blocking check, never a reason
      tied to the candidate's private data
"""

from fastapi import APIRouter, Depends

from pairgate.schemas.coordination import GateResponse, ToggleResponse
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1/viewers", tags=["messaging"])


@router.get("/{viewer_id}/messaging/{candidate_id}", response_model=GateResponse)
async def can_message(
    viewer_id: str,
    candidate_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    return GateResponse.of(engine.can_message(viewer_id, candidate_id))


@router.post("/{viewer_id}/bookmarks/{candidate_id}", response_model=ToggleResponse)
async def toggle_bookmark(
    viewer_id: str,
    candidate_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    """Toggle a bookmark. Free-tier viewers get enabled=false with no change."""
    return ToggleResponse(enabled=engine.toggle_bookmark(viewer_id, candidate_id))
