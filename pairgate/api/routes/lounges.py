"""Lounge Routes — membership and co-signed anonymous responses.

Invariants:
    - A draft becomes a public response only when the OTHER partner ratifies it
    - Public responses never carry a viewer id
"""

from fastapi import APIRouter, Depends, status

from pairgate.core.errors import DraftNotFoundError, ErrorContext
from pairgate.schemas.coordination import (
    DraftResponse, LoungeDraftRequest, LoungeResponseModel, RatifyRequest,
    ToggleResponse,
)
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1", tags=["lounges"])


@router.post(
    "/viewers/{viewer_id}/lounges/{lounge_id}/membership",
    response_model=ToggleResponse,
)
async def toggle_membership(
    viewer_id: str,
    lounge_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    return ToggleResponse(enabled=engine.toggle_lounge(viewer_id, lounge_id))


@router.put(
    "/viewers/{viewer_id}/lounges/{lounge_id}/draft",
    response_model=DraftResponse,
)
async def put_draft(
    viewer_id: str,
    lounge_id: str,
    body: LoungeDraftRequest,
    engine: CoordinationEngine = Depends(get_engine),
):
    """Write or overwrite the couple's pending response for this lounge."""
    draft = engine.draft_lounge_response(viewer_id, lounge_id, body.text, body.partner)
    return DraftResponse(content=draft.content, drafted_by=draft.drafted_by)


@router.post(
    "/viewers/{viewer_id}/lounges/{lounge_id}/draft/ratify",
    response_model=LoungeResponseModel,
    status_code=status.HTTP_201_CREATED,
)
async def ratify_draft(
    viewer_id: str,
    lounge_id: str,
    body: RatifyRequest,
    engine: CoordinationEngine = Depends(get_engine),
):
    response = engine.ratify_lounge_response(viewer_id, lounge_id, body.partner)
    if response is None:
        raise DraftNotFoundError(lounge_id, ErrorContext(viewer_id=viewer_id))
    return LoungeResponseModel.of(response)


@router.delete(
    "/viewers/{viewer_id}/lounges/{lounge_id}/draft",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def discard_draft(
    viewer_id: str,
    lounge_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    engine.discard_lounge_draft(viewer_id, lounge_id)


@router.get(
    "/lounges/{lounge_id}/responses", response_model=list[LoungeResponseModel],
)
async def list_responses(
    lounge_id: str, engine: CoordinationEngine = Depends(get_engine),
):
    return [LoungeResponseModel.of(r) for r in engine.lounge_responses(lounge_id)]
