"""Dual-Confirmation Routes — partner taps, action state, manual sweeps.

Invariants:
    - Action ids and TTLs are derived server-side from (viewer, kind, target) and
      the viewer's effective tier; clients only say which partner tapped
    - A fully-retracted action answers with status "absent", never 404
"""

from fastapi import APIRouter, Depends

from pairgate.core.domain_types import ActionKind
from pairgate.schemas.coordination import ActionResponse, SweepResponse, TapRequest
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1", tags=["actions"])


@router.post(
    "/viewers/{viewer_id}/actions/{kind}/{target_id}/taps",
    response_model=ActionResponse,
)
async def tap(
    viewer_id: str,
    kind: ActionKind,
    target_id: str,
    body: TapRequest,
    engine: CoordinationEngine = Depends(get_engine),
):
    """One partner's tap. Two distinct partners confirm the action."""
    action = engine.tap_for_viewer(viewer_id, kind, target_id, body.partner)
    return ActionResponse.of(action)


@router.get(
    "/viewers/{viewer_id}/actions/{kind}/{target_id}",
    response_model=ActionResponse,
)
async def get_action(
    viewer_id: str,
    kind: ActionKind,
    target_id: str,
    engine: CoordinationEngine = Depends(get_engine),
):
    return ActionResponse.of(engine.get_action(viewer_id, kind, target_id))


@router.post("/sweeps", response_model=SweepResponse)
async def sweep(engine: CoordinationEngine = Depends(get_engine)):
    """Run one expiration pass now instead of waiting for the sweeper tick."""
    return SweepResponse(transitioned=engine.sweep_expirations())
