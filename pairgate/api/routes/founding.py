"""Founding Access Routes — token redemption, activation status, notice acknowledgement.

Invariants:
    - An invalid token answers redeemed=false with 200; no pool state changes
    - Activation is reported, never requested: the watcher decides
"""

from fastapi import APIRouter, Depends

from pairgate.schemas.coordination import ActivationResponse, RedeemRequest, RedeemResponse
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1/viewers", tags=["founding"])


@router.post("/{viewer_id}/founding/redeem", response_model=RedeemResponse)
async def redeem(
    viewer_id: str,
    body: RedeemRequest,
    engine: CoordinationEngine = Depends(get_engine),
):
    """Redeem an invitation token after signup. Marks the viewer eligible."""
    return RedeemResponse(redeemed=engine.redeem_for_viewer(viewer_id, body.token))


@router.get("/{viewer_id}/founding", response_model=ActivationResponse)
async def activation_status(
    viewer_id: str, engine: CoordinationEngine = Depends(get_engine),
):
    active = engine.check_founding_activation(viewer_id)
    return ActivationResponse(
        active=active,
        notice_pending=engine.founding_notice_pending(viewer_id),
    )


@router.post("/{viewer_id}/founding/acknowledge", response_model=ActivationResponse)
async def acknowledge(
    viewer_id: str, engine: CoordinationEngine = Depends(get_engine),
):
    engine.acknowledge_founding(viewer_id)
    return ActivationResponse(
        active=engine.viewer(viewer_id).founding.active,
        notice_pending=engine.founding_notice_pending(viewer_id),
    )
