"""Viewer Routes — signup, discovery settings, tier, upgrade prompt, and catalog upserts.

Invariants:
    - Routes never contain business logic (delegate to CoordinationEngine)
    - The upgrade prompt only surfaces after the first confirmed coordination
    - Registration redeems an invitation token silently: the response never says
      whether a token was valid beyond the founding.eligible flag
"""

from fastapi import APIRouter, Depends, status

from pairgate.schemas.viewer import (
    CandidateUpsert, DiscoveryUpdate, TierUpdate, UpgradePrompt, ViewerRegister,
    ViewerResponse,
)
from pairgate.services.candidate_directory import CandidateProfile
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1", tags=["viewers"])


@router.post(
    "/viewers/{viewer_id}", response_model=ViewerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_viewer(
    viewer_id: str,
    body: ViewerRegister,
    engine: CoordinationEngine = Depends(get_engine),
):
    """Create or re-register a couple account."""
    state = engine.register_viewer(
        viewer_id, body.city, body.state,
        tier=body.tier,
        partner_ages=body.partner_ages,
        founding_token=body.founding_token,
    )
    return ViewerResponse.of(state)


@router.get("/viewers/{viewer_id}", response_model=ViewerResponse)
async def get_viewer(
    viewer_id: str, engine: CoordinationEngine = Depends(get_engine),
):
    return ViewerResponse.of(engine.viewer(viewer_id))


@router.put("/viewers/{viewer_id}/discovery", response_model=ViewerResponse)
async def update_discovery(
    viewer_id: str,
    body: DiscoveryUpdate,
    engine: CoordinationEngine = Depends(get_engine),
):
    return ViewerResponse.of(
        engine.update_discovery(viewer_id, body.scope, body.cross_border),
    )


@router.put("/viewers/{viewer_id}/tier", response_model=ViewerResponse)
async def update_tier(
    viewer_id: str,
    body: TierUpdate,
    engine: CoordinationEngine = Depends(get_engine),
):
    return ViewerResponse.of(engine.set_tier(viewer_id, body.tier))


@router.get("/viewers/{viewer_id}/upgrade-prompt", response_model=UpgradePrompt)
async def get_upgrade_prompt(
    viewer_id: str, engine: CoordinationEngine = Depends(get_engine),
):
    return UpgradePrompt(due=engine.upgrade_prompt_due(viewer_id))


@router.delete(
    "/viewers/{viewer_id}/upgrade-prompt", status_code=status.HTTP_204_NO_CONTENT,
)
async def dismiss_upgrade_prompt(
    viewer_id: str, engine: CoordinationEngine = Depends(get_engine),
):
    engine.dismiss_upgrade_prompt(viewer_id)


@router.put("/candidates/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def upsert_candidate(
    candidate_id: str,
    body: CandidateUpsert,
    engine: CoordinationEngine = Depends(get_engine),
):
    """Push a catalog profile (location, memberships, reciprocity) into the directory."""
    engine.catalog.upsert(CandidateProfile(
        candidate_id=candidate_id,
        location_label=body.location,
        lounges=frozenset(body.lounges),
        events=frozenset(body.events),
        reciprocated_viewers=frozenset(body.reciprocated_viewers),
        partner_ages=body.partner_ages,
    ))
