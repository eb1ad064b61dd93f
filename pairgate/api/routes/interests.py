"""Interest Routes — express, switch or retract an intent toward a candidate.

Invariants:
    - A rejected expression leaves the ledger untouched and answers 409 CAP_REACHED
    - Re-posting the same intent retracts it (response intent is null)
"""

from fastapi import APIRouter, Depends

from pairgate.core.domain_types import IntentOutcome
from pairgate.core.errors import CapReachedError, ErrorContext
from pairgate.schemas.coordination import IntentRequest, IntentResponse
from pairgate.services.coordination_engine import CoordinationEngine, get_engine

router = APIRouter(prefix="/api/v1/viewers", tags=["interests"])


@router.post(
    "/{viewer_id}/interests/{candidate_id}", response_model=IntentResponse,
)
async def express_intent(
    viewer_id: str,
    candidate_id: str,
    body: IntentRequest,
    engine: CoordinationEngine = Depends(get_engine),
):
    outcome = engine.express_intent(viewer_id, candidate_id, body.intent)
    if outcome == IntentOutcome.CAP_REACHED:
        raise CapReachedError(
            engine.interest_limit,
            ErrorContext(viewer_id=viewer_id, candidate_id=candidate_id),
        )
    ledger = engine.viewer(viewer_id).ledger
    return IntentResponse(
        outcome=outcome,
        intent=ledger.intent_for(candidate_id),
        live_count=ledger.live_count,
        limit=engine.interest_limit,
    )
