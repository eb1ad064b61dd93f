"""Coordination Schemas — interests, dual confirmation, founding access, gate, co-sign.

Invariants:
    - Lounge drafts are 1..300 characters after stripping
    - Every response carries state, never internal ids of other viewers

Design Decisions:
    - .of() constructors map frozen core dataclasses to response models in one place
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from pairgate.core.cosign import MAX_DRAFT_LENGTH, LoungeResponse, PresenceRecord
from pairgate.core.domain_types import (
    ActionKind, ActionStatus, GateCheck, IntentOutcome, IntentTag,
    Partner, PresenceSlot,
)
from pairgate.core.dual_confirm import DualConfirmAction
from pairgate.core.messaging_gate import GateResult


class IntentRequest(BaseModel):
    intent: IntentTag


class IntentResponse(BaseModel):
    outcome: IntentOutcome
    intent: IntentTag | None
    live_count: int
    limit: int


class TapRequest(BaseModel):
    partner: Partner


class ActionResponse(BaseModel):
    id: str
    kind: ActionKind
    target_id: str
    partner1: bool
    partner2: bool
    status: ActionStatus
    created_at: datetime | None = None
    expires_at: datetime | None = None

    @classmethod
    def of(cls, action: DualConfirmAction) -> "ActionResponse":
        stored = action.status != ActionStatus.ABSENT
        return cls(
            id=action.id,
            kind=action.kind,
            target_id=action.target_id,
            partner1=action.partner1,
            partner2=action.partner2,
            status=action.status,
            created_at=action.created_at if stored else None,
            expires_at=action.deadline if stored else None,
        )


class SweepResponse(BaseModel):
    transitioned: list[str]


class RedeemRequest(BaseModel):
    token: str = Field("", max_length=64)


class RedeemResponse(BaseModel):
    redeemed: bool


class ActivationResponse(BaseModel):
    active: bool
    notice_pending: bool


class GateResponse(BaseModel):
    location_ok: bool
    mutual_interest: bool
    shared_context: bool
    dual_confirmed: bool
    unlocked: bool
    blocked_by: GateCheck | None
    message: str | None

    @classmethod
    def of(cls, result: GateResult) -> "GateResponse":
        return cls(
            location_ok=result.location_ok,
            mutual_interest=result.mutual_interest,
            shared_context=result.shared_context,
            dual_confirmed=result.dual_confirmed,
            unlocked=result.unlocked,
            blocked_by=result.blocked_by,
            message=result.message,
        )


class ToggleResponse(BaseModel):
    enabled: bool


class LoungeDraftRequest(BaseModel):
    text: str = Field(min_length=1, max_length=MAX_DRAFT_LENGTH)
    partner: Partner

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("text cannot be empty or whitespace")
        return v


class PresenceDraftRequest(BaseModel):
    slot: PresenceSlot
    partner: Partner


class RatifyRequest(BaseModel):
    partner: Partner


class DraftResponse(BaseModel):
    content: str
    drafted_by: Partner


class LoungeResponseModel(BaseModel):
    """Anonymous: attribution flags only, no viewer id, no timestamp."""
    id: str
    text: str
    partner1: bool
    partner2: bool

    @classmethod
    def of(cls, response: LoungeResponse) -> "LoungeResponseModel":
        return cls(
            id=response.id, text=response.text,
            partner1=response.partner1, partner2=response.partner2,
        )


class PresenceResponse(BaseModel):
    place_id: str
    slot: PresenceSlot
    partner1: bool
    partner2: bool

    @classmethod
    def of(cls, record: PresenceRecord) -> "PresenceResponse":
        return cls(
            place_id=record.place_id, slot=record.slot,
            partner1=record.partner1, partner2=record.partner2,
        )


class PresenceCounts(BaseModel):
    today: int
    tonight: int
