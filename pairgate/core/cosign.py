"""Draft / Co-sign — one partner proposes, the other ratifies.

Used by lounge responses (content = response text) and place presence
(content = time slot). Ratification materializes a durable record stamped
with both partners' attribution and clears the draft.

Invariants:
    - Attribution flags = drafter OR ratifier; identity is not hard-enforced
    - A missing draft ratifies to nothing (never an error)
    - Presence expiry is slot-boundary based, not TTL based, in the place's
      local time: 'today' ends at 18:00 on the day it was posted, 'tonight'
      ends at the next 03:00 and is dark between 03:00 and 18:00
    - Lounge responses are listed only while younger than the visibility window
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from uuid import uuid4

from pairgate.core.domain_types import Partner, PresenceSlot


TODAY_ENDS_AT_HOUR = 18
TONIGHT_ENDS_AT_HOUR = 3
LOUNGE_RESPONSE_VISIBILITY = timedelta(days=7)
MAX_DRAFT_LENGTH = 300


@dataclass(frozen=True)
class Draft:
    content: str
    drafted_by: Partner
    created_at: datetime


@dataclass(frozen=True)
class Attribution:
    partner1: bool
    partner2: bool


@dataclass(frozen=True)
class LoungeResponse:
    id: str
    lounge_id: str
    text: str
    partner1: bool
    partner2: bool
    created_at: datetime


@dataclass(frozen=True)
class PresenceRecord:
    place_id: str
    slot: PresenceSlot
    partner1: bool
    partner2: bool
    created_at: datetime


def attribution_for(draft: Draft, ratified_by: Partner) -> Attribution:
    return Attribution(
        partner1=Partner.PARTNER1 in (draft.drafted_by, ratified_by),
        partner2=Partner.PARTNER2 in (draft.drafted_by, ratified_by),
    )


def ratify_lounge_draft(
    draft: Draft, lounge_id: str, ratified_by: Partner, now: datetime,
) -> LoungeResponse:
    who = attribution_for(draft, ratified_by)
    return LoungeResponse(
        id=f"r{uuid4().hex[:12]}",
        lounge_id=lounge_id,
        text=draft.content,
        partner1=who.partner1,
        partner2=who.partner2,
        created_at=now,
    )


def ratify_presence_draft(
    draft: Draft, place_id: str, ratified_by: Partner, now: datetime,
) -> PresenceRecord:
    who = attribution_for(draft, ratified_by)
    return PresenceRecord(
        place_id=place_id,
        slot=PresenceSlot(draft.content),
        partner1=who.partner1,
        partner2=who.partner2,
        created_at=now,
    )


def presence_ends_at(record: PresenceRecord, tz: tzinfo = timezone.utc) -> datetime:
    """Slot boundary in local time: 18:00 on the creation day for 'today',
    the next 03:00 for 'tonight'."""
    created = record.created_at.astimezone(tz)
    if record.slot == PresenceSlot.TODAY:
        return created.replace(hour=TODAY_ENDS_AT_HOUR, minute=0, second=0, microsecond=0)
    end = created.replace(hour=TONIGHT_ENDS_AT_HOUR, minute=0, second=0, microsecond=0)
    if created.hour >= TONIGHT_ENDS_AT_HOUR:
        end += timedelta(days=1)
    return end


def presence_is_active(
    record: PresenceRecord, now: datetime, tz: tzinfo = timezone.utc,
) -> bool:
    """Wall-clock slot rule, evaluated in the place's timezone `tz`.

    A record is over once its slot boundary passes. 'tonight' is also dark
    during the day it was posted, until evening starts.
    """
    local_now = now.astimezone(tz)
    if local_now >= presence_ends_at(record, tz):
        return False
    if record.slot == PresenceSlot.TONIGHT:
        return not (TONIGHT_ENDS_AT_HOUR <= local_now.hour < TODAY_ENDS_AT_HOUR)
    return True


def response_is_visible(
    response: LoungeResponse,
    now: datetime,
    window: timedelta = LOUNGE_RESPONSE_VISIBILITY,
) -> bool:
    return now - response.created_at < window
