"""Draft / Co-sign — tests for ratification and presence/response visibility.

Tests cover:
    - attribution = drafter OR ratifier
    - ratified lounge responses carry text and an opaque id
    - ratified presence carries the drafted slot
    - 'today' ends at 18:00, 'tonight' is over between 03:00 and 18:00
    - expired presence stays expired on the following day
    - slot boundaries are read in the place's timezone
    - lounge responses hidden after the visibility window
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from pairgate.core.cosign import (
    LOUNGE_RESPONSE_VISIBILITY, Draft, attribution_for, presence_ends_at,
    presence_is_active,
    ratify_lounge_draft, ratify_presence_draft, response_is_visible,
)
from pairgate.core.domain_types import Partner, PresenceSlot


def _at(hour, day=14):
    return datetime(2025, 6, day, hour, 0, tzinfo=timezone.utc)


def _presence(slot, created_at):
    draft = Draft(content=slot.value, drafted_by=Partner.PARTNER1, created_at=created_at)
    return ratify_presence_draft(draft, "p1", Partner.PARTNER2, created_at)


# ─── ratification ────────────────────────────────────────────────

def test_attribution_drafter_and_ratifier():
    draft = Draft("hi", Partner.PARTNER1, _at(10))
    both = attribution_for(draft, Partner.PARTNER2)
    assert both.partner1 and both.partner2
    same = attribution_for(draft, Partner.PARTNER1)
    assert same.partner1 and not same.partner2


def test_ratify_lounge_draft():
    draft = Draft("We love board games", Partner.PARTNER2, _at(10))
    response = ratify_lounge_draft(draft, "lounge-1", Partner.PARTNER1, _at(11))
    assert response.text == "We love board games"
    assert response.lounge_id == "lounge-1"
    assert response.id.startswith("r")
    assert response.partner1 and response.partner2
    assert response.created_at == _at(11)


def test_ratify_presence_draft_keeps_slot():
    record = _presence(PresenceSlot.TONIGHT, _at(20))
    assert record.slot == PresenceSlot.TONIGHT
    assert record.place_id == "p1"


# ─── presence expiry ─────────────────────────────────────────────

def test_today_active_before_six_pm():
    record = _presence(PresenceSlot.TODAY, _at(9))
    assert presence_is_active(record, _at(17))
    assert not presence_is_active(record, _at(18))


def test_tonight_active_through_early_morning():
    record = _presence(PresenceSlot.TONIGHT, _at(19))
    assert presence_is_active(record, _at(23))
    assert presence_is_active(record, _at(2, day=15))
    assert not presence_is_active(record, _at(3, day=15))


def test_tonight_inactive_during_the_day():
    record = _presence(PresenceSlot.TONIGHT, _at(10))
    assert not presence_is_active(record, _at(12))


def test_today_stays_expired_next_morning():
    record = _presence(PresenceSlot.TODAY, _at(17))
    assert not presence_is_active(record, _at(9, day=15))


def test_tonight_stays_expired_next_evening():
    record = _presence(PresenceSlot.TONIGHT, _at(22))
    assert not presence_is_active(record, _at(20, day=15))


def test_tonight_posted_after_midnight_ends_same_morning():
    record = _presence(PresenceSlot.TONIGHT, _at(1, day=15))
    assert presence_ends_at(record) == _at(3, day=15)
    assert presence_is_active(record, _at(2, day=15))
    assert not presence_is_active(record, _at(20, day=15))


def test_slot_boundaries_use_local_time():
    chicago = ZoneInfo("America/Chicago")
    # 14:00 CDT
    record = _presence(PresenceSlot.TODAY, _at(19))
    assert not presence_is_active(record, _at(19))
    assert presence_is_active(record, _at(22), chicago)
    assert not presence_is_active(record, _at(23), chicago)
    assert presence_ends_at(record, chicago) == _at(23)


# ─── lounge response visibility ──────────────────────────────────

def test_response_visible_within_window():
    draft = Draft("hello", Partner.PARTNER1, _at(10))
    response = ratify_lounge_draft(draft, "l1", Partner.PARTNER2, _at(10))
    assert response_is_visible(response, _at(10) + timedelta(days=6))
    assert not response_is_visible(response, _at(10) + LOUNGE_RESPONSE_VISIBILITY)
