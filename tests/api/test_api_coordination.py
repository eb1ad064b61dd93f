"""Coordination Routes — end-to-end HTTP flows over one engine.

Tests cover:
    - register/get viewer, invitation token never echoed
    - location resolution, candidate scope, event visibility
    - interest expression, retraction, 409 CAP_REACHED envelope
    - partner taps → confirmed; absent after retraction; manual sweep
    - messaging gate reports the first blocker, then unlocks
    - founding redeem → activation → notice acknowledge
    - bookmarks ignored for free tier
    - upgrade prompt appears after the first confirmed action, until dismissed
    - validation errors answer 400 with field details
"""

from pairgate.services.candidate_directory import CandidateProfile


async def _register(client, viewer_id="v1", **extra):
    body = {"city": "Austin", "state": "TX", **extra}
    res = await client.post(f"/api/v1/viewers/{viewer_id}", json=body)
    assert res.status_code == 201
    return res.json()


async def _tap(client, partner, kind="messaging", target="c1", viewer_id="v1"):
    return await client.post(
        f"/api/v1/viewers/{viewer_id}/actions/{kind}/{target}/taps",
        json={"partner": partner},
    )


# ─── viewers & discovery ─────────────────────────────────────────

async def test_register_and_get_viewer(client):
    data = await _register(client, partner_ages=[31, 33])
    assert data["location"]["region"] == "Austin Metro"
    assert data["tier"] == "free"
    assert data["founding"]["eligible"] is False
    assert "founding_token" not in data

    res = await client.get("/api/v1/viewers/v1")
    assert res.json()["viewer_id"] == "v1"


async def test_register_rejects_bad_ages(client):
    res = await client.post(
        "/api/v1/viewers/v1",
        json={"city": "Austin", "state": "TX", "partner_ages": [17, 30]},
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in error["details"]] == ["partner_ages"]


async def test_resolve_unknown_location(client):
    res = await client.post(
        "/api/v1/locations/resolve", json={"city": "Marfa", "state": "TX"},
    )
    assert res.status_code == 200
    assert res.json()["region"] is None


async def test_candidate_scope_and_discovery_update(client):
    await _register(client)
    res = await client.put(
        "/api/v1/candidates/c1", json={"location": "San Antonio, TX"},
    )
    assert res.status_code == 204

    res = await client.get("/api/v1/viewers/v1/candidates/c1/scope")
    assert res.json()["visible"] is False

    res = await client.put(
        "/api/v1/viewers/v1/discovery", json={"scope": "nearby"},
    )
    assert res.json()["scope"] == "nearby"
    res = await client.get("/api/v1/viewers/v1/candidates/c1/scope")
    assert res.json()["visible"] is True


async def test_event_visibility(client):
    await _register(client)
    res = await client.post(
        "/api/v1/viewers/v1/events/visibility",
        json={"event_id": "e1", "event_type": "travel", "location": "Toronto, ON"},
    )
    assert res.json() == {"visible": True, "labeled_travel": True}

    res = await client.post(
        "/api/v1/viewers/v1/events/visibility",
        json={"event_id": "e2", "event_type": "local", "location": "Houston, TX"},
    )
    assert res.json()["visible"] is False


# ─── interests ───────────────────────────────────────────────────

async def test_express_and_retract_intent(client):
    res = await client.post(
        "/api/v1/viewers/v1/interests/c1", json={"intent": "meeting"},
    )
    assert res.json() == {
        "outcome": "accepted", "intent": "meeting", "live_count": 1, "limit": 5,
    }
    res = await client.post(
        "/api/v1/viewers/v1/interests/c1", json={"intent": "meeting"},
    )
    assert res.json()["intent"] is None
    assert res.json()["live_count"] == 0


async def test_cap_reached_returns_409(client):
    for i in range(5):
        await client.post(f"/api/v1/viewers/v1/interests/c{i}", json={"intent": "social"})
    res = await client.post("/api/v1/viewers/v1/interests/c9", json={"intent": "social"})
    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "CAP_REACHED"
    assert error["recoverable"] is True
    assert error["context"]["candidate_id"] == "c9"


# ─── dual confirmation ───────────────────────────────────────────

async def test_taps_confirm(client):
    res = await _tap(client, "partner1")
    assert res.json()["status"] == "pending"
    assert res.json()["expires_at"] is not None
    res = await _tap(client, "partner2")
    assert res.json()["status"] == "confirmed"

    res = await client.get("/api/v1/viewers/v1/actions/messaging/c1")
    assert res.json()["partner1"] and res.json()["partner2"]


async def test_retracted_action_is_absent(client):
    await _tap(client, "partner1", kind="rsvp", target="e1")
    res = await _tap(client, "partner1", kind="rsvp", target="e1")
    assert res.json()["status"] == "absent"
    assert res.json()["expires_at"] is None


async def test_unknown_kind_is_rejected(client):
    res = await _tap(client, "partner1", kind="wave")
    assert res.status_code == 400


async def test_manual_sweep(client, clock):
    await _tap(client, "partner1", kind="rsvp", target="e1")
    clock.advance(hours=49)
    res = await client.post("/api/v1/sweeps")
    assert res.json() == {"transitioned": ["v1:rsvp:e1"]}
    res = await client.get("/api/v1/viewers/v1/actions/rsvp/e1")
    assert res.json()["status"] == "expired"


# ─── messaging gate ──────────────────────────────────────────────

async def test_messaging_gate_flow(client, engine):
    await _register(client)
    engine.catalog.upsert(CandidateProfile(
        "c1", location_label="Austin, TX", lounges=frozenset({"l1"}),
        reciprocated_viewers=frozenset({"v1"}),
    ))
    res = await client.get("/api/v1/viewers/v1/messaging/c1")
    assert res.json()["blocked_by"] == "mutual_interest"

    await client.post("/api/v1/viewers/v1/interests/c1", json={"intent": "conversation"})
    await client.post("/api/v1/viewers/v1/lounges/l1/membership")
    await _tap(client, "partner1")
    res = await client.get("/api/v1/viewers/v1/messaging/c1")
    assert res.json()["blocked_by"] == "dual_confirmation"
    assert res.json()["unlocked"] is False

    await _tap(client, "partner2")
    res = await client.get("/api/v1/viewers/v1/messaging/c1")
    assert res.json()["unlocked"] is True
    assert res.json()["blocked_by"] is None


# ─── founding access ─────────────────────────────────────────────

async def test_founding_flow(client):
    await _register(client)
    res = await client.post("/api/v1/viewers/v1/founding/redeem", json={"token": "bogus"})
    assert res.json() == {"redeemed": False}
    res = await client.post("/api/v1/viewers/v1/founding/redeem", json={"token": "fc_test01"})
    assert res.json() == {"redeemed": True}

    await client.post("/api/v1/viewers/v1/interests/c1", json={"intent": "social"})
    res = await client.get("/api/v1/viewers/v1/founding")
    assert res.json() == {"active": False, "notice_pending": False}

    await _tap(client, "partner1", kind="rsvp", target="e1")
    await _tap(client, "partner2", kind="rsvp", target="e1")
    res = await client.get("/api/v1/viewers/v1/founding")
    assert res.json() == {"active": True, "notice_pending": True}

    res = await client.post("/api/v1/viewers/v1/founding/acknowledge")
    assert res.json() == {"active": True, "notice_pending": False}
    res = await client.get("/api/v1/viewers/v1")
    assert res.json()["effective_tier"] == "founding"


async def test_bookmark_ignored_on_free_tier(client):
    res = await client.post("/api/v1/viewers/v1/bookmarks/c1")
    assert res.json() == {"enabled": False}
    await client.put("/api/v1/viewers/v1/tier", json={"tier": "premium"})
    res = await client.post("/api/v1/viewers/v1/bookmarks/c1")
    assert res.json() == {"enabled": True}


async def test_upgrade_prompt_after_first_coordination(client):
    res = await client.get("/api/v1/viewers/v1/upgrade-prompt")
    assert res.json() == {"due": False}
    await _tap(client, "partner1", kind="rsvp", target="e1")
    await _tap(client, "partner2", kind="rsvp", target="e1")
    assert (await client.get("/api/v1/viewers/v1")).json()["has_coordinated"] is True
    res = await client.get("/api/v1/viewers/v1/upgrade-prompt")
    assert res.json() == {"due": True}

    res = await client.delete("/api/v1/viewers/v1/upgrade-prompt")
    assert res.status_code == 204
    res = await client.get("/api/v1/viewers/v1/upgrade-prompt")
    assert res.json() == {"due": False}
