import pytest

from tests.conftest import OWNER, PARTICIPANT, PARTICIPANT_2

SLUG = "stellar-build-week"
REGISTER = f"/api/hackathons/{SLUG}/register"
SUBMIT = f"/api/hackathons/{SLUG}/submissions"


def test_register_individual(client, published):
    resp = client.post(REGISTER, json={}, headers=PARTICIPANT)
    assert resp.status_code == 201
    body = resp.json()
    assert body["meta"]["message"] == "Successfully registered for hackathon"
    assert body["data"]["participationType"] == "individual"
    assert body["data"]["hackathonId"] == published[1]

    status = client.get(f"{REGISTER}/status", headers=PARTICIPANT).json()
    assert status["meta"]["registered"] is True
    assert status["data"]["userId"] == "u-alice"


def test_status_when_not_registered(client, published):
    status = client.get(f"{REGISTER}/status", headers=PARTICIPANT).json()
    assert status["data"] is None
    assert status["meta"]["registered"] is False


def test_register_twice_conflicts(client, published):
    client.post(REGISTER, json={}, headers=PARTICIPANT)
    again = client.post(REGISTER, json={}, headers=PARTICIPANT)
    assert again.status_code == 409
    assert again.json()["detail"] == "You are already registered for this hackathon"


def test_register_team(client, published):
    body = {
        "participationType": "team",
        "teamName": " Orbiters ",
        "teamMembers": ["Carol@example.com", "carol@example.com", "alice@example.com", "dave@example.com"],
    }
    resp = client.post(REGISTER, json=body, headers=PARTICIPANT)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["teamName"] == "Orbiters"
    # Leader and duplicates are dropped
    assert data["teamMembers"] == ["carol@example.com", "dave@example.com"]


@pytest.mark.parametrize(
    "body, detail",
    [
        ({"participationType": "team"}, "Team name is required for team participation"),
        (
            {"participationType": "team", "teamName": "Big", "teamMembers": [f"m{i}@example.com" for i in range(4)]},
            "Team cannot have more than 4 members",
        ),
    ],
)
def test_register_team_rules(client, published, body, detail):
    resp = client.post(REGISTER, json=body, headers=PARTICIPANT)
    assert resp.status_code == 400
    assert resp.json()["detail"] == detail


def test_register_type_must_match_hackathon(client, org_id, payload):
    payload["participation"] = {"participantType": "individual"}
    client.post(f"/api/organizations/{org_id}/hackathons/publish", json=payload, headers=OWNER)

    resp = client.post(REGISTER, json={"participationType": "team", "teamName": "Solo"}, headers=PARTICIPANT)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "This hackathon does not allow team participation"


def test_cannot_register_for_draft(client, org_id):
    draft_id = client.post(
        f"/api/organizations/{org_id}/hackathons/drafts", json={}, headers=OWNER
    ).json()["data"]["_id"]
    resp = client.post(f"/api/hackathons/{draft_id}/register", json={}, headers=PARTICIPANT)
    assert resp.status_code == 409
    assert resp.json()["error"] == "invalid_state"


def test_register_requires_identity(client, published):
    assert client.post(REGISTER, json={}).status_code == 401


def test_leave_removes_draft_submission(client, published):
    client.post(REGISTER, json={}, headers=PARTICIPANT)
    client.post(SUBMIT, json={"projectName": "Orbit", "saveAsDraft": True}, headers=PARTICIPANT)

    resp = client.delete(REGISTER, headers=PARTICIPANT)
    assert resp.status_code == 200
    assert resp.json()["meta"]["message"] == "Successfully left hackathon"
    assert client.get(f"{SUBMIT}/me", headers=PARTICIPANT).json()["data"] is None
    assert client.post(SUBMIT, json={"projectName": "Orbit"}, headers=PARTICIPANT).status_code == 403


def test_leave_after_submitting_refused(client, published):
    client.post(REGISTER, json={}, headers=PARTICIPANT)
    client.post(SUBMIT, json={"projectName": "Orbit"}, headers=PARTICIPANT)

    resp = client.delete(REGISTER, headers=PARTICIPANT)
    assert resp.status_code == 409
    assert client.get(f"{REGISTER}/status", headers=PARTICIPANT).json()["meta"]["registered"] is True


def test_leave_when_not_registered(client, published):
    resp = client.delete(REGISTER, headers=PARTICIPANT)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "You are not registered for this hackathon"


# ─────────────────────────────────────────────────────────────
# Public pages
# ─────────────────────────────────────────────────────────────
def test_public_hackathon_by_slug(client, published):
    client.post(REGISTER, json={}, headers=PARTICIPANT)

    resp = client.get(f"/api/hackathons/{SLUG}")
    assert resp.status_code == 200
    assert resp.json()["data"]["_id"] == published[1]
    assert resp.json()["meta"]["participantsCount"] == 1

    listed = client.get("/api/hackathons").json()
    assert [h["slug"] for h in listed["data"]] == [SLUG]
    assert listed["meta"]["pagination"]["totalItems"] == 1


def test_public_pages_hide_drafts(client, org_id):
    draft_id = client.post(
        f"/api/organizations/{org_id}/hackathons/drafts", json={}, headers=OWNER
    ).json()["data"]["_id"]
    assert client.get(f"/api/hackathons/{draft_id}").status_code == 404
    assert client.get(f"/api/hackathons/{draft_id}/participants").status_code == 404
    assert client.get("/api/hackathons").json()["data"] == []


def test_participants_list(client, published):
    client.post(REGISTER, json={}, headers=PARTICIPANT)
    client.post(
        REGISTER,
        json={"participationType": "team", "teamName": "Orbiters", "teamMembers": ["carol@example.com"]},
        headers=PARTICIPANT_2,
    )
    client.post(SUBMIT, json={"projectName": "Orbit"}, headers=PARTICIPANT)

    resp = client.get(f"/api/hackathons/{SLUG}/participants").json()
    assert resp["meta"]["pagination"]["totalItems"] == 2
    by_user = {p["userId"]: p for p in resp["data"]}
    assert by_user["u-alice"]["submitted"] is True
    assert by_user["u-bob"]["teamSize"] == 2
    assert by_user["u-bob"]["submitted"] is False
    assert "example.com" not in str(resp["data"])
