import copy

import pytest
from fastapi.testclient import TestClient

from boundless.config import Settings
from boundless.data_client.document_store import create_store
from boundless.main import create_app

OWNER = {"X-User-Id": "u-owner", "X-User-Email": "owner@example.com"}
ADMIN = {"X-User-Id": "u-admin", "X-User-Email": "admin@example.com"}
MEMBER = {"X-User-Id": "u-member", "X-User-Email": "member@example.com"}
OUTSIDER = {"X-User-Id": "u-outsider", "X-User-Email": "outsider@example.com"}
PARTICIPANT = {"X-User-Id": "u-alice", "X-User-Email": "alice@example.com"}
PARTICIPANT_2 = {"X-User-Id": "u-bob", "X-User-Email": "bob@example.com"}

COMPLETE_PAYLOAD = {
    "information": {
        "title": "Stellar Build Week",
        "tagline": "Ship something on Soroban",
        "description": "A week-long hackathon for smart contract builders.",
        "banner": "https://cdn.example.com/banner.png",
        "categories": ["DeFi", "Infrastructure"],
        "venue": {"type": "virtual"},
    },
    "timeline": {
        "startDate": "2030-01-01T09:00:00Z",
        "submissionDeadline": "2030-02-01T09:00:00Z",
        "judgingDate": "2030-03-01T09:00:00Z",
        "winnerAnnouncementDate": "2030-04-01T09:00:00Z",
        "timezone": "UTC",
    },
    "participation": {"participantType": "team_or_individual", "teamMin": 1, "teamMax": 4},
    "rewards": {
        "prizeTiers": [
            {"position": "1st Place", "amount": 5000, "currency": "USDC"},
            {"position": "2nd", "amount": 2000, "currency": "USDC"},
        ]
    },
    "judging": {
        "criteria": [
            {"title": "Innovation", "weight": 60},
            {"title": "Execution", "weight": 40},
        ]
    },
    "collaboration": {"contactEmail": "team@example.com"},
}


@pytest.fixture
def payload():
    return copy.deepcopy(COMPLETE_PAYLOAD)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def store():
    return create_store()


@pytest.fixture
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def org_id(client):
    resp = client.post("/api/organizations", json={"name": "Boundless Labs"}, headers=OWNER)
    assert resp.status_code == 201
    oid = resp.json()["data"]["_id"]

    for headers, role in ((ADMIN, "admin"), (MEMBER, "member")):
        r = client.post(
            f"/api/organizations/{oid}/members",
            json={"email": headers["X-User-Email"], "role": role},
            headers=OWNER,
        )
        assert r.status_code == 201
    return oid


@pytest.fixture
def published(client, org_id, payload):
    """A published hackathon: returns (org_id, hackathon_id)."""
    resp = client.post(f"/api/organizations/{org_id}/hackathons/publish", json=payload, headers=OWNER)
    assert resp.status_code == 201, resp.json()
    return org_id, resp.json()["data"]["_id"]
