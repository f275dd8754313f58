# boundless/routes/public_routes.py
"""
Anonymous read access to published hackathons.

Drafts and cancelled hackathons are reported as not found; participant
entries never carry email addresses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from boundless.data_client.document_store import (
    HACKATHONS,
    REGISTRATIONS,
    SUBMISSIONS,
    DocumentStore,
)
from boundless.errors import NotFoundError
from boundless.hackathons.models import (
    SUB_DRAFT,
    HackathonDraft,
    PublicParticipant,
    Registration,
)
from boundless.hackathons.registrations import PUBLIC_STATUSES
from boundless.routes.deps import find_hackathon, get_store, ok, pagination

router = APIRouter(prefix="/api/hackathons", tags=["public"])


def _public_hackathon(store: DocumentStore, slug_or_id: str) -> HackathonDraft:
    hackathon = find_hackathon(store, slug_or_id)
    if hackathon.status not in PUBLIC_STATUSES:
        raise NotFoundError("Hackathon not found")
    return hackathon


@router.get("")
def list_public_hackathons(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    store: DocumentStore = Depends(get_store),
):
    docs = store.find(
        HACKATHONS,
        {},
        where=lambda d: d.get("status") in PUBLIC_STATUSES,
        sort_by="publishedAt",
        descending=True,
    )
    window = [HackathonDraft.model_validate(d) for d in docs[(page - 1) * limit: page * limit]]
    return ok(
        window,
        "Hackathons retrieved successfully",
        pagination=pagination(page, limit, len(docs)),
    )


@router.get("/{slug_or_id}")
def get_public_hackathon(slug_or_id: str, store: DocumentStore = Depends(get_store)):
    hackathon = _public_hackathon(store, slug_or_id)
    return ok(
        hackathon,
        "Hackathon retrieved successfully",
        participantsCount=store.count(REGISTRATIONS, {"hackathonId": hackathon.id}),
    )


@router.get("/{slug_or_id}/participants")
def list_participants(
    slug_or_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: DocumentStore = Depends(get_store),
):
    hackathon = _public_hackathon(store, slug_or_id)
    query = {"hackathonId": hackathon.id}

    docs = store.find(REGISTRATIONS, query, sort_by="registeredAt")
    submitted = {
        d.get("participantId")
        for d in store.find(SUBMISSIONS, query, where=lambda d: d.get("status") != SUB_DRAFT)
    }

    participants = []
    for doc in docs[(page - 1) * limit: page * limit]:
        reg = Registration.model_validate(doc)
        participants.append(
            PublicParticipant(
                user_id=reg.user_id,
                participation_type=reg.participation_type,
                team_name=reg.team_name,
                team_size=len(reg.team_members) + 1,
                registered_at=reg.registered_at,
                submitted=reg.user_id in submitted,
            )
        )
    return ok(
        participants,
        "Participants retrieved successfully",
        pagination=pagination(page, limit, len(docs)),
    )
