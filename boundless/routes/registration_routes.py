# boundless/routes/registration_routes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from boundless.auth import Authenticated, require_user
from boundless.data_client.document_store import REGISTRATIONS, SUBMISSIONS, DocumentStore
from boundless.data_client.notification_client import (
    EVENT_PARTICIPANT_REGISTERED,
    NotificationClient,
)
from boundless.errors import ConflictError, NotFoundError, StateError
from boundless.hackathons.models import SUB_DRAFT, Registration, RegistrationRequest
from boundless.hackathons.registrations import build_registration, ensure_open
from boundless.routes.deps import find_hackathon, get_notifier, get_store, notify_best_effort, ok

logger = logging.getLogger("boundless-api")

router = APIRouter(prefix="/api/hackathons/{slug_or_id}/register", tags=["registrations"])


@router.post("", status_code=201)
async def register(
    slug_or_id: str,
    req: RegistrationRequest,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationClient = Depends(get_notifier),
):
    hackathon = find_hackathon(store, slug_or_id)
    ensure_open(hackathon, "registrations")

    if store.find_one(REGISTRATIONS, {"hackathonId": hackathon.id, "userId": user.user_id}):
        raise ConflictError("You are already registered for this hackathon")

    registration = build_registration(hackathon, user.user_id, user.email, req)
    registration = Registration.model_validate(
        store.insert_one(REGISTRATIONS, registration.to_document())
    )
    logger.info(
        f"[Register] {user.email} -> hackathon {hackathon.id} ({registration.participation_type})"
    )

    await notify_best_effort(
        notifier,
        EVENT_PARTICIPANT_REGISTERED,
        [user.email or "", *registration.team_members],
        {
            "hackathonId": hackathon.id,
            "hackathonTitle": hackathon.title,
            "slug": hackathon.slug,
            "teamName": registration.team_name,
        },
    )
    return ok(registration, "Successfully registered for hackathon")


@router.get("/status")
def registration_status(
    slug_or_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    hackathon = find_hackathon(store, slug_or_id)
    doc = store.find_one(REGISTRATIONS, {"hackathonId": hackathon.id, "userId": user.user_id})
    registration = Registration.model_validate(doc) if doc is not None else None
    return ok(
        registration,
        "Registration status retrieved successfully",
        registered=registration is not None,
    )


@router.delete("")
def leave(
    slug_or_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Withdraw from a hackathon. Only allowed while the caller's submission,
    if any, is still a private draft; the draft goes with the registration.
    """
    hackathon = find_hackathon(store, slug_or_id)
    key = {"hackathonId": hackathon.id}
    if store.find_one(REGISTRATIONS, {**key, "userId": user.user_id}) is None:
        raise NotFoundError("You are not registered for this hackathon")

    submission = store.find_one(SUBMISSIONS, {**key, "participantId": user.user_id})
    if submission is not None and submission.get("status") != SUB_DRAFT:
        raise StateError("You cannot leave a hackathon after submitting a project")

    if submission is not None:
        store.delete_one(SUBMISSIONS, {"_id": submission["_id"]})
    store.delete_one(REGISTRATIONS, {**key, "userId": user.user_id})
    logger.info(f"[Register] {user.email} left hackathon {hackathon.id}")
    return ok(None, "Successfully left hackathon")
