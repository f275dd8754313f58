# boundless/routes/hackathon_routes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from boundless.auth import Authenticated, require_user
from boundless.data_client.document_store import (
    HACKATHONS,
    JUDGING_SCORES,
    REGISTRATIONS,
    SUBMISSIONS,
    DocumentStore,
)
from boundless.data_client.notification_client import (
    EVENT_HACKATHON_PUBLISHED,
    NotificationClient,
)
from boundless.errors import StateError, ValidationError
from boundless.hackathons.models import (
    STATUS_DRAFT,
    STATUS_PUBLISHED,
    DraftPayload,
    HackathonDraft,
    PublishRequest,
)
from boundless.hackathons.publish import (
    apply_tab_update,
    ensure_unique_slug,
    validate_publish_requirements,
)
from boundless.metrics import PUBLISH_ATTEMPTS
from boundless.policy import authorize
from boundless.routes.deps import (
    get_notifier,
    get_store,
    load_hackathon,
    load_organization,
    notify_best_effort,
    ok,
)
from boundless.utils import utc_now

logger = logging.getLogger("boundless-api")

router = APIRouter(prefix="/api/organizations/{org_id}/hackathons", tags=["hackathons"])


def _save(store: DocumentStore, hackathon: HackathonDraft) -> HackathonDraft:
    if hackathon.id is None:
        doc = store.insert_one(HACKATHONS, hackathon.to_document())
    else:
        doc = store.update_one(HACKATHONS, {"_id": hackathon.id}, hackathon.to_document())
    return HackathonDraft.model_validate(doc)


# ─────────────────────────────────────────────────────────────
# Organization hackathons
# ─────────────────────────────────────────────────────────────
@router.get("")
def list_hackathons(
    org_id: str,
    status: Optional[str] = Query(default=None),
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "manage")

    filters = {"organizationId": org_id}
    if status:
        filters["status"] = status
    docs = store.find(HACKATHONS, filters, sort_by="createdAt", descending=True)
    hackathons = [HackathonDraft.model_validate(d) for d in docs]
    return ok(hackathons, "Hackathons retrieved successfully", count=len(hackathons))


# ─────────────────────────────────────────────────────────────
# Drafts
# ─────────────────────────────────────────────────────────────
@router.post("/drafts", status_code=201)
def create_draft(
    org_id: str,
    payload: DraftPayload,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "manage")

    draft = HackathonDraft(organization_id=org_id, status=STATUS_DRAFT, created_by=user.user_id)
    draft = _save(store, apply_tab_update(draft, payload))
    logger.info(f"[Draft] {user.email} created draft {draft.id} for organization {org_id}")
    return ok(draft, "Draft created successfully")


@router.put("/drafts/{draft_id}")
def update_draft(
    org_id: str,
    draft_id: str,
    payload: DraftPayload,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "manage")

    draft = load_hackathon(store, org_id, draft_id, status=STATUS_DRAFT)
    draft = _save(store, apply_tab_update(draft, payload))
    return ok(draft, "Draft updated successfully")


@router.get("/drafts/{draft_id}")
def get_draft(
    org_id: str,
    draft_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "manage")

    draft = load_hackathon(store, org_id, draft_id, status=STATUS_DRAFT)
    # Lets the editor show what is still missing before publish
    validation = validate_publish_requirements(draft)
    return ok(
        draft,
        "Draft retrieved successfully",
        publishable=validation.valid,
        missing=validation.errors,
    )


@router.get("/drafts")
def list_drafts(
    org_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "manage")

    docs = store.find(
        HACKATHONS,
        {"organizationId": org_id, "status": STATUS_DRAFT},
        sort_by="createdAt",
        descending=True,
    )
    drafts = [HackathonDraft.model_validate(d) for d in docs]
    return ok(drafts, "Drafts retrieved successfully", count=len(drafts))


# ─────────────────────────────────────────────────────────────
# Publish
# ─────────────────────────────────────────────────────────────
@router.post("/publish", status_code=201)
async def publish_hackathon(
    org_id: str,
    payload: PublishRequest,
    draft_id: Optional[str] = Query(default=None, alias="draftId"),
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationClient = Depends(get_notifier),
):
    """
    Publish an existing draft (draftId in body or query, body wins) or a
    brand new hackathon built from the payload alone.
    """
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "publish")

    target_id = payload.draft_id or draft_id
    if target_id:
        hackathon = load_hackathon(store, org_id, target_id, status=STATUS_DRAFT)
    else:
        hackathon = HackathonDraft(organization_id=org_id, status=STATUS_DRAFT, created_by=user.user_id)
    hackathon = apply_tab_update(hackathon, payload)

    validation = validate_publish_requirements(hackathon)
    if not validation.valid:
        PUBLISH_ATTEMPTS.labels(outcome="rejected").inc()
        # Keep the merged edits so the editor does not lose them
        if target_id:
            _save(store, hackathon)
        raise ValidationError("Validation failed", errors=validation.errors)

    def _slug_taken(slug: str) -> bool:
        return store.find_one(
            HACKATHONS, {"slug": slug}, where=lambda d: d.get("_id") != hackathon.id
        ) is not None

    now = utc_now()
    hackathon = hackathon.model_copy(
        update={
            "slug": hackathon.slug or ensure_unique_slug(hackathon.title or "", _slug_taken),
            "status": STATUS_PUBLISHED,
            "published_at": now,
            "updated_at": now,
        }
    )
    hackathon = _save(store, hackathon)
    PUBLISH_ATTEMPTS.labels(outcome="published").inc()
    logger.info(f"[Publish] hackathon {hackathon.id} published as '{hackathon.slug}'")

    await notify_best_effort(
        notifier,
        EVENT_HACKATHON_PUBLISHED,
        list(org.members),
        {"hackathonId": hackathon.id, "slug": hackathon.slug, "title": hackathon.title},
    )
    return ok(hackathon, "Hackathon published successfully")


@router.get("/{hackathon_id}")
def get_hackathon(
    org_id: str,
    hackathon_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "organization", "view")
    return ok(load_hackathon(store, org_id, hackathon_id), "Hackathon retrieved successfully")


@router.put("/{hackathon_id}")
def update_hackathon(
    org_id: str,
    hackathon_id: str,
    payload: DraftPayload,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Edit a published hackathon. The result must still meet every publish
    requirement, and criteria are frozen once a judge has scored.
    """
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "manage")

    hackathon = load_hackathon(store, org_id, hackathon_id)
    if hackathon.status == STATUS_DRAFT:
        raise StateError("Drafts are edited through the draft endpoint")
    if (
        payload.judging is not None
        and "criteria" in payload.judging.model_fields_set
        and store.count(JUDGING_SCORES, {"hackathonId": hackathon_id})
    ):
        raise StateError("Judging criteria cannot change once scoring has started")

    hackathon = apply_tab_update(hackathon, payload)
    validation = validate_publish_requirements(hackathon)
    if not validation.valid:
        raise ValidationError("Validation failed", errors=validation.errors)

    hackathon = _save(store, hackathon)
    logger.info(f"[Hackathon] {user.email} updated hackathon {hackathon_id}")
    return ok(hackathon, "Hackathon updated successfully")


@router.delete("/{hackathon_id}")
def delete_hackathon(
    org_id: str,
    hackathon_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "hackathon", "delete")
    load_hackathon(store, org_id, hackathon_id)

    # Dependents first
    key = {"hackathonId": hackathon_id}
    removed = {name: store.delete_many(name, key) for name in (JUDGING_SCORES, SUBMISSIONS, REGISTRATIONS)}
    store.delete_one(HACKATHONS, {"_id": hackathon_id})
    logger.info(f"[Hackathon] {user.email} deleted hackathon {hackathon_id} ({removed})")
    return ok(None, "Hackathon deleted successfully")
