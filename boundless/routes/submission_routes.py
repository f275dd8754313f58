# boundless/routes/submission_routes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from boundless.auth import Authenticated, require_user
from boundless.data_client.document_store import REGISTRATIONS, SUBMISSIONS, DocumentStore
from boundless.data_client.notification_client import (
    EVENT_SUBMISSION_SHORTLISTED,
    NotificationClient,
)
from boundless.errors import PermissionDeniedError, StateError
from boundless.hackathons.models import (
    SUB_DISQUALIFIED,
    SUB_DRAFT,
    SUB_SHORTLISTED,
    SUB_SUBMITTED,
    DisqualifyRequest,
    Submission,
    SubmissionRequest,
)
from boundless.hackathons.registrations import ensure_open
from boundless.hackathons.submissions import EDITABLE, toggle_shortlist, transition
from boundless.policy import authorize
from boundless.routes.deps import (
    find_hackathon,
    get_notifier,
    get_store,
    load_hackathon,
    load_organization,
    load_submission,
    notify_best_effort,
    ok,
)
from boundless.utils import utc_now

logger = logging.getLogger("boundless-api")

router = APIRouter(tags=["submissions"])


def _save(store: DocumentStore, submission: Submission) -> Submission:
    doc = store.update_one(SUBMISSIONS, {"_id": submission.id}, submission.to_document())
    return Submission.model_validate(doc)


# ─────────────────────────────────────────────────────────────
# Participant side
# ─────────────────────────────────────────────────────────────
@router.get("/api/hackathons/{slug_or_id}/submissions/me")
def get_my_submission(
    slug_or_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    # Null data (not 404) when the caller has not submitted yet
    hackathon = find_hackathon(store, slug_or_id)
    doc = store.find_one(SUBMISSIONS, {"hackathonId": hackathon.id, "participantId": user.user_id})
    submission = Submission.model_validate(doc) if doc is not None else None
    return ok(submission, "Submission retrieved successfully")


@router.post("/api/hackathons/{slug_or_id}/submissions", status_code=201)
def submit_project(
    slug_or_id: str,
    req: SubmissionRequest,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Create or update the caller's submission for a published hackathon.
    `saveAsDraft` keeps it out of the review queue.
    """
    hackathon = find_hackathon(store, slug_or_id)
    hackathon_id = hackathon.id
    ensure_open(hackathon, "submissions")
    if store.find_one(REGISTRATIONS, {"hackathonId": hackathon_id, "userId": user.user_id}) is None:
        raise PermissionDeniedError("You must be registered for this hackathon to submit")

    now = utc_now()
    content = {
        "project_name": req.project_name.strip(),
        "category": req.category,
        "description": req.description,
        "links": req.links,
        "updated_at": now,
    }

    existing = store.find_one(
        SUBMISSIONS, {"hackathonId": hackathon_id, "participantId": user.user_id}
    )
    if existing is None:
        submission = Submission(
            hackathon_id=hackathon_id,
            organization_id=hackathon.organization_id or "",
            participant_id=user.user_id,
            participant_email=user.email,
            status=SUB_DRAFT,
            **content,
        )
        submission = Submission.model_validate(store.insert_one(SUBMISSIONS, submission.to_document()))
        created = True
    else:
        submission = Submission.model_validate(existing)
        if submission.status not in EDITABLE:
            raise StateError(
                f"Submission can no longer be edited (status: {submission.status})"
            )
        submission = submission.model_copy(update=content)
        created = False

    if not req.save_as_draft and submission.status == SUB_DRAFT:
        submission = transition(submission, SUB_SUBMITTED)
    submission = _save(store, submission)

    logger.info(f"[Submission] {user.email} -> hackathon {hackathon_id} ({submission.status})")
    return ok(
        submission,
        "Submission created successfully" if created else "Submission updated successfully",
    )


# ─────────────────────────────────────────────────────────────
# Reviewer side
# ─────────────────────────────────────────────────────────────
_REVIEW_PREFIX = "/api/organizations/{org_id}/hackathons/{hackathon_id}/submissions"


@router.get(_REVIEW_PREFIX)
def list_submissions(
    org_id: str,
    hackathon_id: str,
    status: Optional[str] = Query(default=None),
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "review")
    load_hackathon(store, org_id, hackathon_id)

    filters = {"hackathonId": hackathon_id}
    if status:
        filters["status"] = status
    docs = store.find(
        SUBMISSIONS,
        filters,
        # Drafts stay private to their author
        where=lambda d: d.get("status") != SUB_DRAFT,
        sort_by="submittedAt",
        descending=True,
    )
    subs = [Submission.model_validate(d) for d in docs]
    return ok(subs, "Submissions retrieved successfully", count=len(subs))


@router.post(_REVIEW_PREFIX + "/{submission_id}/shortlist")
async def shortlist_submission(
    org_id: str,
    hackathon_id: str,
    submission_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationClient = Depends(get_notifier),
):
    """
    Toggle: submitted -> shortlisted, shortlisted -> submitted.
    """
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "review")
    hackathon = load_hackathon(store, org_id, hackathon_id)

    submission = load_submission(store, hackathon_id, submission_id)
    submission = _save(store, toggle_shortlist(submission, reviewer_id=user.user_id))

    if submission.status == SUB_SHORTLISTED:
        await notify_best_effort(
            notifier,
            EVENT_SUBMISSION_SHORTLISTED,
            [submission.participant_email or ""],
            {
                "hackathonId": hackathon_id,
                "hackathonTitle": hackathon.title,
                "submissionId": submission.id,
                "projectName": submission.project_name,
            },
        )

    message = (
        "Submission shortlisted successfully"
        if submission.status == SUB_SHORTLISTED
        else "Submission shortlist reversed successfully"
    )
    return ok(submission, message)


@router.post(_REVIEW_PREFIX + "/{submission_id}/disqualify")
def disqualify_submission(
    org_id: str,
    hackathon_id: str,
    submission_id: str,
    req: DisqualifyRequest,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "review")
    load_hackathon(store, org_id, hackathon_id)

    submission = load_submission(store, hackathon_id, submission_id)
    submission = _save(
        store,
        transition(submission, SUB_DISQUALIFIED, reviewer_id=user.user_id, reason=req.reason.strip()),
    )
    return ok(submission, "Submission disqualified successfully")
