# boundless/routes/judging_routes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from boundless.auth import Authenticated, require_user
from boundless.data_client.document_store import SUBMISSIONS, DocumentStore
from boundless.errors import StateError, ValidationError
from boundless.hackathons.judging import (
    aggregate,
    ensure_gradable,
    list_scores,
    rank_submissions,
    upsert_score,
)
from boundless.hackathons.models import (
    SUB_GRADED,
    SUB_SHORTLISTED,
    GradeRequest,
    Submission,
)
from boundless.hackathons.submissions import transition
from boundless.policy import authorize
from boundless.routes.deps import (
    get_store,
    load_hackathon,
    load_organization,
    load_submission,
    ok,
    pagination,
)

logger = logging.getLogger("boundless-api")

router = APIRouter(
    prefix="/api/organizations/{org_id}/hackathons/{hackathon_id}/judging",
    tags=["judging"],
)


@router.get("/submissions")
def judging_submissions(
    org_id: str,
    hackathon_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Shortlisted submissions with the hackathon criteria and every judge's score.
    """
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "grade")
    hackathon = load_hackathon(store, org_id, hackathon_id)

    query = {"hackathonId": hackathon_id, "status": SUB_SHORTLISTED}
    total_items = store.count(SUBMISSIONS, query)
    docs = store.find(SUBMISSIONS, query, sort_by="submittedAt", descending=True)
    window = docs[(page - 1) * limit: page * limit]

    items = []
    for doc in window:
        submission = Submission.model_validate(doc)
        scores = list_scores(store, submission.id or "")
        items.append(
            {
                "submission": submission,
                "criteria": hackathon.criteria,
                "scores": scores,
                "statistics": aggregate(scores),
            }
        )

    return ok(
        items,
        "Judging submissions retrieved successfully",
        pagination=pagination(page, limit, total_items),
    )


@router.post("/submissions/{submission_id}/grade")
def submit_grade(
    org_id: str,
    hackathon_id: str,
    submission_id: str,
    req: GradeRequest,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "grade")
    hackathon = load_hackathon(store, org_id, hackathon_id)

    if not hackathon.criteria:
        raise ValidationError("Hackathon has no judging criteria defined")

    submission = load_submission(store, hackathon_id, submission_id)
    ensure_gradable(submission)

    score, created = upsert_score(
        store,
        submission.id or "",
        user.user_id,
        req.scores,
        req.notes,
        criteria=hackathon.criteria,
        judge_email=user.email,
        hackathon_id=hackathon_id,
        organization_id=org_id,
    )
    all_scores = list_scores(store, submission.id or "")

    return ok(
        {
            "submission": submission,
            "score": score,
            "allScores": all_scores,
            "statistics": aggregate(all_scores),
        },
        "Grade submitted successfully" if created else "Grade updated successfully",
    )


@router.get("/submissions/{submission_id}/scores")
def submission_scores(
    org_id: str,
    hackathon_id: str,
    submission_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "view_scores")
    hackathon = load_hackathon(store, org_id, hackathon_id)

    submission = load_submission(store, hackathon_id, submission_id)
    scores = list_scores(store, submission.id or "")
    return ok(
        {
            "submission": submission,
            "criteria": hackathon.criteria,
            "scores": scores,
            "statistics": aggregate(scores),
        },
        "Submission scores retrieved successfully",
    )


@router.post("/submissions/{submission_id}/finalize")
def finalize_grading(
    org_id: str,
    hackathon_id: str,
    submission_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    shortlisted -> graded, once at least one judge has scored it.
    """
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "grade")
    load_hackathon(store, org_id, hackathon_id)

    submission = load_submission(store, hackathon_id, submission_id)
    scores = list_scores(store, submission.id or "")
    if submission.status == SUB_SHORTLISTED and not scores:
        raise StateError("Cannot finalize a submission no judge has scored")

    submission = transition(submission, SUB_GRADED, reviewer_id=user.user_id)
    doc = store.update_one(SUBMISSIONS, {"_id": submission.id}, submission.to_document())
    return ok(
        {"submission": Submission.model_validate(doc), "statistics": aggregate(scores)},
        "Grading finalized successfully",
    )


@router.get("/results")
def judging_results(
    org_id: str,
    hackathon_id: str,
    user: Authenticated = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Ranking of scored submissions, mapped onto the prize tiers.
    """
    org = load_organization(store, org_id)
    authorize(org, user.email, "submission", "view_scores")
    hackathon = load_hackathon(store, org_id, hackathon_id)

    docs = store.find(
        SUBMISSIONS,
        {"hackathonId": hackathon_id},
        where=lambda d: d.get("status") in {SUB_SHORTLISTED, SUB_GRADED},
    )
    entries = []
    for doc in docs:
        submission = Submission.model_validate(doc)
        entries.append((submission, aggregate(list_scores(store, submission.id or ""))))

    ranking = rank_submissions(entries, hackathon.prize_tiers)
    return ok(ranking, "Judging results retrieved successfully", count=len(ranking))
