# boundless/hackathons/submissions.py
"""
Submission lifecycle.

    draft -> submitted -> shortlisted -> {graded, disqualified}

plus the moderation shortcuts used by reviewers:
    submitted   -> disqualified
    shortlisted -> submitted      (un-shortlist toggle)
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from boundless.errors import StateError
from boundless.hackathons.models import (
    SUB_DISQUALIFIED,
    SUB_DRAFT,
    SUB_GRADED,
    SUB_SHORTLISTED,
    SUB_SUBMITTED,
    Submission,
)
from boundless.utils import utc_now

TRANSITIONS: Dict[str, FrozenSet[str]] = {
    SUB_DRAFT: frozenset({SUB_SUBMITTED}),
    SUB_SUBMITTED: frozenset({SUB_SHORTLISTED, SUB_DISQUALIFIED}),
    SUB_SHORTLISTED: frozenset({SUB_SUBMITTED, SUB_GRADED, SUB_DISQUALIFIED}),
    SUB_GRADED: frozenset(),
    SUB_DISQUALIFIED: frozenset(),
}

# Participants may still edit their own entry in these states
EDITABLE = frozenset({SUB_DRAFT, SUB_SUBMITTED})


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def transition(
    submission: Submission,
    target: str,
    reviewer_id: Optional[str] = None,
    reason: Optional[str] = None,
) -> Submission:
    if not can_transition(submission.status, target):
        raise StateError(
            f"Cannot move submission from '{submission.status}' to '{target}'"
        )

    now = utc_now()
    update = {"status": target, "updated_at": now}

    if target == SUB_SUBMITTED and submission.status == SUB_DRAFT:
        update["submitted_at"] = now
    if target == SUB_SHORTLISTED:
        update.update(reviewed_by=reviewer_id, reviewed_at=now, disqualification_reason=None)
    elif target == SUB_SUBMITTED and submission.status == SUB_SHORTLISTED:
        update.update(reviewed_by=None, reviewed_at=None)
    elif target == SUB_DISQUALIFIED:
        update.update(reviewed_by=reviewer_id, reviewed_at=now, disqualification_reason=reason)
    elif target == SUB_GRADED:
        update.update(reviewed_by=reviewer_id, reviewed_at=now)

    return submission.model_copy(update=update)


def toggle_shortlist(submission: Submission, reviewer_id: str) -> Submission:
    target = SUB_SUBMITTED if submission.status == SUB_SHORTLISTED else SUB_SHORTLISTED
    return transition(submission, target, reviewer_id=reviewer_id)
