# boundless/hackathons/judging.py
"""
Judging score aggregation.

Contracts:
- compute_weighted_score(): one judge's weighted score for one submission
- upsert_score(): store it, one record per (submission, judge)
- aggregate(): cross-judge statistics for a submission
- rank_submissions(): final ranking mapped onto the prize tiers
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from boundless.data_client.document_store import JUDGING_SCORES, DocumentStore
from boundless.errors import StateError, ValidationError
from boundless.hackathons.models import (
    SUB_SHORTLISTED,
    Criterion,
    CriterionScore,
    JudgingScore,
    PrizeTier,
    RankedSubmission,
    ScoreStatistics,
    Submission,
)
from boundless.metrics import GRADES
from boundless.utils import utc_now

logger = logging.getLogger("boundless-api.judging")

MIN_SCORE = 0.0
MAX_SCORE = 100.0


def _dec(value: Union[float, int, Decimal]) -> Decimal:
    # str() first so 0.7 stays 0.7 instead of its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_half_up(value: Union[float, Decimal], places: int = 2) -> float:
    """
    Round like a human would: 0.125 -> 0.13 (Python's round() gives 0.12).
    """
    quantum = Decimal(1).scaleb(-places)
    return float(_dec(value).quantize(quantum, rounding=ROUND_HALF_UP))


# ─────────────────────────────────────────────────────────────
# Contract A: weighted score
# ─────────────────────────────────────────────────────────────
def compute_weighted_score(
    criteria: Sequence[Criterion], scores: Sequence[CriterionScore]
) -> float:
    """
    Σ(score × weight / 100) over all criteria, rounded half-up to 2 decimals.

    Raises ValidationError when the submitted titles are not exactly the
    hackathon's criteria, or when a score falls outside [0, 100].
    """
    weights: Dict[str, float] = {c.title: c.weight for c in criteria}
    submitted = [s.criterion_title for s in scores]

    repeated = sorted({t for t in submitted if submitted.count(t) > 1})
    if len(scores) != len(criteria) or set(submitted) != set(weights) or repeated:
        missing = sorted(set(weights) - set(submitted))
        extra = sorted(set(submitted) - set(weights))
        details = []
        if missing:
            details.append(f"missing: {', '.join(missing)}")
        if extra:
            details.append(f"unknown: {', '.join(extra)}")
        if repeated:
            details.append(f"duplicate: {', '.join(repeated)}")
        if len(weights) != len(criteria):
            titles = [c.title for c in criteria]
            dupes = sorted({t for t in titles if titles.count(t) > 1})
            details.append(f"hackathon criteria repeat: {', '.join(dupes)}")
        if not details:
            details.append(f"expected {len(criteria)} scores, got {len(scores)}")
        raise ValidationError(f"criterion mismatch ({'; '.join(details)})")

    for s in scores:
        value = s.score
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or math.isnan(value)
            or value < MIN_SCORE
            or value > MAX_SCORE
        ):
            raise ValidationError(
                f"score out of range for criterion '{s.criterion_title}': "
                f"must be a number between 0 and 100"
            )

    total = sum(
        (_dec(s.score) * _dec(weights[s.criterion_title]) / 100 for s in scores), Decimal(0)
    )
    return round_half_up(total)


# ─────────────────────────────────────────────────────────────
# Contract B: storage
# ─────────────────────────────────────────────────────────────
def ensure_gradable(submission: Submission) -> None:
    if submission.status != SUB_SHORTLISTED:
        raise StateError(
            f"Only shortlisted submissions can be graded (current status: {submission.status})"
        )


def upsert_score(
    store: DocumentStore,
    submission_id: str,
    judge_id: str,
    scores: Sequence[CriterionScore],
    notes: Optional[str],
    *,
    criteria: Sequence[Criterion],
    judge_email: Optional[str] = None,
    hackathon_id: Optional[str] = None,
    organization_id: Optional[str] = None,
) -> Tuple[JudgingScore, bool]:
    """
    Create or overwrite the score of `judge_id` for `submission_id`.

    A second call by the same judge updates the same record in place.
    Returns (score, created).
    """
    weighted = compute_weighted_score(criteria, scores)
    now = utc_now()

    values = {
        "scores": [s.to_document() for s in scores],
        "weightedScore": weighted,
        "notes": notes or None,
        "judgeEmail": judge_email,
        "updatedAt": now.isoformat(),
    }
    on_insert = {
        "hackathonId": hackathon_id,
        "organizationId": organization_id,
        "createdAt": now.isoformat(),
    }
    doc, created = store.upsert_one(
        JUDGING_SCORES,
        {"submissionId": submission_id, "judgeId": judge_id},
        values,
        on_insert=on_insert,
    )

    GRADES.labels(outcome="created" if created else "updated").inc()
    logger.info(
        "Grade %s: submission=%s judge=%s weighted=%.2f",
        "created" if created else "updated",
        submission_id,
        judge_id,
        weighted,
    )
    return JudgingScore.model_validate(doc), created


def list_scores(store: DocumentStore, submission_id: str) -> List[JudgingScore]:
    docs = store.find(
        JUDGING_SCORES, {"submissionId": submission_id}, sort_by="createdAt", descending=True
    )
    return [JudgingScore.model_validate(d) for d in docs]


# ─────────────────────────────────────────────────────────────
# Contract C: aggregation
# ─────────────────────────────────────────────────────────────
def aggregate(scores: Iterable[JudgingScore]) -> ScoreStatistics:
    weighted = [s.weighted_score for s in scores]
    if not weighted:
        return ScoreStatistics(average_score=None, min_score=None, max_score=None, judge_count=0)

    return ScoreStatistics(
        average_score=round_half_up(sum(map(_dec, weighted), Decimal(0)) / len(weighted)),
        min_score=round_half_up(min(weighted)),
        max_score=round_half_up(max(weighted)),
        judge_count=len(weighted),
    )


# ─────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────
def rank_suffix(rank: int) -> str:
    if 11 <= rank % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(rank % 10, "th")


def prize_for_rank(rank: int, prize_tiers: Sequence[PrizeTier]) -> Optional[PrizeTier]:
    """
    Match a rank against free-text tier positions:
    "1", "1st", "1st Place", "1 place", ... (case-insensitive).
    """
    rank_str = str(rank)
    exact = {rank_str, f"{rank_str}{rank_suffix(rank)}"}
    prefixes = [f"{rank_str}{rank_suffix(rank)}", f"{rank_str} "]

    for tier in prize_tiers:
        position = tier.position.strip().lower()
        if position in exact:
            return tier
        if any(position.startswith(p) for p in prefixes):
            return tier
    return None


def rank_submissions(
    entries: Sequence[Tuple[Submission, ScoreStatistics]],
    prize_tiers: Sequence[PrizeTier],
) -> List[RankedSubmission]:
    """
    Rank scored submissions by average score (highest first).
    Ties keep the earlier submission first.
    """
    scored = [(sub, stats) for sub, stats in entries if stats.judge_count > 0]
    scored.sort(
        key=lambda e: (-(e[1].average_score or 0.0), e[0].submitted_at or e[0].created_at)
    )

    out: List[RankedSubmission] = []
    for idx, (sub, stats) in enumerate(scored, start=1):
        tier = prize_for_rank(idx, prize_tiers)
        out.append(
            RankedSubmission(
                rank=idx,
                submission_id=sub.id or "",
                project_name=sub.project_name,
                average_score=stats.average_score or 0.0,
                judge_count=stats.judge_count,
                prize_amount=tier.amount if tier else None,
                currency=tier.currency if tier else None,
            )
        )
    return out
