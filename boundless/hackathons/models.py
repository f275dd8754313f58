# boundless/hackathons/models.py
from __future__ import annotations

import datetime as _dt
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from boundless.models import ApiModel
from boundless.utils import utc_now

# Hackathon lifecycle
STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

VENUE_PHYSICAL = "physical"
VENUE_VIRTUAL = "virtual"
VENUE_HYBRID = "hybrid"

PARTICIPANT_INDIVIDUAL = "individual"
PARTICIPANT_TEAM = "team"
PARTICIPANT_TEAM_OR_INDIVIDUAL = "team_or_individual"
TEAM_PARTICIPANT_TYPES = {PARTICIPANT_TEAM, PARTICIPANT_TEAM_OR_INDIVIDUAL}

# Submission lifecycle
SUB_DRAFT = "draft"
SUB_SUBMITTED = "submitted"
SUB_SHORTLISTED = "shortlisted"
SUB_GRADED = "graded"
SUB_DISQUALIFIED = "disqualified"

HackathonStatus = Literal["draft", "published", "active", "completed", "cancelled"]
VenueType = Literal["physical", "virtual", "hybrid"]
ParticipantType = Literal["individual", "team", "team_or_individual"]
RegistrationType = Literal["individual", "team"]
SubmissionStatus = Literal["draft", "submitted", "shortlisted", "graded", "disqualified"]


def _as_utc(value: Optional[_dt.datetime]) -> Optional[_dt.datetime]:
    # Naive timestamps are taken as UTC so every comparison is aware-vs-aware
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=_dt.timezone.utc)
    return value


def _as_list(value: Any) -> Any:
    if value is None or isinstance(value, list):
        return value
    return [value]


# ─────────────────────────────────────────────────────────────
# Hackathon building blocks
# ─────────────────────────────────────────────────────────────

class Venue(ApiModel):
    type: Optional[VenueType] = None
    # physical-only fields
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None


class Phase(ApiModel):
    name: str
    start_date: _dt.datetime
    end_date: _dt.datetime
    description: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_as_utc(cls, v):
        return _as_utc(v)


class PrizeTier(ApiModel):
    position: str = Field(..., min_length=1, description='"1st", "2nd Place", ...')
    amount: float = Field(..., ge=0)
    currency: str = "USDC"
    description: Optional[str] = None


class Criterion(ApiModel):
    title: str = Field(..., min_length=1)
    weight: float = Field(..., ge=0, le=100, description="Percentage weight")
    description: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Hackathon record (draft until published)
# ─────────────────────────────────────────────────────────────

class HackathonDraft(ApiModel):
    """
    Hackathon record assembled incrementally across the six editor tabs.
    Every content field is optional until publish time.
    """
    id: Optional[str] = Field(default=None, alias="_id")
    organization_id: Optional[str] = None
    status: HackathonStatus = STATUS_DRAFT
    slug: Optional[str] = None
    created_by: Optional[str] = None

    # information
    title: Optional[str] = None
    tagline: Optional[str] = None
    description: Optional[str] = None
    banner: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    venue: Optional[Venue] = None

    # timeline
    start_date: Optional[_dt.datetime] = None
    submission_deadline: Optional[_dt.datetime] = None
    judging_date: Optional[_dt.datetime] = None
    winner_announcement_date: Optional[_dt.datetime] = None
    timezone: Optional[str] = None
    phases: List[Phase] = Field(default_factory=list)

    # participation
    participant_type: Optional[ParticipantType] = None
    team_min: Optional[int] = None
    team_max: Optional[int] = None

    # rewards
    prize_tiers: List[PrizeTier] = Field(default_factory=list)

    # judging
    criteria: List[Criterion] = Field(default_factory=list)

    # collaboration
    contact_email: Optional[str] = None
    telegram: Optional[str] = None
    discord: Optional[str] = None
    social_links: List[str] = Field(default_factory=list)
    sponsors_partners: List[str] = Field(default_factory=list)

    created_at: _dt.datetime = Field(default_factory=utc_now)
    updated_at: _dt.datetime = Field(default_factory=utc_now)
    published_at: Optional[_dt.datetime] = None

    @field_validator(
        "start_date",
        "submission_deadline",
        "judging_date",
        "winner_announcement_date",
        "created_at",
        "updated_at",
        "published_at",
    )
    @classmethod
    def dates_as_utc(cls, v):
        return _as_utc(v)


# ─────────────────────────────────────────────────────────────
# Tab payloads (partial updates)
# ─────────────────────────────────────────────────────────────

class InformationTab(ApiModel):
    title: Optional[str] = None
    tagline: Optional[str] = None
    description: Optional[str] = None
    banner: Optional[str] = None
    categories: Optional[List[str]] = None
    venue: Optional[Venue] = None

    @field_validator("categories", mode="before")
    @classmethod
    def categories_as_list(cls, v):
        return _as_list(v)


class TimelineTab(ApiModel):
    start_date: Optional[_dt.datetime] = None
    submission_deadline: Optional[_dt.datetime] = None
    judging_date: Optional[_dt.datetime] = None
    winner_announcement_date: Optional[_dt.datetime] = None
    timezone: Optional[str] = None
    phases: Optional[List[Phase]] = None

    @field_validator(
        "start_date", "submission_deadline", "judging_date", "winner_announcement_date"
    )
    @classmethod
    def dates_as_utc(cls, v):
        return _as_utc(v)


class ParticipationTab(ApiModel):
    participant_type: Optional[ParticipantType] = None
    team_min: Optional[int] = Field(default=None, ge=1)
    team_max: Optional[int] = Field(default=None, ge=1)


class RewardsTab(ApiModel):
    prize_tiers: Optional[List[PrizeTier]] = None


class JudgingTab(ApiModel):
    criteria: Optional[List[Criterion]] = None


class CollaborationTab(ApiModel):
    contact_email: Optional[str] = None
    telegram: Optional[str] = None
    discord: Optional[str] = None
    social_links: Optional[List[str]] = None
    sponsors_partners: Optional[List[str]] = None


class DraftPayload(ApiModel):
    information: Optional[InformationTab] = None
    timeline: Optional[TimelineTab] = None
    participation: Optional[ParticipationTab] = None
    rewards: Optional[RewardsTab] = None
    judging: Optional[JudgingTab] = None
    collaboration: Optional[CollaborationTab] = None


class PublishRequest(DraftPayload):
    draft_id: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Registrations
# ─────────────────────────────────────────────────────────────

class Registration(ApiModel):
    id: Optional[str] = Field(default=None, alias="_id")
    hackathon_id: str
    organization_id: str
    user_id: str
    email: Optional[str] = None
    participation_type: RegistrationType = PARTICIPANT_INDIVIDUAL
    team_name: Optional[str] = None
    team_members: List[str] = Field(default_factory=list)
    registered_at: _dt.datetime = Field(default_factory=utc_now)
    updated_at: _dt.datetime = Field(default_factory=utc_now)


class RegistrationRequest(ApiModel):
    participation_type: RegistrationType = PARTICIPANT_INDIVIDUAL
    team_name: Optional[str] = Field(default=None, max_length=100)
    team_members: List[str] = Field(default_factory=list)


class PublicParticipant(ApiModel):
    """Registration as shown on the public hackathon page; no emails."""
    user_id: str
    participation_type: RegistrationType
    team_name: Optional[str] = None
    team_size: int = 1
    registered_at: _dt.datetime
    submitted: bool = False


# ─────────────────────────────────────────────────────────────
# Submissions
# ─────────────────────────────────────────────────────────────

class Submission(ApiModel):
    id: Optional[str] = Field(default=None, alias="_id")
    hackathon_id: str
    organization_id: str
    participant_id: str
    participant_email: Optional[str] = None
    project_name: str
    category: Optional[str] = None
    description: Optional[str] = None
    links: List[str] = Field(default_factory=list)
    status: SubmissionStatus = SUB_SUBMITTED
    submitted_at: Optional[_dt.datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[_dt.datetime] = None
    disqualification_reason: Optional[str] = None
    created_at: _dt.datetime = Field(default_factory=utc_now)
    updated_at: _dt.datetime = Field(default_factory=utc_now)


class SubmissionRequest(ApiModel):
    project_name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=5000)
    links: List[str] = Field(default_factory=list)
    save_as_draft: bool = False


class DisqualifyRequest(ApiModel):
    reason: str = Field(..., min_length=1, max_length=1000)


# ─────────────────────────────────────────────────────────────
# Judging
# ─────────────────────────────────────────────────────────────

class CriterionScore(ApiModel):
    criterion_title: str
    # Range is checked by compute_weighted_score so the error names the criterion
    score: float


class JudgingScore(ApiModel):
    id: Optional[str] = Field(default=None, alias="_id")
    submission_id: str
    judge_id: str
    judge_email: Optional[str] = None
    hackathon_id: Optional[str] = None
    organization_id: Optional[str] = None
    scores: List[CriterionScore]
    weighted_score: float
    notes: Optional[str] = None
    created_at: _dt.datetime = Field(default_factory=utc_now)
    updated_at: _dt.datetime = Field(default_factory=utc_now)


class ScoreStatistics(ApiModel):
    average_score: Optional[float] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    judge_count: int = 0


class GradeRequest(ApiModel):
    scores: List[CriterionScore]
    notes: Optional[str] = Field(default=None, max_length=1000)


class RankedSubmission(ApiModel):
    rank: int
    submission_id: str
    project_name: str
    average_score: float
    judge_count: int
    prize_amount: Optional[float] = None
    currency: Optional[str] = None
