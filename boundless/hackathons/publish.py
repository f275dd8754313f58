# boundless/hackathons/publish.py
"""
Draft editing + publish-time validation.

- apply_tab_update(): merge a six-tab partial payload onto a draft
- validate_publish_requirements(): collect every rule a draft breaks
- ensure_unique_slug(): "my-hack", "my-hack-1", "my-hack-2", ...

All functions here are pure; persistence lives in the routes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List

from boundless.hackathons.models import (
    TEAM_PARTICIPANT_TYPES,
    VENUE_PHYSICAL,
    DraftPayload,
    HackathonDraft,
)
from boundless.utils import slugify, utc_now

WEIGHT_TOLERANCE = Decimal("0.01")

_TABS = ("information", "timeline", "participation", "rewards", "judging", "collaboration")


@dataclass
class PublishValidation:
    valid: bool
    errors: List[str] = field(default_factory=list)


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _fmt_number(value: Decimal) -> str:
    # 90.0 -> "90", 99.5 -> "99.5"
    return ("%.2f" % value).rstrip("0").rstrip(".")


# ─────────────────────────────────────────────────────────────
# Tab merge
# ─────────────────────────────────────────────────────────────
def apply_tab_update(draft: HackathonDraft, payload: DraftPayload) -> HackathonDraft:
    """
    Flatten the tabs of `payload` onto `draft`.

    Only keys the client actually sent are applied, so a tab can be saved
    on its own without wiping the others.
    """
    updates: Dict[str, Any] = {}
    for tab_name in _TABS:
        tab = getattr(payload, tab_name)
        if tab is None:
            continue
        for name in tab.model_fields_set:
            value = getattr(tab, name)
            # Explicit nulls on list fields reset them to empty
            if value is None and name in {"categories", "phases", "prize_tiers", "criteria",
                                          "social_links", "sponsors_partners"}:
                value = []
            updates[name] = value

    if not updates:
        return draft
    updates["updated_at"] = utc_now()
    return draft.model_copy(update=updates)


# ─────────────────────────────────────────────────────────────
# Publish requirements
# ─────────────────────────────────────────────────────────────
def validate_publish_requirements(draft: HackathonDraft) -> PublishValidation:
    """
    Check every field and cross-field rule needed to publish.

    No short-circuit: the returned list holds one message per broken rule,
    in tab order.
    """
    errors: List[str] = []

    # Information tab
    if _blank(draft.title) or len(draft.title.strip()) < 3:
        errors.append("Title is required and must be at least 3 characters")
    if _blank(draft.banner):
        errors.append("Banner is required")
    if _blank(draft.tagline):
        errors.append("Tagline is required")
    if _blank(draft.description) or len(draft.description.strip()) < 10:
        errors.append("Description is required and must be at least 10 characters")
    if not [c for c in draft.categories if not _blank(c)]:
        errors.append("At least one category is required")

    venue = draft.venue
    if venue is None or not venue.type:
        errors.append("Venue type is required")
    elif venue.type == VENUE_PHYSICAL and any(
        _blank(v)
        for v in (venue.country, venue.state, venue.city, venue.venue_name, venue.venue_address)
    ):
        errors.append(
            "All physical venue fields (country, state, city, venue name, venue address) are required"
        )

    # Timeline tab
    if draft.start_date is None:
        errors.append("Start date is required")
    if draft.submission_deadline is None:
        errors.append("Submission deadline is required")
    if draft.judging_date is None:
        errors.append("Judging date is required")
    if draft.winner_announcement_date is None:
        errors.append("Winner announcement date is required")
    if _blank(draft.timezone):
        errors.append("Timezone is required")

    ordering = (
        (draft.start_date, draft.submission_deadline,
         "Submission deadline must be after start date"),
        (draft.submission_deadline, draft.judging_date,
         "Judging date must be after submission deadline"),
        (draft.judging_date, draft.winner_announcement_date,
         "Winner announcement date must be after judging date"),
    )
    for earlier, later, message in ordering:
        if earlier is not None and later is not None and earlier >= later:
            errors.append(message)

    # Participation tab
    if not draft.participant_type:
        errors.append("Participant type is required")
    if draft.participant_type in TEAM_PARTICIPANT_TYPES and (
        not draft.team_min or not draft.team_max
    ):
        errors.append("Team min and max are required when team participation is allowed")
    if draft.team_min and draft.team_max and draft.team_min > draft.team_max:
        errors.append("Team min must be less than or equal to team max")

    # Rewards tab
    if not draft.prize_tiers:
        errors.append("At least one prize tier is required")

    # Judging tab
    if not draft.criteria:
        errors.append("At least one judging criterion is required")
    else:
        # Scores are keyed by criterion title
        titles = [(c.title or "").strip().lower() for c in draft.criteria]
        if len(set(titles)) != len(titles):
            errors.append("Judging criteria titles must be unique")
        # Decimal keeps 59.99 + 40 at exactly 99.99
        total = sum((Decimal(str(c.weight)) for c in draft.criteria), Decimal(0))
        if abs(total - 100) > WEIGHT_TOLERANCE:
            errors.append(
                f"Judging criteria weights must sum to 100% (current: {_fmt_number(total)}%)"
            )

    # Collaboration tab
    if _blank(draft.contact_email):
        errors.append("Contact email is required")

    return PublishValidation(valid=not errors, errors=errors)


# ─────────────────────────────────────────────────────────────
# Slugs
# ─────────────────────────────────────────────────────────────
def ensure_unique_slug(title: str, slug_taken: Callable[[str], bool]) -> str:
    base = slugify(title)
    slug = base
    counter = 1
    while slug_taken(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
