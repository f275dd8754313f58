import datetime as dt

import pytest

from boundless.hackathons.models import Criterion, DraftPayload, HackathonDraft, PrizeTier, Venue
from boundless.hackathons.publish import (
    apply_tab_update,
    ensure_unique_slug,
    validate_publish_requirements,
)


def _utc(*args):
    return dt.datetime(*args, tzinfo=dt.timezone.utc)


@pytest.fixture
def complete_draft():
    return HackathonDraft(
        title="Stellar Build Week",
        tagline="Ship it",
        description="A week-long hackathon for builders.",
        banner="https://cdn.example.com/banner.png",
        categories=["DeFi"],
        venue=Venue(type="virtual"),
        start_date=_utc(2030, 1, 1),
        submission_deadline=_utc(2030, 2, 1),
        judging_date=_utc(2030, 3, 1),
        winner_announcement_date=_utc(2030, 4, 1),
        timezone="UTC",
        participant_type="individual",
        prize_tiers=[PrizeTier(position="1st", amount=1000)],
        criteria=[Criterion(title="A", weight=60), Criterion(title="B", weight=40)],
        contact_email="team@example.com",
    )


def test_complete_draft_is_publishable(complete_draft):
    result = validate_publish_requirements(complete_draft)
    assert result.valid is True
    assert result.errors == []


def test_empty_draft_reports_every_missing_field():
    result = validate_publish_requirements(HackathonDraft())

    assert result.valid is False
    for message in (
        "Title is required and must be at least 3 characters",
        "Banner is required",
        "Tagline is required",
        "Description is required and must be at least 10 characters",
        "At least one category is required",
        "Venue type is required",
        "Start date is required",
        "Submission deadline is required",
        "Judging date is required",
        "Winner announcement date is required",
        "Timezone is required",
        "Participant type is required",
        "At least one prize tier is required",
        "At least one judging criterion is required",
        "Contact email is required",
    ):
        assert message in result.errors
    # No ordering checks without dates
    assert not any("must be after" in e for e in result.errors)


def test_two_missing_fields_both_reported(complete_draft):
    draft = complete_draft.model_copy(update={"banner": None, "contact_email": ""})
    result = validate_publish_requirements(draft)
    assert result.errors == ["Banner is required", "Contact email is required"]


def test_short_title_and_description(complete_draft):
    draft = complete_draft.model_copy(update={"title": "  ab ", "description": "too short"})
    errors = validate_publish_requirements(draft).errors
    assert "Title is required and must be at least 3 characters" in errors
    assert "Description is required and must be at least 10 characters" in errors


@pytest.mark.parametrize("deadline", [_utc(2030, 1, 1), _utc(2029, 12, 31)])
def test_deadline_not_after_start(complete_draft, deadline):
    draft = complete_draft.model_copy(update={"submission_deadline": deadline})
    assert "Submission deadline must be after start date" in validate_publish_requirements(draft).errors


def test_full_temporal_chain(complete_draft):
    draft = complete_draft.model_copy(
        update={
            "judging_date": _utc(2030, 1, 15),
            "winner_announcement_date": _utc(2030, 1, 10),
        }
    )
    errors = validate_publish_requirements(draft).errors
    assert "Judging date must be after submission deadline" in errors
    assert "Winner announcement date must be after judging date" in errors
    assert "Submission deadline must be after start date" not in errors


def test_ordering_skipped_when_operand_missing(complete_draft):
    draft = complete_draft.model_copy(update={"submission_deadline": None})
    errors = validate_publish_requirements(draft).errors
    assert "Submission deadline is required" in errors
    assert "Submission deadline must be after start date" not in errors
    assert "Judging date must be after submission deadline" not in errors


def test_physical_venue_needs_address_fields(complete_draft):
    draft = complete_draft.model_copy(update={"venue": Venue(type="physical", country="NG", city="Lagos")})
    errors = validate_publish_requirements(draft).errors
    assert (
        "All physical venue fields (country, state, city, venue name, venue address) are required"
        in errors
    )


def test_hybrid_venue_needs_only_type(complete_draft):
    draft = complete_draft.model_copy(update={"venue": Venue(type="hybrid")})
    assert validate_publish_requirements(draft).valid


def test_team_bounds(complete_draft):
    missing = complete_draft.model_copy(update={"participant_type": "team"})
    assert (
        "Team min and max are required when team participation is allowed"
        in validate_publish_requirements(missing).errors
    )

    inverted = complete_draft.model_copy(
        update={"participant_type": "team", "team_min": 5, "team_max": 2}
    )
    assert validate_publish_requirements(inverted).errors == [
        "Team min must be less than or equal to team max"
    ]


@pytest.mark.parametrize(
    "weights, ok",
    [
        ((60, 40), True),
        ((59.99, 40), True),
        ((33.33, 33.33, 33.34), True),
        ((50, 40), False),
    ],
)
def test_weight_sum_tolerance(complete_draft, weights, ok):
    criteria = [Criterion(title=f"C{i}", weight=w) for i, w in enumerate(weights)]
    errors = validate_publish_requirements(complete_draft.model_copy(update={"criteria": criteria})).errors
    weight_errors = [e for e in errors if "weights must sum" in e]
    assert (weight_errors == []) is ok


def test_weight_error_names_actual_total(complete_draft):
    criteria = [Criterion(title="A", weight=50), Criterion(title="B", weight=40)]
    errors = validate_publish_requirements(complete_draft.model_copy(update={"criteria": criteria})).errors
    assert "Judging criteria weights must sum to 100% (current: 90%)" in errors


def test_apply_tab_update_only_touches_sent_fields(complete_draft):
    payload = DraftPayload.model_validate(
        {"information": {"title": "Renamed Hack"}, "collaboration": {"discord": "https://discord.gg/x"}}
    )
    updated = apply_tab_update(complete_draft, payload)

    assert updated.title == "Renamed Hack"
    assert updated.discord == "https://discord.gg/x"
    assert updated.tagline == complete_draft.tagline
    assert updated.criteria == complete_draft.criteria


def test_apply_tab_update_accepts_single_category_and_naive_dates():
    payload = DraftPayload.model_validate(
        {
            "information": {"categories": "DeFi"},
            "timeline": {"startDate": "2030-01-01T09:00:00"},
        }
    )
    updated = apply_tab_update(HackathonDraft(), payload)
    assert updated.categories == ["DeFi"]
    assert updated.start_date.tzinfo is not None


def test_ensure_unique_slug():
    taken = {"stellar-build-week", "stellar-build-week-1"}
    assert ensure_unique_slug("Stellar Build Week!", taken.__contains__) == "stellar-build-week-2"
    assert ensure_unique_slug("Fresh Hack", taken.__contains__) == "fresh-hack"


def test_criteria_titles_must_be_unique(complete_draft):
    criteria = [Criterion(title="Impact", weight=50), Criterion(title="impact ", weight=50)]
    errors = validate_publish_requirements(complete_draft.model_copy(update={"criteria": criteria})).errors
    assert errors == ["Judging criteria titles must be unique"]
