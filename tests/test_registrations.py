import datetime as dt

import pytest

from boundless.errors import StateError, ValidationError
from boundless.hackathons.models import HackathonDraft, RegistrationRequest
from boundless.hackathons.registrations import build_registration, ensure_open


def _hackathon(**overrides):
    base = dict(
        _id="h1",
        organization_id="org-1",
        status="published",
        participant_type="team_or_individual",
        team_min=1,
        team_max=3,
        submission_deadline=dt.datetime(2100, 1, 1, tzinfo=dt.timezone.utc),
    )
    base.update(overrides)
    return HackathonDraft(**base)


def test_ensure_open_rejects_past_deadline():
    past = _hackathon(submission_deadline=dt.datetime(2000, 1, 1, tzinfo=dt.timezone.utc))
    with pytest.raises(StateError, match="deadline has passed"):
        ensure_open(past, "registrations")


@pytest.mark.parametrize("status", ["draft", "completed", "cancelled"])
def test_ensure_open_rejects_closed_status(status):
    with pytest.raises(StateError, match="not accepting registrations"):
        ensure_open(_hackathon(status=status), "registrations")


def test_team_at_max_size_is_accepted():
    req = RegistrationRequest(participation_type="team", team_name="Orbiters", team_members=["b@x.io", "c@x.io"])
    reg = build_registration(_hackathon(), "u1", "a@x.io", req)
    assert reg.team_members == ["b@x.io", "c@x.io"]
    assert reg.hackathon_id == "h1"
    assert reg.organization_id == "org-1"


def test_team_over_max_size_is_rejected():
    req = RegistrationRequest(
        participation_type="team", team_name="Orbiters", team_members=["b@x.io", "c@x.io", "d@x.io"]
    )
    with pytest.raises(ValidationError, match="more than 3 members"):
        build_registration(_hackathon(), "u1", "a@x.io", req)


def test_individual_ignores_team_fields():
    req = RegistrationRequest(team_name="Ignored", team_members=["b@x.io"])
    reg = build_registration(_hackathon(), "u1", "a@x.io", req)
    assert reg.team_name is None
    assert reg.team_members == []


def test_team_only_hackathon_rejects_individuals():
    with pytest.raises(ValidationError, match="does not allow individual participation"):
        build_registration(_hackathon(participant_type="team"), "u1", "a@x.io", RegistrationRequest())
