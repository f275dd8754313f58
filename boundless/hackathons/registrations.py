# boundless/hackathons/registrations.py
"""
Participant registration rules.

A participant registers once per hackathon, either alone or as the leader of
a named team, and must be registered before submitting a project.
"""

from __future__ import annotations

from typing import List, Optional

from boundless.errors import StateError, ValidationError
from boundless.hackathons.models import (
    PARTICIPANT_INDIVIDUAL,
    PARTICIPANT_TEAM,
    PARTICIPANT_TEAM_OR_INDIVIDUAL,
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    STATUS_PUBLISHED,
    HackathonDraft,
    Registration,
    RegistrationRequest,
)
from boundless.utils import utc_now

# Registration and submission are accepted in these states
OPEN_STATUSES = frozenset({STATUS_PUBLISHED, STATUS_ACTIVE})

# Visible on the public pages
PUBLIC_STATUSES = frozenset({STATUS_PUBLISHED, STATUS_ACTIVE, STATUS_COMPLETED})

_ALLOWED_TYPES = {
    PARTICIPANT_INDIVIDUAL: {PARTICIPANT_INDIVIDUAL},
    PARTICIPANT_TEAM: {PARTICIPANT_TEAM},
    PARTICIPANT_TEAM_OR_INDIVIDUAL: {PARTICIPANT_INDIVIDUAL, PARTICIPANT_TEAM},
}


def ensure_open(hackathon: HackathonDraft, action: str) -> None:
    """
    Raise StateError unless `hackathon` is published/active and its
    submission deadline has not passed. `action` names what was attempted.
    """
    if hackathon.status not in OPEN_STATUSES:
        raise StateError(f"Hackathon is not accepting {action} (status: {hackathon.status})")
    if hackathon.submission_deadline is not None and utc_now() > hackathon.submission_deadline:
        raise StateError("The submission deadline has passed")


def _team_members(leader_email: Optional[str], emails: List[str]) -> List[str]:
    leader = (leader_email or "").strip().lower()
    members: List[str] = []
    for email in emails:
        email = (email or "").strip().lower()
        if email and email != leader and email not in members:
            members.append(email)
    return members


def build_registration(
    hackathon: HackathonDraft,
    user_id: str,
    email: Optional[str],
    req: RegistrationRequest,
) -> Registration:
    allowed = _ALLOWED_TYPES.get(hackathon.participant_type or PARTICIPANT_INDIVIDUAL, set())
    if req.participation_type not in allowed:
        raise ValidationError(
            f"This hackathon does not allow {req.participation_type} participation"
        )

    team_name = None
    members: List[str] = []
    if req.participation_type == PARTICIPANT_TEAM:
        team_name = (req.team_name or "").strip()
        if not team_name:
            raise ValidationError("Team name is required for team participation")
        members = _team_members(email, req.team_members)
        # The leader counts towards the team size
        if hackathon.team_max and len(members) + 1 > hackathon.team_max:
            raise ValidationError(f"Team cannot have more than {hackathon.team_max} members")

    return Registration(
        hackathon_id=hackathon.id or "",
        organization_id=hackathon.organization_id or "",
        user_id=user_id,
        email=email,
        participation_type=req.participation_type,
        team_name=team_name,
        team_members=members,
    )
