# boundless/policy.py
"""
Organization-scoped authorization.

One table, one evaluation function: every handler asks
evaluate(role, resource, action) instead of comparing owner/admin emails
inline.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Optional, Tuple

from boundless.errors import PermissionDeniedError
from boundless.models import Organization

logger = logging.getLogger("boundless-api.policy")

ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"

ALLOW = "allow"
DENY = "deny"

_ALL = frozenset({ROLE_OWNER, ROLE_ADMIN, ROLE_MEMBER})
_MANAGERS = frozenset({ROLE_OWNER, ROLE_ADMIN})
_OWNER = frozenset({ROLE_OWNER})

# (resource, action) -> roles allowed
POLICY: Dict[Tuple[str, str], FrozenSet[str]] = {
    ("organization", "view"): _ALL,
    ("organization", "update_profile"): _MANAGERS,
    ("organization", "manage_members"): _MANAGERS,
    ("organization", "assign_roles"): _OWNER,
    ("organization", "delete"): _OWNER,
    ("hackathon", "manage"): _MANAGERS,
    ("hackathon", "publish"): _MANAGERS,
    ("hackathon", "delete"): _MANAGERS,
    ("hackathon", "view_analytics"): _ALL,
    ("submission", "review"): _MANAGERS,
    ("submission", "grade"): _MANAGERS,
    ("submission", "view_scores"): _MANAGERS,
}


def role_for(organization: Organization, email: str) -> Optional[str]:
    email = (email or "").strip().lower()
    if not email:
        return None
    if organization.owner.lower() == email:
        return ROLE_OWNER
    if email in {a.lower() for a in organization.admins}:
        return ROLE_ADMIN
    if email in {m.lower() for m in organization.members}:
        return ROLE_MEMBER
    return None


def evaluate(subject_role: Optional[str], resource: str, action: str) -> str:
    """
    Unknown (resource, action) pairs are denied.
    """
    allowed = POLICY.get((resource, action))
    if allowed is None or subject_role is None:
        return DENY
    return ALLOW if subject_role in allowed else DENY


def authorize(organization: Organization, email: str, resource: str, action: str) -> str:
    """
    Raise PermissionDeniedError unless the caller may perform `action`.
    Returns the caller's role.
    """
    role = role_for(organization, email)
    if evaluate(role, resource, action) == DENY:
        logger.info(
            "Denied %s/%s on organization %s for %s (role=%s)",
            resource, action, organization.id, email, role,
        )
        raise PermissionDeniedError(
            f"Your role in this organization does not allow '{action}' on {resource}"
        )
    return role
