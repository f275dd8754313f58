# boundless/auth.py
"""
Caller identity.

Authentication itself is done upstream by the auth provider / gateway, which
forwards the verified identity as headers:

    X-User-Id:    <user id>
    X-User-Email: <email>
    X-User-Roles: <comma separated platform roles>   (optional)

Handlers receive an explicit AuthContext instead of reading request state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from fastapi import Depends, Header

from boundless.errors import AuthenticationRequiredError


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    user_id: str
    email: str
    roles: Tuple[str, ...] = ()


AuthContext = Union[Anonymous, Authenticated]


def context_from_headers(
    user_id: Optional[str], email: Optional[str], roles: Optional[str] = None
) -> AuthContext:
    uid = (user_id or "").strip()
    mail = (email or "").strip().lower()
    if not uid or not mail:
        return Anonymous()
    parsed = tuple(r.strip().lower() for r in (roles or "").split(",") if r.strip())
    return Authenticated(user_id=uid, email=mail, roles=parsed)


def get_auth_context(
    x_user_id: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    x_user_roles: Optional[str] = Header(default=None),
) -> AuthContext:
    return context_from_headers(x_user_id, x_user_email, x_user_roles)


def require_user(ctx: AuthContext = Depends(get_auth_context)) -> Authenticated:
    if not isinstance(ctx, Authenticated):
        raise AuthenticationRequiredError("Authentication required")
    return ctx
